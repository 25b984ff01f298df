"""금지 패턴/안전 응답 사전 (Guardrail Dictionary).

카테고리별 탐지 패턴 테이블, 배포 프로필, 차단 시 사용자에게 돌려줄 안전 응답.
패턴은 정규화된 텍스트(소문자, 공백 1칸)에 대해 단어 경계(\\b)로 매칭된다.
정책 튜닝은 이 파일만 수정하면 된다 (평가 로직은 filter.py / checker.py).
"""

from __future__ import annotations

from src.types import ContentCategory


# --- 공통 어휘 (Shared vocabulary) ---

# 명사형만. 형용사 "minor"(a minor detail)는 제외
_MINOR_NOUNS = (
    r"(?:child|children|kid|kids|minors|underage (?:girl|boy|teen)s?|preteens?|pre-teens?|toddlers?|"
    r"schoolgirls?|schoolboys?|little (?:girl|boy)s?|young teens?|"
    r"(?:[1-9]|1[0-7])[- ]?(?:year|yr)s?[- ]olds?(?: (?:girl|boy|child|kid)s?)?)"
)
# 행위의 목적어 앞 한정사
_DETERMINERS = r"(?:(?:a|an|the|my|his|her|their|your|this|that|some|young|little) )*"
# 소유격(my kid's teacher)과 형용사 용법(a minor character)은 목적어가 아니다
_MINOR_OBJECT = (
    _DETERMINERS
    + r"(?:" + _MINOR_NOUNS + r"|minor(?! (?:character|characters|role|detail|details|part|scene|league|key|chord|injury|issue)))(?!')"
)
# 미성년자를 목적어로 하는 성적 행위
_SEXUAL_ACTS = (
    r"(?:sex|sexual (?:acts?|contact|relations)|intercourse|(?:make|making|made) out) with"
)
_SEXUAL_ABUSE_VERBS = (
    r"(?:molest|molested|molesting|molests|rape|raped|raping|rapes|"
    r"sexually (?:abuse|abused|abusing|touch|touched|touching)|sexualiz\w*|sexualis\w*)"
)
_SEXUAL_MEDIA = (
    r"(?:nude|nudes|naked|explicit|erotic|pornographic|porn|sexual|sexy) "
    r"(?:photos?|pictures?|pics|images?|videos?|content|material|stories|story|scenes?)"
)
_HARM_TERMS = (
    r"(?:bomb|bombs|pipe bomb|explosive|explosives|detonator|grenade|weapon|weapons|gun|guns|"
    r"firearm|silencer|napalm|molotov|poison|poisons|nerve agent|ricin|sarin|anthrax|"
    r"meth|methamphetamine)"
)
_HOW_TO = r"(?:how (?:to|do i|do you|can i|would i|should i)|teach me to|show me how to)"
# 사람에게만 쓰이는 동사. burn/destroy는 사물 목적어가 흔해 제외
_THREAT_VERBS = r"(?:kill|murder|hurt|shoot|stab|strangle|beat up)"
_TARGETS = r"(?:you|him|her|them|u|ya|everyone|all of you|your family|you all)"
# "kill them with kindness" 같은 관용구
_IDIOM_TAIL = r"(?! with kindness| with compliments)"
_PEOPLE = (
    r"(?:" + _TARGETS + r"|(?:all |those |these |the )?(?:\w+ )?"
    r"(?:people|men|women|immigrants|foreigners|bastards|guys|traitors))"
)


# --- 탐지 패턴 (Detection Patterns) ---
# 카테고리당 정규식 목록. checker가 CATEGORY_PRECEDENCE 순서로 평가한다.

DETECTION_PATTERNS: dict[ContentCategory, list[str]] = {
    ContentCategory.SEXUAL_MINORS: [
        _SEXUAL_ACTS + r" " + _MINOR_OBJECT,
        _SEXUAL_ABUSE_VERBS + r" " + _MINOR_OBJECT,
        _SEXUAL_MEDIA + r" (?:of|with|involving|featuring) " + _MINOR_OBJECT,
        _MINOR_NOUNS + r" (?:having sex|having intercourse|performing sexual acts|posing nude|posing naked)",
        r"underage (?:sex|nudes?|porn\w*|erotica)",
        r"child (?:porn|pornography|sexual abuse material)",
        r"csam",
        r"lolicon|shotacon",
    ],
    ContentCategory.INSTRUCTIONAL_HARM: [
        _HOW_TO + r" (?:make|build|assemble|create|manufacture|cook|synthesize|get|buy|obtain|3d print)"
        r" (?:a |an |some |my own |homemade )?" + _HARM_TERMS,
        _HOW_TO + r" get away with",
        _HOW_TO + r" (?:kill|poison|murder|hurt|stab|shoot|kidnap) (?:someone|somebody|a person|people|my \w+)",
        _HOW_TO + r" (?:evade|avoid|escape|hide from|outrun|lose) (?:the )?(?:police|cops|law enforcement|fbi|detection)",
        _HOW_TO + r" (?:dispose of|get rid of|hide|bury) (?:a |the )?(?:body|bodies|corpse|evidence)",
        r"step[- ]by[- ]step\b.{0,80}\b" + _HARM_TERMS,
        _HARM_TERMS + r"\b.{0,80}\bstep[- ]by[- ]step",
        r"(?:materials|ingredients|supplies) (?:needed|required|list)\b.{0,80}\b" + _HARM_TERMS,
        _HARM_TERMS + r"\b.{0,80}\b(?:materials|ingredients|supplies) (?:needed|required)",
        r"(?:instructions|recipe|blueprint|tutorial) (?:for|to|on) (?:making|building|assembling) (?:a |an )?" + _HARM_TERMS,
    ],
    ContentCategory.TARGETED_THREAT: [
        r"i(?: will|'ll| am going to|'m going to| am gonna|'m gonna| want to| wanna) " + _THREAT_VERBS + r" " + _TARGETS + _IDIOM_TAIL,
        r"(?:someone|somebody|anyone|we|you all|people) (?:should|needs? to|ought to) "
        + _THREAT_VERBS + r" " + _PEOPLE + _IDIOM_TAIL,
        r"i know where (?:you|he|she|they) (?:live|lives|work|works|sleep)",
        r"(?:kill|exterminate|wipe out|shoot) all (?:the |those )?(?:\w+ )?(?:people|men|women|immigrants|foreigners|humans|of them)",
        r"you(?:'re| are) (?:going to|gonna) die",
        r"(?:watch your back|you(?:'ll| will) regret this)",
    ],
    ContentCategory.SELF_HARM: [
        r"kill(?:ing)? myself",
        r"end(?:ing)? (?:my|my own) life",
        r"end(?:ing)? it all",
        r"take (?:my|my own) life",
        r"suicid\w*",
        r"self[- ]?harm\w*",
        r"(?:cut|cutting|hurt|hurting|harm|harming) (?:myself|herself|himself|themselves)",
        r"(?:want|wanting|wanted|wish|wishing) to die",
        r"(?:not|don't|do not|doesn't|does not|didn't|never) (?:want|wanting|wanted|wish|wishing) to (?:live|be alive|exist|wake up)",
        r"(?:no|no longer any|nothing to|no more) reason to live",
        r"better off dead",
        r"(?:overdose|od) on",
    ],
    ContentCategory.HARASSMENT: [
        r"threat|attack|harm|kill|hurt",
        r"you(?:'re| are) (?:worthless|pathetic|disgusting)",
        r"nobody (?:likes|loves|wants) you",
    ],
    ContentCategory.HATE_SPEECH: [
        r"racist|sexist|bigot|bigoted|homophobic|transphobic|xenophobic",
        r"inferior (?:race|races|people)",
        r"subhuman",
        r"ethnic cleansing",
        r"go back to (?:your|their) (?:own )?country",
        r"white power|white supremacy",
    ],
    ContentCategory.SEXUAL: [
        r"explicit sexual content",
        r"(?:graphic|explicit) (?:sex|sexual)\w*",
        r"porn\w*",
        r"erotica|erotic (?:scene|story|roleplay)",
        r"sex scene",
        r"nude (?:photos|pictures|pics)",
    ],
    ContentCategory.DANGEROUS: [
        r"bombs?|weapons?|explosives?|terroris[mt]s?",
        r"grenades?|detonators?|firearms?",
    ],
}


# --- 차단 사유 (Reasons) ---
# GuardrailVerdict.reason — 로그/진단용. 입력 텍스트를 인용하지 않는다.

DETECTION_REASONS: dict[ContentCategory, str] = {
    ContentCategory.SEXUAL_MINORS: "Content sexualizes minors",
    ContentCategory.INSTRUCTIONAL_HARM: "Content requests operational instructions for violence, weapons or evading law enforcement",
    ContentCategory.TARGETED_THREAT: "Content contains a direct threat or incitement against a person or group",
    ContentCategory.SELF_HARM: "Content indicates suicidal ideation or intent to self-harm",
    ContentCategory.HARASSMENT: "Content contains threatening or harassing language",
    ContentCategory.HATE_SPEECH: "Content contains hate speech",
    ContentCategory.SEXUAL: "Content contains inappropriate sexual content",
    ContentCategory.DANGEROUS: "Content contains dangerous or illegal activity references",
    ContentCategory.SPAM: "Content exceeds maximum length",
}


# --- 안전 응답 (Safe Responses) ---
# 차단 시 사용자에게 그대로 노출되는 고정 문구.

SAFE_RESPONSES: dict[ContentCategory, str] = {
    ContentCategory.SEXUAL_MINORS: (
        "I can't help with this. Content that sexualizes minors is never permitted."
    ),
    ContentCategory.INSTRUCTIONAL_HARM: (
        "I can't provide instructions for causing harm, making weapons, or evading law enforcement. "
        "I'm happy to help you write the scene itself without the how-to details."
    ),
    ContentCategory.TARGETED_THREAT: (
        "I can't help with content that threatens or encourages violence against a real person or group."
    ),
    ContentCategory.SELF_HARM: (
        "I'm not able to help with this request, but it sounds like you might be going through "
        "something really hard. Please consider reaching out to someone you trust, or contact a "
        "local crisis line or emergency services. In the US you can call or text 988. "
        "You don't have to face this alone."
    ),
    ContentCategory.HARASSMENT: (
        "I cannot process content that contains threatening or harassing language."
    ),
    ContentCategory.HATE_SPEECH: (
        "I cannot process content that contains hate speech or discriminatory language."
    ),
    ContentCategory.SEXUAL: "I cannot process content that contains inappropriate sexual content.",
    ContentCategory.DANGEROUS: "I cannot process content that references dangerous or illegal activities.",
    ContentCategory.SPAM: "The content is too long or appears to be spam.",
    ContentCategory.ALLOWED: "Content is allowed.",
}

FALLBACK_SAFE_RESPONSE = "I cannot process this content."


# --- 배포 프로필 (Deployment Profiles) ---
# strict: 키워드 중심 차단 / narrative: 서사 허용, 실행 지침·직접 위협·자해만 차단

_STRICT = frozenset({
    ContentCategory.SEXUAL_MINORS,
    ContentCategory.HARASSMENT,
    ContentCategory.HATE_SPEECH,
    ContentCategory.SEXUAL,
    ContentCategory.DANGEROUS,
    ContentCategory.SPAM,
})

_NARRATIVE = frozenset({
    ContentCategory.SEXUAL_MINORS,
    ContentCategory.INSTRUCTIONAL_HARM,
    ContentCategory.TARGETED_THREAT,
    ContentCategory.SELF_HARM,
    ContentCategory.SPAM,
})

PROFILES: dict[str, frozenset[ContentCategory]] = {
    "strict": _STRICT,
    "narrative": _NARRATIVE,
    "full": frozenset(c for c in ContentCategory if c != ContentCategory.ALLOWED),
}

DEFAULT_PROFILE = "narrative"
DEFAULT_MAX_LENGTH = 10_000


def get_patterns(category: ContentCategory) -> list[str]:
    """카테고리의 탐지 패턴 목록을 반환한다."""
    return DETECTION_PATTERNS.get(category, [])


def get_reason(category: ContentCategory) -> str:
    return DETECTION_REASONS.get(category, "")


def get_profile(name: str) -> frozenset[ContentCategory]:
    """프로필 이름으로 활성 카테고리 집합을 반환한다.

    Raises:
        ValueError: 알 수 없는 프로필 이름
    """
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown guardrail profile '{name}' (expected one of: {', '.join(sorted(PROFILES))})"
        ) from None


def parse_category(value: ContentCategory | str) -> ContentCategory | None:
    """카테고리 값 또는 문자열을 ContentCategory로 변환한다.

    'hate-speech' 같은 하이픈 표기도 허용한다. 알 수 없는 값이면 None.
    """
    if isinstance(value, ContentCategory):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ContentCategory(value.strip().lower().replace("-", "_"))
    except ValueError:
        return None


def safe_response_for(category: ContentCategory | str) -> str:
    """차단 카테고리에 대응하는 안전 응답을 반환한다. 알 수 없는 값은 기본 문구."""
    parsed = parse_category(category)
    if parsed is None:
        return FALLBACK_SAFE_RESPONSE
    return SAFE_RESPONSES.get(parsed, FALLBACK_SAFE_RESPONSE)
