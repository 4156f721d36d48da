"""
Instruction profiles for counseling translation.

Each translation direction has one profile: a system instruction that
embeds a shared glossary of psychological terms so that clinical vocabulary
is rendered consistently in both directions.
"""

from dataclasses import dataclass

# English term -> Traditional Chinese (Taiwan) term
GLOSSARY: dict[str, str] = {
    "anxiety": "焦慮",
    "depression": "憂鬱",
    "trauma": "創傷",
    "PTSD": "創傷後壓力症候群",
    "attachment": "依附關係",
    "transference": "移情",
    "countertransference": "反移情",
    "cognitive behavioral therapy (CBT)": "認知行為治療",
    "mindfulness": "正念",
    "self-esteem": "自尊",
    "boundaries": "界限",
    "coping mechanism": "因應機制",
    "dissociation": "解離",
    "grief": "哀傷/悲傷",
    "panic attack": "恐慌發作",
    "phobia": "恐懼症",
    "obsessive-compulsive": "強迫症",
    "bipolar": "雙相情緒障礙",
    "schizophrenia": "思覺失調症",
    "eating disorder": "飲食障礙",
    "substance abuse": "物質濫用",
    "suicidal ideation": "自殺意念",
    "self-harm": "自傷",
    "therapeutic alliance": "治療同盟",
    "empathy": "同理心",
    "unconditional positive regard": "無條件正向關懷",
}


def render_glossary(glossary: dict[str, str] | None = None) -> str:
    """Render the glossary as one `- english: 中文` line per term."""
    terms = GLOSSARY if glossary is None else glossary
    return "\n".join(f"- {en}: {zh}" for en, zh in terms.items())


@dataclass(frozen=True)
class InstructionProfile:
    """System instruction and sampling settings for one direction."""

    direction: str
    source_language: str
    target_language: str
    system_prompt: str
    temperature: float = 0.3
    max_tokens: int = 500


_EN_TO_ZH_PROMPT = f"""You are a professional interpreter for psychological counseling sessions.
Translate the following English text into Traditional Chinese as used in Taiwan.

Guidelines:
1. Use Traditional Chinese characters and Taiwan terminology.
2. Preserve the speaker's tone and emotional nuance.
3. Use the professional terms below for psychological concepts.
4. If the speaker hesitates, use "..." to show the pause.
5. Output ONLY the translation, with no explanations or notes.
6. Keep the first person perspective (我、你) exactly as spoken.
7. Be natural and conversational while remaining professional.
8. Be concise.

Psychological terms:
{render_glossary()}"""

_ZH_TO_EN_PROMPT = f"""You are a professional interpreter for psychological counseling sessions.
Translate the following Chinese text into natural English.

Guidelines:
1. Preserve the speaker's tone and emotional nuance.
2. Use the professional terms below for psychological concepts.
3. If the speaker hesitates, use "..." to show the pause.
4. Output ONLY the translation, with no explanations or notes.
5. Keep the first person perspective (I, you) exactly as spoken.
6. Be natural and conversational while remaining professional.
7. Be concise.

Psychological terms:
{render_glossary()}"""


PROFILES: dict[str, InstructionProfile] = {
    "en-to-zh": InstructionProfile(
        direction="en-to-zh",
        source_language="en",
        target_language="zh",
        system_prompt=_EN_TO_ZH_PROMPT,
    ),
    "zh-to-en": InstructionProfile(
        direction="zh-to-en",
        source_language="zh",
        target_language="en",
        system_prompt=_ZH_TO_EN_PROMPT,
    ),
}


def get_profile(direction: str) -> InstructionProfile:
    """Look up the instruction profile for a direction.

    Raises:
        KeyError: If the direction has no profile.
    """
    try:
        return PROFILES[direction]
    except KeyError:
        raise KeyError(
            f"No translation profile for direction '{direction}'. "
            f"Supported: {', '.join(sorted(PROFILES))}"
        ) from None
