"""Helpers to construct system/user prompts for the analysis LLM.

Given a counseling mode, both partners' transcripts, and whether the input
came from one live argument or two separate statements, we emit:
* A system prompt describing the persona and the response length cap.
* A user prompt with an intro line, one labelled bullet per partner, and the
  mode-specific ``**FORMAT**`` section the model has to follow.

The builder is pure: identical inputs always yield identical strings.
"""

from __future__ import annotations

from typing import Mapping

from .types import CounselingMode, PromptBundle

MAX_RESPONSE_WORDS = 150

SYSTEM_PROMPTS: Mapping[CounselingMode, str] = {
    CounselingMode.EVALUATOR: (
        "You are a direct and decisive relationship analyst. You will analyze "
        "disagreements between two partners. Start with a clear verdict, then "
        "explain who has the stronger position and why. "
        f"Keep responses under {MAX_RESPONSE_WORDS} words."
    ),
    CounselingMode.COUNSELOR: (
        "You are a calm and constructive relationship counselor. You will help "
        "two partners understand each other's side of a disagreement. Start "
        "with a clear verdict, then provide actionable communication advice. "
        f"Keep responses under {MAX_RESPONSE_WORDS} words."
    ),
    CounselingMode.DINNER: (
        "You are a decisive meal planning assistant. You will be provided with "
        "food preferences or discussion points from two partners. Recommend a "
        "specific meal, starting with a clear verdict, and justify it. "
        f"Keep responses under {MAX_RESPONSE_WORDS} words."
    ),
    CounselingMode.ENTERTAINMENT: (
        "You are a decisive entertainment recommender. You will be provided "
        "with entertainment preferences or discussion points from two partners. "
        "Recommend a specific show or movie, starting with a clear pick, and "
        f"justify it. Keep responses under {MAX_RESPONSE_WORDS} words."
    ),
}

# (mode, is_live_argument) -> intro line
INTRO_TEMPLATES: Mapping[tuple[CounselingMode, bool], str] = {
    (CounselingMode.EVALUATOR, True): (
        "Analyze the following key points from a live argument between {partner1} and {partner2}:"
    ),
    (CounselingMode.EVALUATOR, False): (
        "Analyze the following perspectives from {partner1} and {partner2}:"
    ),
    (CounselingMode.COUNSELOR, True): (
        "Analyze the following key points from a live argument between {partner1} and {partner2}:"
    ),
    (CounselingMode.COUNSELOR, False): (
        "Analyze the following perspectives from {partner1} and {partner2}:"
    ),
    (CounselingMode.DINNER, True): (
        "Based on the following key points from {partner1} and {partner2}'s dinner discussion:"
    ),
    (CounselingMode.DINNER, False): (
        "Based on {partner1} and {partner2}'s separate food preferences:"
    ),
    (CounselingMode.ENTERTAINMENT, True): (
        "Based on the following key points from {partner1} and {partner2}'s entertainment discussion:"
    ),
    (CounselingMode.ENTERTAINMENT, False): (
        "Based on {partner1} and {partner2}'s separate entertainment preferences:"
    ),
}

# Rendered in place of a partner statement that was not captured.
MISSING_INPUT_PLACEHOLDERS: Mapping[tuple[CounselingMode, bool], str] = {
    (CounselingMode.EVALUATOR, True): "No input provided",
    (CounselingMode.EVALUATOR, False): "No perspective provided",
    (CounselingMode.COUNSELOR, True): "No input provided",
    (CounselingMode.COUNSELOR, False): "No perspective provided",
    (CounselingMode.DINNER, True): "No input provided",
    (CounselingMode.DINNER, False): "No preferences provided",
    (CounselingMode.ENTERTAINMENT, True): "No input provided",
    (CounselingMode.ENTERTAINMENT, False): "No preferences provided",
}

REQUEST_LINES: Mapping[CounselingMode, str] = {
    CounselingMode.EVALUATOR: "Provide an analysis.",
    CounselingMode.COUNSELOR: "Provide an analysis.",
    CounselingMode.DINNER: "Provide a meal recommendation.",
    CounselingMode.ENTERTAINMENT: "Provide an entertainment recommendation.",
}

# Ordered (field, instruction) pairs making up the required output section.
OUTPUT_FORMATS: Mapping[CounselingMode, tuple[tuple[str, str], ...]] = {
    CounselingMode.EVALUATOR: (
        ("VERDICT", "One-sentence judgment"),
        ("KEY POINTS", "2-3 bullet points supporting the verdict"),
        ("WINNER", "One clear sentence declaring the winner and why"),
    ),
    CounselingMode.COUNSELOR: (
        ("VERDICT", "One-sentence judgment"),
        ("KEY POINTS", "2-3 bullet points supporting the verdict"),
        ("ADVICE", "2 specific suggestions for better communication"),
    ),
    CounselingMode.DINNER: (
        ("VERDICT", "'You should eat [specific recommendation]'"),
        ("WHY", "2-3 bullet points explaining the choice"),
        ("ALTERNATIVES", "1-2 backup options"),
    ),
    CounselingMode.ENTERTAINMENT: (
        ("VERDICT", "'Watch [specific show/movie]'"),
        ("WHY", "2-3 bullet points justifying the pick"),
        ("ALTERNATIVES", "1-2 backup recommendations"),
    ),
}


def _statement(text: str | None, placeholder: str) -> str:
    cleaned = (text or "").strip()
    return cleaned or placeholder


def _format_section(mode: CounselingMode) -> str:
    lines = ["**FORMAT**:"]
    lines.extend(f"- **{field}**: {instruction}" for field, instruction in OUTPUT_FORMATS[mode])
    return "\n".join(lines)


def build_prompt(
    *,
    mode: CounselingMode | str,
    partner1_name: str,
    partner2_name: str,
    partner1_text: str,
    partner2_text: str | None,
    is_live_argument: bool,
) -> PromptBundle:
    """Compose system/user prompts for the selected mode."""

    mode = CounselingMode(mode)
    key = (mode, bool(is_live_argument))
    placeholder = MISSING_INPUT_PLACEHOLDERS[key]

    intro = INTRO_TEMPLATES[key].format(partner1=partner1_name, partner2=partner2_name)
    user_prompt = "\n".join(
        [
            intro,
            f"- {partner1_name}: {_statement(partner1_text, placeholder)}",
            f"- {partner2_name}: {_statement(partner2_text, placeholder)}",
            "",
            REQUEST_LINES[mode],
            "",
            _format_section(mode),
        ]
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPTS[mode], user_prompt=user_prompt)


def temperature_for(mode: CounselingMode | str) -> float:
    """Mediation runs warmer than the judgment-style modes."""

    return 0.7 if CounselingMode(mode) is CounselingMode.COUNSELOR else 0.3


__all__ = [
    "SYSTEM_PROMPTS",
    "INTRO_TEMPLATES",
    "MISSING_INPUT_PLACEHOLDERS",
    "OUTPUT_FORMATS",
    "build_prompt",
    "temperature_for",
]
