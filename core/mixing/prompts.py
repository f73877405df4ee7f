"""
Prompt builders for the mixing assistant.

Pure functions that turn a conversation, a question, a transcript and a
``MixContext`` into the single prompt string sent to the completion API.
No I/O, no side effects.

Three prompts exist:
  chat      — persona + context + flattened conversation (``POST /api/chat``)
  coaching  — text-only advice when no audio is attached
  analysis  — structured five-part critique of an uploaded mix
"""

from __future__ import annotations

from collections.abc import Sequence

from core.mixing.types import Message, MixContext

PERSONA_CHAT = (
    "You are Dirt Halo Studio Assistant, a brutal but helpful metal/metalcore mix engineer."
)
PERSONA_COACHING = (
    "You are Dirt Halo Studio Assistant, a blunt but helpful mix engineer for heavy music."
)
PERSONA_ANALYSIS = (
    "You are Dirt Halo Studio Assistant, a brutal but helpful metal/rock mix engineer."
)

NO_TRANSCRIPT_PLACEHOLDER = "(no reliable transcription)"
NO_QUESTION_PLACEHOLDER = (
    "(user didn't ask a specific question; give a general critique of this mix)"
)

# Frequency bands named in the analysis answer template, low to high.
ANALYSIS_BANDS: tuple[tuple[str, str], ...] = (
    ("Sub", "20–40 Hz"),
    ("Low end", "40–120 Hz"),
    ("Low-mids", "120–400 Hz"),
    ("High-mids", "1–5 kHz"),
    ("Air", "8–16 kHz"),
)

_ANSWER_TEMPLATE = """\
Give a detailed, practical answer in this structure:

1. Quick verdict (1–2 sentences) about how the mix feels overall.
2. Frequency balance:
{bands}
   For each, say what feels right or wrong, and which instruments are affected.
3. Dynamics / punch & glue:
   - Comments on compression / limiting
   - Transients on drums, vocals, and master bus
4. Space & width:
   - Reverb, delay, stereo image, depth
5. Concrete action list – 5–10 bullet points of specific moves, for example:
   - "Cut 2–3 dB at 250 Hz on the master bus with a medium-Q bell"
   - "Boost 1–2 dB at 8–10 kHz on the vocals for air"
   - "Use a slower attack and faster release on the drum bus compressor"
   - "Tighten the low end by high-passing guitars around 80–100 Hz"

Write like you're coaching someone in a home studio using common plugins \
(FabFilter, JST, Waves, Slate, etc.). Be direct but encouraging, and talk in \
clear, simple language.\
"""


def _context_lines(context: MixContext, *, bullet: str = "") -> str:
    tone = context.tone
    rows = (
        ("Mode", context.mode),
        ("Preset", context.preset),
        ("Aggression", tone.aggression),
        ("Tightness", tone.tightness),
        ("Brightness", tone.brightness),
    )
    return "\n".join(f"{bullet}{name}: {value}" for name, value in rows)


def flatten_conversation(messages: Sequence[Message]) -> str:
    """Render messages as ``User: …`` / ``Assistant: …`` lines in order."""
    lines = []
    for message in messages:
        who = "User" if message.role == "user" else "Assistant"
        lines.append(f"{who}: {message.content}")
    return "\n".join(lines)


def build_chat_prompt(messages: Sequence[Message], context: MixContext) -> str:
    """Build the single-turn chat prompt.

    Args:
        messages: Full conversation so far, oldest first. May be empty.
        context: Mode, preset and tone for this request.

    Returns:
        Persona preamble, context, the flattened conversation and a trailing
        ``Assistant:`` cue.
    """
    preamble = (
        f"{PERSONA_CHAT}\n\n"
        f"{_context_lines(context)}\n\n"
        "Give clear, practical, step-by-step advice (frequencies, plugin moves, creative tips).\n"
        "Keep it studio-friendly and conversational."
    )
    return f"{preamble}\n\nConversation:\n{flatten_conversation(messages)}\n\nAssistant:"


def build_coaching_prompt(question: str, context: MixContext) -> str:
    """Build the text-only advice prompt used when no audio is attached."""
    return (
        f"{PERSONA_COACHING}\n\n"
        "Context:\n"
        f"{_context_lines(context, bullet='- ')}\n\n"
        "User question (no audio attached, give general advice only):\n"
        f'"{question}"\n\n'
        "Give focused, practical mix advice with numbered steps and, where useful, "
        "ballpark EQ ranges and compressor settings."
    )


def prepare_transcript(text: str, limit: int = 4000) -> str:
    """Cap a transcript at *limit* characters; empty text becomes a placeholder.

    The placeholder keeps the analysis prompt structure identical whether or
    not transcription produced anything.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    if len(text) > limit:
        return text[:limit]
    return text or NO_TRANSCRIPT_PLACEHOLDER


def build_analysis_prompt(question: str, transcript: str, context: MixContext) -> str:
    """Build the structured critique prompt for an uploaded mix.

    Args:
        question: The user's question; blank selects the general-critique
            placeholder.
        transcript: Transcript text already passed through
            :func:`prepare_transcript`.
        context: Mode, preset and tone.

    Returns:
        The complete analysis prompt.
    """
    bands = "\n".join(f"   - {name} ({span})" for name, span in ANALYSIS_BANDS)
    return (
        f"{PERSONA_ANALYSIS}\n\n"
        "Mix context:\n"
        f"{_context_lines(context, bullet='- ')}\n\n"
        "User's question about the uploaded mix:\n"
        f'"{question or NO_QUESTION_PLACEHOLDER}"\n\n'
        "Transcription of the uploaded mix audio (may be imperfect, just use as loose "
        "context, do NOT focus on the lyrics themselves):\n"
        f"{transcript}\n\n"
        f"{_ANSWER_TEMPLATE.format(bands=bands)}"
    )
