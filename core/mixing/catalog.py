"""Mode and preset catalog.

Modes are the top-level advice categories; each mode owns an ordered list
of presets. The first preset of a mode is its default.

Pure module — constants and lookups only.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Preset:
    """A named sub-style within a mode."""

    id: str
    label: str


MODES: tuple[tuple[str, str], ...] = (
    ("vocals", "Vocals"),
    ("guitars", "Guitars"),
    ("drums", "Drums"),
    ("bass", "Bass"),
    ("keys", "Keys/Synths"),
    ("mastering", "Mastering"),
)

MODE_LABELS: dict[str, str] = dict(MODES)

PRESETS_BY_MODE: dict[str, tuple[Preset, ...]] = {
    "vocals": (
        Preset("modern-metalcore", "Modern Metalcore"),
        Preset("deathcore", "Deathcore"),
        Preset("pop-punk", "Pop Punk"),
        Preset("lofi-vocals", "Lofi Vocals"),
    ),
    "guitars": (
        Preset("djent-prog", "Djent / Prog"),
        Preset("thrash", "Thrash"),
        Preset("radio-rock", "Radio Rock"),
    ),
    "drums": (
        Preset("tight-punchy", "Tight & Punchy"),
        Preset("big-room", "Big Room"),
        Preset("blast-beats", "Blast Beats"),
    ),
    "bass": (
        Preset("edm-bass", "EDM Bass"),
        Preset("sub-heavy", "Sub Heavy"),
        Preset("grit-parallel", "Grit + Parallel"),
    ),
    "keys": (
        Preset("ambient-synth", "Ambient / Synthwave"),
        Preset("hyperpop", "Hyperpop"),
        Preset("cinematic", "Cinematic"),
    ),
    "mastering": (
        Preset("streaming-loud", "Streaming Loud"),
        Preset("dynamic", "Dynamic"),
        Preset("club", "Club / DJ"),
    ),
}

DEFAULT_MODE = "vocals"
DEFAULT_PRESET = PRESETS_BY_MODE[DEFAULT_MODE][0].id


def is_mode(mode: str) -> bool:
    return mode in MODE_LABELS


def presets_for(mode: str) -> tuple[Preset, ...]:
    """Return the presets of *mode*, or an empty tuple for unknown modes."""
    return PRESETS_BY_MODE.get(mode, ())


def first_preset(mode: str) -> str | None:
    """Return the id of the first preset listed for *mode*."""
    presets = presets_for(mode)
    return presets[0].id if presets else None


def preset_belongs(mode: str, preset_id: str) -> bool:
    return any(p.id == preset_id for p in presets_for(mode))


def mode_label(mode: str) -> str:
    """Human-readable label for *mode*; unknown ids fall back to the raw id."""
    return MODE_LABELS.get(mode, mode)


def preset_label(mode: str, preset_id: str) -> str:
    """Human-readable label for *preset_id* within *mode*.

    Falls back to the raw id when the preset is not part of the mode's list.
    """
    for preset in presets_for(mode):
        if preset.id == preset_id:
            return preset.label
    return preset_id
