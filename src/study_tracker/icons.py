"""Icon registry for subjects.

Subjects only store an icon key. Keys that are not in the registry render
with the default icon instead of failing.
"""

DEFAULT_ICON = "TargetIcon"

ICONS = {
    "TargetIcon": "🎯",
    "BrainIcon": "🧠",
    "CalculatorIcon": "🧮",
    "BookOpenIcon": "📖",
    "MessageSquareIcon": "💬",
    "BeakerIcon": "🧪",
    "CodeIcon": "💻",
    "GlobeIcon": "🌐",
    "MusicIcon": "🎵",
    "PaletteIcon": "🎨",
}


def resolve_icon(key: str | None) -> str:
    return ICONS.get(key, ICONS[DEFAULT_ICON]) if key else ICONS[DEFAULT_ICON]


def selectable_icons() -> list[str]:
    """Icon keys offered when creating a subject (the default is implicit)."""
    return [key for key in ICONS if key != DEFAULT_ICON]
