"""JSON Resume themes known to render well with resumed."""

from __future__ import annotations

THEME_PACKAGE_PREFIX = "jsonresume-theme-"
DEFAULT_THEME = "even"

THEME_DESCRIPTIONS: dict[str, str] = {
    "even": "Clean, minimal design - great for most industries",
    "stackoverflow": "Developer-focused with brand icons and skills sections",
    "elegant": "Professional and polished - classic resume style",
    "actual": "Minimalist and modern - contemporary design",
    "class": "Self-contained, works offline - portable HTML/PDF",
    "flat": "Simple flat design - straightforward layout",
    "kendall": "Modern professional - balanced and readable",
    "macchiato": "Warm tones, modern feel - distinctive look",
}
AVAILABLE_THEMES: tuple[str, ...] = tuple(THEME_DESCRIPTIONS)


def theme_package_name(theme: str) -> str:
    """Map a theme id such as ``even`` to its npm package name."""

    return THEME_PACKAGE_PREFIX + theme


def is_valid_theme(theme: str) -> bool:
    return theme in THEME_DESCRIPTIONS
