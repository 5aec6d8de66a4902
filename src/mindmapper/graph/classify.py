"""Keyword classification of node text into color categories.

Categories are checked in declaration order; the first category with a
keyword occurring (case-insensitively) anywhere in the text wins.
"""

from __future__ import annotations

OTHER = "Other"

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Design", ("design", "ui", "ux", "mockup", "prototype", "wireframe", "sketch")),
    ("Development", ("code", "develop", "build", "implement", "program", "create", "api")),
    ("Testing", ("test", "qa", "verify", "validate", "debug", "check")),
    ("Documentation", ("document", "write", "readme", "guide", "manual", "tutorial")),
    ("Deployment", ("deploy", "release", "publish", "launch", "production")),
)

CATEGORY_COLORS: dict[str, str] = {
    "Design": "#8ecae6",
    "Development": "#219ebc",
    "Testing": "#b5179e",
    "Documentation": "#f4a261",
    "Deployment": "#4CAF50",
    OTHER: "#adb5bd",
}

ROOT_COLOR = "#F59E0B"

CATEGORIES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS) + (OTHER,)


def classify(text: str) -> str:
    """Return the first category whose keywords appear in text."""
    lower = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return category
    return OTHER


def resolve_category(text: str, auto_group: bool, parent_category: str | None = None) -> str:
    """Resolve a node's category.

    Args:
        text: The node's original text.
        auto_group: Classify by keyword when True; otherwise inherit.
        parent_category: The parent's resolved category (None for the root).

    Returns:
        A member of CATEGORIES.
    """
    if auto_group:
        return classify(text)
    return parent_category or OTHER


def category_color(category: str | None) -> str:
    """Color for a category; unknown categories fall back to Other."""
    return CATEGORY_COLORS.get(category or OTHER, CATEGORY_COLORS[OTHER])


__all__ = [
    "CATEGORIES",
    "CATEGORY_COLORS",
    "CATEGORY_KEYWORDS",
    "OTHER",
    "ROOT_COLOR",
    "category_color",
    "classify",
    "resolve_category",
]
