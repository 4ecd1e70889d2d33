"""Map KGX3 classification labels to labeler badge identifiers."""

BADGES: dict[str, str] = {
    "Paradigm Shift": "paradigm-shift",
    "Model Revolution": "model-revolution",
    "Normal Science": "normal-science",
    "Model Crisis": "model-crisis",
    "Model Drift": "model-drift",
}

BADGE_IDS = tuple(BADGES.values())


def map_to_badge(label: str | None) -> str | None:
    """Exact, case-sensitive lookup. Unknown labels map to None."""
    if label is None:
        return None
    return BADGES.get(label)
