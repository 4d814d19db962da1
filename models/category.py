"""Budget categories.

The set is fixed; expenses reference categories by name.
"""

CATEGORIES = (
    "Essential Maintenance",
    "Growth / Investment",
    "Planned Social",
    "Impulse/Comfort",
)


def is_category(name: str) -> bool:
    """Check whether a name is one of the budget categories."""
    return name in CATEGORIES
