"""
Mood / Genre Classification
===========================

Rule table of named categories, each a rectangle in audio feature space,
and a first-match-wins classifier over it.

Table order is the tie-break: the first category whose ranges all contain
the track's features wins, so more specific rules belong earlier.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple
from dataclasses import dataclass

from .features import FeatureVector

Range = Tuple[float, float]

REQUIRED_CRITERIA = ("energy", "valence")
OPTIONAL_CRITERIA = ("danceability", "acousticness", "instrumentalness")


@dataclass(frozen=True)
class MoodCategory:
    """A named region of feature space used for coarse classification."""
    name: str
    description: str
    criteria: Mapping[str, Range]
    color: str
    emoji: str

    def matches(self, vector: FeatureVector) -> bool:
        """True when every criterion holds; absent optional criteria always hold."""
        for feature in REQUIRED_CRITERIA:
            if not in_range(getattr(vector, feature), self.criteria[feature]):
                return False

        for feature in OPTIONAL_CRITERIA:
            bounds = self.criteria.get(feature)
            if bounds is not None and not in_range(getattr(vector, feature), bounds):
                return False

        return True

    def midpoint(self, feature: str) -> Optional[float]:
        """Centre of the interval for ``feature``, or None if unconstrained."""
        bounds = self.criteria.get(feature)
        if bounds is None:
            return None
        return (bounds[0] + bounds[1]) / 2

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "criteria": {k: list(v) for k, v in self.criteria.items()},
            "color": self.color,
            "emoji": self.emoji,
        }


def in_range(value: float, bounds: Range) -> bool:
    """Closed interval membership."""
    return bounds[0] <= value <= bounds[1]


def _category(name, description, color, emoji, **criteria) -> MoodCategory:
    return MoodCategory(
        name=name,
        description=description,
        criteria=MappingProxyType(dict(criteria)),
        color=color,
        emoji=emoji,
    )


# =============================================================================
# CATEGORY TABLE (ordered)
# =============================================================================
MOOD_CATEGORIES: Tuple[MoodCategory, ...] = (
    _category(
        "Pop", "Catchy, easy-listening pop music",
        "neon-pink", "🎵",
        energy=(0.4, 0.8), valence=(0.5, 1.0), danceability=(0.4, 0.8),
    ),
    _category(
        "Rock", "Powerful, driving rock sound",
        "sunset-orange", "🎸",
        energy=(0.6, 1.0), valence=(0.3, 0.8), acousticness=(0.0, 0.4),
    ),
    _category(
        "EDM/Dance", "Danceable electronic music",
        "electric-purple", "💃",
        energy=(0.6, 1.0), valence=(0.4, 1.0), danceability=(0.7, 1.0),
        acousticness=(0.0, 0.3),
    ),
    _category(
        "Acoustic", "Natural sound built on live instruments",
        "mint-green", "🎼",
        energy=(0.2, 0.7), acousticness=(0.5, 1.0), valence=(0.3, 0.8),
    ),
    _category(
        "Hip-Hop/R&B", "Groovy hip-hop and R&B",
        "ocean-blue", "🎤",
        energy=(0.4, 0.9), danceability=(0.6, 1.0), valence=(0.2, 0.8),
    ),
    _category(
        "Ambient/Chill", "Relaxing ambient and chill-out",
        "premium-gradient", "🌙",
        energy=(0.0, 0.5), valence=(0.2, 0.7), instrumentalness=(0.3, 1.0),
    ),
)


def classify(
    vector: FeatureVector,
    categories: Sequence[MoodCategory] = MOOD_CATEGORIES
) -> Optional[MoodCategory]:
    """
    Classify a track into the first matching category.

    Args:
        vector: Track audio features
        categories: Ordered category table

    Returns:
        The first matching MoodCategory, or None if none match
    """
    for category in categories:
        if category.matches(vector):
            return category
    return None


categorize_mood = classify


def find_category(
    name: str,
    categories: Sequence[MoodCategory] = MOOD_CATEGORIES
) -> Optional[MoodCategory]:
    """Look a category up by exact name."""
    for category in categories:
        if category.name == name:
            return category
    return None
