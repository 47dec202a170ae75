"""
Feature Model and Profile Aggregation
=====================================

Defines the per-track audio feature vector and the aggregated music
profile, and reduces a list of vectors to a profile.

Aggregation:
    - Continuous features -> arithmetic mean
    - key / mode / time_signature -> every value tied for the highest count
"""

from typing import List, Dict, Iterable, FrozenSet, Tuple, Any, Optional
from collections import Counter
from dataclasses import dataclass, field, asdict

import numpy as np

from .config import FLOAT_FEATURES, CATEGORICAL_DEFAULTS


@dataclass(frozen=True)
class FeatureVector:
    """Audio characteristics of a single track."""
    danceability: float
    energy: float
    acousticness: float
    valence: float
    tempo: float
    loudness: float
    speechiness: float = 0.0
    instrumentalness: float = 0.0
    key: int = -1
    mode: int = 0
    time_signature: int = 4

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeatureVector":
        """
        Build a vector from a Spotify audio-features payload.

        Unrelated keys (id, uri, analysis_url, ...) are ignored. Missing or
        null continuous features become 0.0; missing categorical features
        take the defaults from config.

        Args:
            data: Audio features dict from the Spotify API

        Returns:
            FeatureVector instance
        """
        values = {}
        for name in FLOAT_FEATURES:
            value = data.get(name)
            values[name] = float(value) if value is not None else 0.0

        for name, default in CATEGORICAL_DEFAULTS.items():
            value = data.get(name)
            values[name] = int(value) if value is not None else default

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MusicProfile:
    """Aggregated profile of one or more feature vectors."""
    avg_danceability: float = 0.0
    avg_energy: float = 0.0
    avg_acousticness: float = 0.0
    avg_valence: float = 0.0
    avg_tempo: float = 0.0
    avg_loudness: float = 0.0

    preferred_keys: FrozenSet[int] = field(default_factory=frozenset)
    preferred_modes: FrozenSet[int] = field(default_factory=frozenset)
    time_signature_preferences: FrozenSet[int] = field(default_factory=frozenset)

    # Reserved; nothing populates it yet
    genre_preferences: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "avg_danceability": self.avg_danceability,
            "avg_energy": self.avg_energy,
            "avg_acousticness": self.avg_acousticness,
            "avg_valence": self.avg_valence,
            "avg_tempo": self.avg_tempo,
            "avg_loudness": self.avg_loudness,
            "preferred_keys": sorted(self.preferred_keys),
            "preferred_modes": sorted(self.preferred_modes),
            "time_signature_preferences": sorted(self.time_signature_preferences),
            "genre_preferences": list(self.genre_preferences),
        }


def most_frequent(values: Iterable[int]) -> FrozenSet[int]:
    """
    Return every value that reaches the highest frequency.

    Ties are all kept. An empty input gives an empty set.
    """
    counts = Counter(values)
    if not counts:
        return frozenset()

    top = max(counts.values())
    return frozenset(value for value, count in counts.items() if count == top)


def aggregate(vectors: Iterable[FeatureVector]) -> MusicProfile:
    """
    Reduce feature vectors to a single music profile.

    Args:
        vectors: Feature vectors of the tracks to profile (may be empty)

    Returns:
        MusicProfile; all zeros and empty sets for an empty input
    """
    vectors = list(vectors)
    if not vectors:
        return MusicProfile()

    matrix = np.array([
        [v.danceability, v.energy, v.acousticness, v.valence, v.tempo, v.loudness]
        for v in vectors
    ], dtype=float)
    means = matrix.mean(axis=0)

    return MusicProfile(
        avg_danceability=float(means[0]),
        avg_energy=float(means[1]),
        avg_acousticness=float(means[2]),
        avg_valence=float(means[3]),
        avg_tempo=float(means[4]),
        avg_loudness=float(means[5]),
        preferred_keys=most_frequent(v.key for v in vectors),
        preferred_modes=most_frequent(v.mode for v in vectors),
        time_signature_preferences=most_frequent(v.time_signature for v in vectors),
    )


calculate_music_profile = aggregate


def vectors_from_payloads(payloads: Iterable[Optional[Dict]]) -> List[FeatureVector]:
    """Convert API audio-feature payloads, skipping unavailable (None) entries."""
    return [FeatureVector.from_dict(p) for p in payloads if p]
