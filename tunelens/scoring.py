"""
Profile Similarity Scoring
==========================

Computes a bounded similarity score between two music profiles as a
weighted sum of per-feature closeness terms.

Mathematical Formulation:
-------------------------

Score = clip(Σ (w_i × C_i), 0, 1)

where:
    C_f     = 1 - |a_f - b_f|                  for danceability, energy,
                                               valence, acousticness
    C_tempo = max(0, 1 - |Δtempo| / 200)
    C_loud  = max(0, 1 - |Δloudness| / 60)

Weights for key (0.05) and mode (0.03) are declared but have no term, so a
profile compared with itself scores 0.90, not 1.0.
"""

from typing import List, Tuple, Iterable, TypeVar, Optional
from dataclasses import dataclass

import numpy as np

from .features import MusicProfile
from .config import (
    SimilarityWeights,
    DEFAULT_WEIGHTS,
    TEMPO_SPAN_BPM,
    LOUDNESS_SPAN_DB,
)

T = TypeVar("T")


@dataclass
class SimilarityBreakdown:
    """Weighted terms that make up a similarity score."""
    danceability: float = 0.0
    energy: float = 0.0
    valence: float = 0.0
    acousticness: float = 0.0
    tempo: float = 0.0
    loudness: float = 0.0
    final_score: float = 0.0

    @property
    def raw_total(self) -> float:
        return (
            self.danceability + self.energy + self.valence +
            self.acousticness + self.tempo + self.loudness
        )


def _unit_closeness(a: float, b: float) -> float:
    return 1 - abs(a - b)


def _span_closeness(a: float, b: float, span: float) -> float:
    return max(0.0, 1 - abs(a - b) / span)


def similarity_breakdown(
    a: MusicProfile,
    b: MusicProfile,
    weights: SimilarityWeights = DEFAULT_WEIGHTS
) -> SimilarityBreakdown:
    """
    Compute every weighted closeness term between two profiles.

    Args:
        a, b: Profiles to compare
        weights: Similarity weights

    Returns:
        SimilarityBreakdown with the clamped final score
    """
    breakdown = SimilarityBreakdown(
        danceability=_unit_closeness(a.avg_danceability, b.avg_danceability) * weights.danceability,
        energy=_unit_closeness(a.avg_energy, b.avg_energy) * weights.energy,
        valence=_unit_closeness(a.avg_valence, b.avg_valence) * weights.valence,
        acousticness=_unit_closeness(a.avg_acousticness, b.avg_acousticness) * weights.acousticness,
        tempo=_span_closeness(a.avg_tempo, b.avg_tempo, TEMPO_SPAN_BPM) * weights.tempo,
        loudness=_span_closeness(a.avg_loudness, b.avg_loudness, LOUDNESS_SPAN_DB) * weights.loudness,
    )
    # No key or mode term is added even though weights exist for them.
    # Kept as-is so scores stay comparable with existing results.
    breakdown.final_score = float(np.clip(breakdown.raw_total, 0, 1))
    return breakdown


def similarity(
    a: MusicProfile,
    b: MusicProfile,
    weights: SimilarityWeights = DEFAULT_WEIGHTS
) -> float:
    """Similarity score between two profiles, in [0, 1]."""
    return similarity_breakdown(a, b, weights).final_score


calculate_similarity = similarity


def rank_by_similarity(
    reference: MusicProfile,
    candidates: Iterable[Tuple[T, MusicProfile]],
    limit: Optional[int] = None
) -> List[Tuple[T, float]]:
    """
    Rank items by how similar their profile is to a reference profile.

    Args:
        reference: Profile to compare against
        candidates: (item, profile) pairs
        limit: Keep at most this many results

    Returns:
        (item, score) pairs sorted by score, highest first
    """
    results = [(item, similarity(reference, profile)) for item, profile in candidates]
    results.sort(key=lambda x: x[1], reverse=True)

    if limit is not None:
        results = results[:limit]
    return results
