"""
Recommendation Engine
=====================

Two layers:

1. Parameter generation (pure): turns a music profile, optionally biased
   toward a named category, into the flat target/tolerance bundle the
   recommendations endpoint accepts.

2. Orchestration (uses the Spotify client):
   - find_similar: seed track -> recommended candidates -> similarity ranking
   - recommend_for_tracks: track list -> profile -> parameter bundle -> tracks
"""

import json
import logging
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field

import numpy as np

from .spotify_client import SpotifyClient
from .features import FeatureVector, MusicProfile, aggregate
from .moods import MoodCategory, find_category, MOOD_CATEGORIES
from .scoring import similarity, rank_by_similarity
from .explainer import TrackAnalysis, analyze_track, similarity_label
from .utils import round_half_up, normalize_spotify_id
from .config import (
    RECOMMENDATION_LIMIT,
    SEED_CANDIDATE_LIMIT,
    NUM_SIMILAR_TRACKS,
    TOLERANCE_BAND,
    MAX_SEED_TRACKS,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PARAMETER GENERATION
# =============================================================================

def _clamp_unit(value: float) -> float:
    return float(np.clip(value, 0, 1))


def to_recommendation_params(
    profile: MusicProfile,
    bias_category: Optional[str] = None,
    categories=MOOD_CATEGORIES
) -> Dict[str, Any]:
    """
    Build recommendation query parameters from a profile.

    Args:
        profile: Source music profile
        bias_category: Category name whose interval midpoints replace the
            profile's targets; unknown names are ignored
        categories: Category table to look the bias up in

    Returns:
        Flat dict of target_*, min_*/max_* and limit values
    """
    params = {
        "target_danceability": profile.avg_danceability,
        "target_energy": profile.avg_energy,
        "target_valence": profile.avg_valence,
        "target_acousticness": profile.avg_acousticness,
        "target_tempo": round_half_up(profile.avg_tempo),
        "target_loudness": round_half_up(profile.avg_loudness),
        "limit": RECOMMENDATION_LIMIT,
    }

    category = find_category(bias_category, categories) if bias_category else None
    if category:
        params["target_energy"] = category.midpoint("energy")
        params["target_valence"] = category.midpoint("valence")
        for feature in ("danceability", "acousticness"):
            mid = category.midpoint(feature)
            if mid is not None:
                params[f"target_{feature}"] = mid

    # Tolerance band around whichever targets are in effect
    params["min_energy"] = _clamp_unit(params["target_energy"] - TOLERANCE_BAND)
    params["max_energy"] = _clamp_unit(params["target_energy"] + TOLERANCE_BAND)
    params["min_valence"] = _clamp_unit(params["target_valence"] - TOLERANCE_BAND)
    params["max_valence"] = _clamp_unit(params["target_valence"] + TOLERANCE_BAND)

    return params


generate_recommendation_params = to_recommendation_params


def track_seed_params(vector: FeatureVector, limit: int = SEED_CANDIDATE_LIMIT) -> Dict[str, Any]:
    """Targets taken straight from one track, for a seed-track query."""
    return {
        "target_energy": vector.energy,
        "target_danceability": vector.danceability,
        "target_valence": vector.valence,
        "target_acousticness": vector.acousticness,
        "target_tempo": round_half_up(vector.tempo),
        "limit": limit,
    }


# =============================================================================
# RESULTS
# =============================================================================

def _artist_names(track: Dict) -> List[str]:
    return [a.get('name', '') for a in track.get('artists', [])]


@dataclass
class SimilarTrack:
    """A candidate track scored against the seed."""
    track_id: str
    track_name: str
    artist_names: List[str]
    similarity: float
    analysis: TrackAnalysis

    @property
    def label(self) -> str:
        return similarity_label(self.similarity)

    def to_dict(self) -> Dict:
        return {
            "track_id": self.track_id,
            "track_name": self.track_name,
            "artist_names": self.artist_names,
            "similarity": round(self.similarity, 4),
            "label": self.label,
            "analysis": self.analysis.to_dict(),
        }


@dataclass
class SimilarTracksResult:
    """Similar-track search output."""
    seed_id: str
    seed_name: str
    seed_analysis: Optional[TrackAnalysis]
    tracks: List[SimilarTrack] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "seed_id": self.seed_id,
            "seed_name": self.seed_name,
            "seed_analysis": self.seed_analysis.to_dict() if self.seed_analysis else None,
            "tracks": [t.to_dict() for t in self.tracks],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass
class ProfileRecommendations:
    """Profile-driven recommendation output."""
    track_ids: List[str]
    profile: MusicProfile
    params: Dict[str, Any]
    bias_category: Optional[MoodCategory] = None
    tracks: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "track_ids": self.track_ids,
            "profile": self.profile.to_dict(),
            "params": self.params,
            "bias_category": self.bias_category.name if self.bias_category else None,
            "recommendations": [
                {
                    "track_id": t.get('id'),
                    "track_name": t.get('name', ''),
                    "artist_names": _artist_names(t),
                }
                for t in self.tracks
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# =============================================================================
# ORCHESTRATION
# =============================================================================

class SimilarTrackEngine:
    """
    Finds and ranks tracks that sound like a seed track or track set.

    Usage:
        engine = SimilarTrackEngine()
        result = engine.find_similar("spotify:track:xxxxx")
        print(result.to_json())
    """

    def __init__(self, spotify_client: Optional[SpotifyClient] = None):
        """
        Args:
            spotify_client: Pre-configured Spotify client (creates new if None)
        """
        self.spotify = spotify_client or SpotifyClient()

    def find_similar(
        self,
        track_input: str,
        limit: int = NUM_SIMILAR_TRACKS
    ) -> SimilarTracksResult:
        """
        Find tracks similar to a seed track.

        Args:
            track_input: Track URL, URI or ID
            limit: Number of similar tracks to keep

        Returns:
            SimilarTracksResult sorted by similarity, highest first
        """
        track_id = normalize_spotify_id(track_input, "track")
        track = self.spotify.get_track(track_id)
        seed_name = track.get('name', '')

        seed_vector = self.spotify.get_feature_vectors([track_id])[0]
        if seed_vector is None:
            logger.warning("No audio features found for track %s", track_id)
            return SimilarTracksResult(seed_id=track_id, seed_name=seed_name, seed_analysis=None)

        seed_profile = aggregate([seed_vector])
        result = SimilarTracksResult(
            seed_id=track_id,
            seed_name=seed_name,
            seed_analysis=analyze_track(seed_vector),
        )

        candidates = self.spotify.get_recommendations(
            seed_tracks=[track_id],
            params=track_seed_params(seed_vector),
        )
        logger.info("Scoring %d candidates for %s", len(candidates), seed_name or track_id)
        if not candidates:
            return result

        vectors = self.spotify.get_feature_vectors([c['id'] for c in candidates])

        scored = []
        for candidate, vector in zip(candidates, vectors):
            if vector is None:
                continue
            scored.append(((candidate, vector), aggregate([vector])))

        for (candidate, vector), score in rank_by_similarity(seed_profile, scored, limit):
            result.tracks.append(SimilarTrack(
                track_id=candidate['id'],
                track_name=candidate.get('name', ''),
                artist_names=_artist_names(candidate),
                similarity=score,
                analysis=analyze_track(vector),
            ))

        return result

    def recommend_for_tracks(
        self,
        track_inputs: List[str],
        bias_category: Optional[str] = None
    ) -> ProfileRecommendations:
        """
        Recommend tracks matching the combined profile of a track list.

        Args:
            track_inputs: Track URLs, URIs or IDs
            bias_category: Optional category name to steer targets toward

        Returns:
            ProfileRecommendations with the profile, parameters and tracks
        """
        track_ids = [normalize_spotify_id(t, "track") for t in track_inputs]
        vectors = [v for v in self.spotify.get_feature_vectors(track_ids) if v is not None]
        profile = aggregate(vectors)

        category = find_category(bias_category) if bias_category else None
        if bias_category and category is None:
            logger.info("Unknown category %r, using profile targets", bias_category)

        params = to_recommendation_params(profile, bias_category)
        tracks = []
        if track_ids:
            tracks = self.spotify.get_recommendations(
                seed_tracks=track_ids[:MAX_SEED_TRACKS],
                params=params,
            )

        return ProfileRecommendations(
            track_ids=track_ids,
            profile=profile,
            params=params,
            bias_category=category,
            tracks=tracks,
        )

    def compare_tracks(self, first: str, second: str) -> Optional[float]:
        """Similarity between two tracks, or None if either lacks features."""
        ids = [normalize_spotify_id(first, "track"), normalize_spotify_id(second, "track")]
        a, b = self.spotify.get_feature_vectors(ids)
        if a is None or b is None:
            return None
        return similarity(aggregate([a]), aggregate([b]))
