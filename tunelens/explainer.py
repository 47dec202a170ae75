"""
Track Analysis Module
=====================

Builds a human-readable analysis of a single track:
- Mood / genre category
- Descriptive characteristics (energy, emotion, vocal style, ...)
- Technical facts (key, mode, time signature, tempo, loudness)

Analyses are derived on demand from a feature vector and never cached.
"""

from typing import Dict, Optional
from dataclasses import dataclass, field

from .features import FeatureVector
from .moods import MoodCategory, classify
from .utils import round_half_up
from .config import (
    PITCH_CLASSES,
    CHARACTERISTIC_THRESHOLDS,
    CHARACTERISTIC_FALLBACKS,
    SIMILARITY_LABELS,
    SIMILARITY_LABEL_FALLBACK,
)

OTHER_STYLE = "Other"
UNKNOWN_KEY = "Unknown"


@dataclass
class TrackAnalysis:
    """Classification, characteristics and technical facts for one track."""
    mood: Optional[MoodCategory]
    characteristics: Dict[str, str] = field(default_factory=dict)
    technical: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "mood": self.mood.to_dict() if self.mood else None,
            "characteristics": dict(self.characteristics),
            "technical": dict(self.technical),
        }


def describe(feature: str, value: float) -> str:
    """Map a feature value to its label using the configured thresholds."""
    for threshold, label in CHARACTERISTIC_THRESHOLDS[feature]:
        if value > threshold:
            return label
    return CHARACTERISTIC_FALLBACKS[feature]


def genre_style(vector: FeatureVector) -> str:
    """
    Best-guess style name for a track.

    Uses the matching category when there is one, otherwise a looser set of
    single-threshold rules.
    """
    category = classify(vector)
    if category:
        return category.name

    if vector.energy > 0.8 and vector.danceability > 0.7:
        return "EDM/Dance"
    elif vector.energy > 0.7 and vector.acousticness < 0.3:
        return "Rock"
    elif vector.acousticness > 0.5:
        return "Acoustic"
    elif vector.danceability > 0.6 and vector.valence > 0.5:
        return "Pop"
    elif vector.energy < 0.4 and vector.instrumentalness > 0.3:
        return "Ambient/Chill"
    return OTHER_STYLE


def key_name(key: int) -> str:
    """Pitch-class name, or Unknown outside 0-11."""
    if 0 <= key < len(PITCH_CLASSES):
        return PITCH_CLASSES[key]
    return UNKNOWN_KEY


def analyze_track(vector: FeatureVector) -> TrackAnalysis:
    """
    Analyse a single track.

    Args:
        vector: Track audio features

    Returns:
        TrackAnalysis
    """
    characteristics = {
        "dance_floor": describe("danceability", vector.danceability),
        "energy": describe("energy", vector.energy),
        "emotion": describe("valence", vector.valence),
        "acoustic": describe("acousticness", vector.acousticness),
        "vocal": describe("speechiness", vector.speechiness),
        "instrumental": describe("instrumentalness", vector.instrumentalness),
        "genre": genre_style(vector),
    }

    technical = {
        "key": key_name(vector.key),
        "mode": "Major" if vector.mode == 1 else "Minor",
        "time_signature": f"{vector.time_signature}/4",
        "tempo": f"{round_half_up(vector.tempo)} BPM",
        "loudness": f"{round_half_up(vector.loudness)} dB",
    }

    return TrackAnalysis(
        mood=classify(vector),
        characteristics=characteristics,
        technical=technical,
    )


def similarity_label(score: float) -> str:
    """Short label describing a similarity score."""
    for threshold, label in SIMILARITY_LABELS:
        if score > threshold:
            return label
    return SIMILARITY_LABEL_FALLBACK
