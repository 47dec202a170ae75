"""
Configuration and constants for TuneLens.
"""
import os
from dataclasses import dataclass
from typing import Dict

# =============================================================================
# SPOTIFY API CONFIGURATION
# =============================================================================
SPOTIFY_CLIENT_ID = os.environ.get("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.environ.get("SPOTIFY_CLIENT_SECRET", "")

# Spotify API batch limits
TRACKS_BATCH_SIZE = 50
AUDIO_FEATURES_BATCH_SIZE = 100
MAX_SEED_TRACKS = 5

# =============================================================================
# AUDIO FEATURE CONFIGURATION
# =============================================================================

# Continuous features, averaged when building a profile
FLOAT_FEATURES = [
    "danceability",
    "energy",
    "acousticness",
    "valence",
    "speechiness",
    "instrumentalness",
    "tempo",
    "loudness",
]

# Defaults for categorical features missing from an API payload
CATEGORICAL_DEFAULTS = {
    "key": -1,           # unknown pitch class
    "mode": 0,           # minor
    "time_signature": 4,
}

PITCH_CLASSES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# =============================================================================
# SIMILARITY WEIGHTS
# =============================================================================
@dataclass(frozen=True)
class SimilarityWeights:
    """Weights for the profile similarity score.

    The weights sum to 0.98. ``key`` and ``mode`` are declared but the
    scorer never adds a term for them.
    """
    danceability: float = 0.20
    energy: float = 0.20
    valence: float = 0.20
    acousticness: float = 0.15
    tempo: float = 0.10
    loudness: float = 0.05
    key: float = 0.05
    mode: float = 0.03

    def to_dict(self) -> Dict[str, float]:
        return {
            "danceability": self.danceability,
            "energy": self.energy,
            "valence": self.valence,
            "acousticness": self.acousticness,
            "tempo": self.tempo,
            "loudness": self.loudness,
            "key": self.key,
            "mode": self.mode,
        }

DEFAULT_WEIGHTS = SimilarityWeights()

# Spans used to normalise absolute differences
TEMPO_SPAN_BPM = 200.0
LOUDNESS_SPAN_DB = 60.0

# =============================================================================
# RECOMMENDATION PARAMETERS
# =============================================================================
RECOMMENDATION_LIMIT = 20
SEED_CANDIDATE_LIMIT = 50      # candidates requested for a single seed track
NUM_SIMILAR_TRACKS = 20
TOLERANCE_BAND = 0.2           # +/- around target energy and valence

# =============================================================================
# TRACK CHARACTERISTIC THRESHOLDS (value must be strictly greater)
# =============================================================================
CHARACTERISTIC_THRESHOLDS = {
    "danceability": [(0.7, "Dance floor ready"), (0.4, "Light groove")],
    "energy": [(0.7, "High energy"), (0.4, "Medium energy")],
    "valence": [(0.7, "Positive"), (0.4, "Neutral")],
    "acousticness": [(0.7, "Acoustic"), (0.3, "Hybrid")],
    "speechiness": [(0.66, "Speech-like"), (0.33, "Rap/Talk")],
    "instrumentalness": [(0.5, "Instrumental")],
}

CHARACTERISTIC_FALLBACKS = {
    "danceability": "Laid-back",
    "energy": "Low energy",
    "valence": "Melancholic",
    "acousticness": "Electronic",
    "speechiness": "Instrument-led",
    "instrumentalness": "Vocal-led",
}

SIMILARITY_LABELS = [
    (0.8, "Extremely similar"),
    (0.6, "Very similar"),
    (0.4, "Similar"),
]
SIMILARITY_LABEL_FALLBACK = "Somewhat similar"

# =============================================================================
# CACHING CONFIGURATION
# =============================================================================
CACHE_DIR = os.environ.get(
    "TUNELENS_CACHE_DIR",
    os.path.join(os.path.dirname(__file__), ".cache"),
)
CACHE_TTL_HOURS = int(os.environ.get("TUNELENS_CACHE_TTL_HOURS", "24"))

# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================
OUTPUT_FORMATS = ["json", "simple"]
