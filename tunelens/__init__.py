"""
TuneLens - Audio Feature Analytics
==================================

Aggregates Spotify audio features into music profiles, classifies tracks
into mood/genre categories, scores profile similarity and derives
recommendation query parameters.

Modules:
    - config: Configuration and constants
    - features: Feature vectors, profiles and aggregation
    - moods: Mood/genre category table and classifier
    - scoring: Profile similarity scoring
    - recommender: Recommendation parameters and similar-track search
    - explainer: Per-track analysis
    - spotify_client: Spotify API wrapper
    - cli: Command-line interface
"""

from .features import FeatureVector, MusicProfile, aggregate
from .moods import MoodCategory, MOOD_CATEGORIES, classify, find_category
from .scoring import similarity
from .recommender import to_recommendation_params
from .explainer import TrackAnalysis, analyze_track

__version__ = "1.0.0"
__author__ = "TuneLens Team"
