"""
Spotify API Client Wrapper
==========================

Handles all interactions with the Spotify API including:
- Authentication (client credentials)
- Track metadata and search
- Audio features retrieval
- Recommendation queries
- Playlist data extraction
- Throttling and caching
"""

import os
import time
import logging
from typing import List, Dict, Optional, Any

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials

from .features import FeatureVector
from .utils import Cache, batch_process, normalize_spotify_id
from .config import (
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    CACHE_DIR,
    CACHE_TTL_HOURS,
    TRACKS_BATCH_SIZE,
    AUDIO_FEATURES_BATCH_SIZE,
    RECOMMENDATION_LIMIT,
)

logger = logging.getLogger(__name__)

# Query keys forwarded to the recommendations endpoint
RECOMMENDATION_PARAM_PREFIXES = ("target_", "min_", "max_")


class SpotifyClient:
    """
    Wrapper around Spotipy with caching and batch operations.

    Attributes:
        sp: Spotipy client instance
        cache: File cache for API responses
    """

    def __init__(
        self,
        use_cache: bool = True,
        sp: Optional[spotipy.Spotify] = None,
        cache_dir: str = CACHE_DIR
    ):
        """
        Initialize Spotify client with credentials.

        Args:
            use_cache: Enable local caching for API responses
            sp: Pre-configured Spotipy client (built from credentials if None)
            cache_dir: Directory for cached responses
        """
        self.cache = Cache(cache_dir, ttl_hours=CACHE_TTL_HOURS, enabled=use_cache)

        if sp is None:
            # Credentials are read at runtime so tests and CLIs can set them late
            client_id = os.environ.get("SPOTIFY_CLIENT_ID") or os.environ.get("SPOTIPY_CLIENT_ID") or SPOTIFY_CLIENT_ID
            client_secret = os.environ.get("SPOTIFY_CLIENT_SECRET") or os.environ.get("SPOTIPY_CLIENT_SECRET") or SPOTIFY_CLIENT_SECRET

            auth_manager = SpotifyClientCredentials(
                client_id=client_id,
                client_secret=client_secret
            )
            sp = spotipy.Spotify(auth_manager=auth_manager)
        self.sp = sp

        # Request throttling
        self._last_request_time = 0.0
        self._min_request_interval = 0.05  # 50ms between requests

    def _throttle(self):
        """Ensure minimum time between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    # =========================================================================
    # TRACK OPERATIONS
    # =========================================================================

    def get_track(self, track_id: str) -> Dict:
        """
        Fetch metadata for a single track.

        Args:
            track_id: Spotify track ID, URI or URL

        Returns:
            Track metadata dictionary

        Raises:
            spotipy.SpotifyException: If the API call fails
        """
        track_id = normalize_spotify_id(track_id, "track")
        cache_key = self.cache.make_key("track", track_id)
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        self._throttle()
        track = self.sp.track(track_id)
        self.cache.set(cache_key, track)
        return track

    def get_tracks(self, track_ids: List[str]) -> List[Dict]:
        """
        Fetch track metadata in batches.

        Args:
            track_ids: List of Spotify track IDs

        Returns:
            List of track metadata dictionaries
        """
        if not track_ids:
            return []

        # Keyed on request order; the result follows it
        cache_key = self.cache.make_key("tracks", track_ids)
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        failed = []

        def fetch(batch: List[str]) -> List[Dict]:
            self._throttle()
            try:
                result = self.sp.tracks(batch)
                return [t for t in result['tracks'] if t]
            except spotipy.SpotifyException as e:
                logger.warning("Error fetching tracks batch: %s", e)
                failed.append(batch)
                return []

        tracks = batch_process(track_ids, TRACKS_BATCH_SIZE, fetch)
        if not failed:
            self.cache.set(cache_key, tracks)
        return tracks

    def search_tracks(self, query: str, limit: int = 20) -> List[Dict]:
        """
        General track search.

        Args:
            query: Search query
            limit: Maximum tracks to return

        Returns:
            List of track dictionaries
        """
        cache_key = self.cache.make_key("search", f"{query}_{limit}")
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        self._throttle()
        try:
            result = self.sp.search(q=query, type='track', limit=min(limit, 50))
        except spotipy.SpotifyException as e:
            logger.warning("Error searching tracks: %s", e)
            return []

        tracks = result.get('tracks', {}).get('items', [])
        self.cache.set(cache_key, tracks)
        return tracks

    # =========================================================================
    # AUDIO FEATURES
    # =========================================================================

    def get_audio_features(self, track_ids: List[str]) -> List[Optional[Dict]]:
        """
        Fetch audio features for tracks in batches.

        Args:
            track_ids: List of Spotify track IDs

        Returns:
            List of audio feature dictionaries aligned with track_ids
            (None for unavailable)
        """
        if not track_ids:
            return []

        cache_key = self.cache.make_key("audio_features", track_ids)
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        failed = []

        def fetch(batch: List[str]) -> List[Optional[Dict]]:
            self._throttle()
            try:
                result = self.sp.audio_features(batch)
            except spotipy.SpotifyException as e:
                logger.warning("Error fetching audio features: %s", e)
                failed.append(batch)
                return [None] * len(batch)
            return result if result else [None] * len(batch)

        features = batch_process(track_ids, AUDIO_FEATURES_BATCH_SIZE, fetch)
        # Failed batches are not cached so the next call retries them
        if not failed:
            self.cache.set(cache_key, features)
        return features

    def get_feature_vectors(self, track_ids: List[str]) -> List[Optional[FeatureVector]]:
        """
        Fetch audio features as FeatureVector objects.

        Returns:
            One entry per track id; None where features are unavailable
        """
        return [
            FeatureVector.from_dict(payload) if payload else None
            for payload in self.get_audio_features(track_ids)
        ]

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    def get_recommendations(
        self,
        seed_tracks: Optional[List[str]] = None,
        seed_artists: Optional[List[str]] = None,
        seed_genres: Optional[List[str]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict]:
        """
        Query the recommendations endpoint.

        Args:
            seed_tracks, seed_artists, seed_genres: Seeds for the query
            params: Parameter bundle; target_*, min_*, max_* and limit keys
                are forwarded, anything else is ignored

        Returns:
            List of recommended track dictionaries
        """
        params = dict(params or {})
        limit = params.pop('limit', RECOMMENDATION_LIMIT)
        tunables = {
            k: v for k, v in params.items()
            if k.startswith(RECOMMENDATION_PARAM_PREFIXES) and v is not None
        }

        cache_key = self.cache.make_key("recommendations", {
            "seed_tracks": seed_tracks,
            "seed_artists": seed_artists,
            "seed_genres": seed_genres,
            "limit": limit,
            "params": tunables,
        })
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        self._throttle()
        try:
            result = self.sp.recommendations(
                seed_artists=seed_artists,
                seed_genres=seed_genres,
                seed_tracks=seed_tracks,
                limit=limit,
                **tunables
            )
        except spotipy.SpotifyException as e:
            logger.warning("Error fetching recommendations: %s", e)
            return []

        tracks = [t for t in result.get('tracks', []) if t]
        self.cache.set(cache_key, tracks)
        return tracks

    # =========================================================================
    # PLAYLIST OPERATIONS
    # =========================================================================

    def get_playlist_track_ids(self, playlist_input: str) -> List[str]:
        """
        Fetch all track IDs from a playlist, following pagination.

        Args:
            playlist_input: Playlist URL, URI, or ID

        Returns:
            Track IDs in playlist order

        Raises:
            spotipy.SpotifyException: If the playlist cannot be fetched
        """
        playlist_id = normalize_spotify_id(playlist_input, "playlist")
        cache_key = self.cache.make_key("playlist", playlist_id)
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        self._throttle()
        playlist = self.sp.playlist(playlist_id)

        track_ids = []
        results = playlist['tracks']
        while results:
            for item in results['items']:
                track = item.get('track')
                if track and track.get('id'):
                    track_ids.append(track['id'])

            if results.get('next'):
                self._throttle()
                results = self.sp.next(results)
            else:
                results = None

        logger.debug("Playlist %s has %d tracks", playlist_id, len(track_ids))
        self.cache.set(cache_key, track_ids)
        return track_ids
