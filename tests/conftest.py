import pytest

from tunelens.features import FeatureVector
from tunelens.spotify_client import SpotifyClient


def make_vector(**overrides):
    values = dict(
        danceability=0.5,
        energy=0.5,
        acousticness=0.5,
        valence=0.5,
        tempo=120.0,
        loudness=-8.0,
        speechiness=0.05,
        instrumentalness=0.0,
        key=0,
        mode=1,
        time_signature=4,
    )
    values.update(overrides)
    return FeatureVector(**values)


def features_payload(track_id, **overrides):
    payload = make_vector(**overrides).to_dict()
    payload.update({"id": track_id, "uri": f"spotify:track:{track_id}", "type": "audio_features"})
    return payload


class FakeSpotify:
    """In-memory stand-in for spotipy.Spotify."""

    def __init__(self, tracks=None, features=None, recommendations=None, playlists=None):
        self.tracks_by_id = tracks or {}
        self.features_by_id = features or {}
        self.recommended = recommendations or []
        self.playlists = playlists or {}
        self.calls = []

    def track(self, track_id):
        self.calls.append(("track", track_id))
        return self.tracks_by_id[track_id]

    def tracks(self, ids):
        self.calls.append(("tracks", list(ids)))
        return {"tracks": [self.tracks_by_id.get(i) for i in ids]}

    def audio_features(self, ids):
        self.calls.append(("audio_features", list(ids)))
        return [self.features_by_id.get(i) for i in ids]

    def search(self, q, type="track", limit=20):
        self.calls.append(("search", q))
        items = [t for t in self.tracks_by_id.values() if q.lower() in t["name"].lower()]
        return {"tracks": {"items": items[:limit]}}

    def recommendations(self, seed_artists=None, seed_genres=None, seed_tracks=None, limit=20, **kwargs):
        self.calls.append(("recommendations", {
            "seed_tracks": seed_tracks,
            "seed_artists": seed_artists,
            "seed_genres": seed_genres,
            "limit": limit,
            **kwargs,
        }))
        return {"tracks": self.recommended[:limit]}

    def playlist(self, playlist_id):
        self.calls.append(("playlist", playlist_id))
        return self.playlists[playlist_id]

    def next(self, results):
        return results["next_page"]


def make_track(track_id, name, artist="Artist"):
    return {"id": track_id, "name": name, "artists": [{"id": f"a_{artist}", "name": artist}]}


@pytest.fixture
def vector():
    return make_vector


@pytest.fixture
def fake_spotify():
    seed = make_track("seed", "Seed Song")
    close = make_track("close", "Close Match", "Near")
    far = make_track("far", "Far Away", "Distant")
    missing = make_track("nofeat", "No Features", "Ghost")

    return FakeSpotify(
        tracks={t["id"]: t for t in (seed, close, far, missing)},
        features={
            "seed": features_payload("seed", energy=0.8, valence=0.7, danceability=0.75, acousticness=0.1),
            "close": features_payload("close", energy=0.78, valence=0.68, danceability=0.74, acousticness=0.12),
            "far": features_payload("far", energy=0.1, valence=0.1, danceability=0.2, acousticness=0.9,
                                    tempo=70.0, loudness=-25.0),
        },
        recommendations=[far, missing, close],
    )


@pytest.fixture
def client(fake_spotify, tmp_path):
    return SpotifyClient(use_cache=False, sp=fake_spotify, cache_dir=str(tmp_path / "cache"))
