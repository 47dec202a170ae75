import json
import time

from tunelens.utils import (
    Cache,
    batch_process,
    normalize_spotify_id,
    round_half_up,
)


def test_round_half_up():
    assert round_half_up(120.5) == 121
    assert round_half_up(-7.5) == -7
    assert round_half_up(-7.6) == -8
    assert round_half_up(0.4) == 0
    # Largest double below 0.5; adding 0.5 would round up to 1.0
    assert round_half_up(0.49999999999999994) == 0
    assert round_half_up(2.5) == 3


def test_normalize_spotify_id():
    assert normalize_spotify_id("https://open.spotify.com/track/abc?si=xyz") == "abc"
    assert normalize_spotify_id("spotify:track:abc") == "abc"
    assert normalize_spotify_id(" abc ") == "abc"
    assert normalize_spotify_id("spotify:playlist:pl1", "playlist") == "pl1"


def test_batch_process():
    seen = []

    def processor(batch):
        seen.append(len(batch))
        return [x * 2 for x in batch]

    assert batch_process(list(range(5)), 2, processor) == [0, 2, 4, 6, 8]
    assert seen == [2, 2, 1]


def test_cache_roundtrip_and_clear(tmp_path):
    cache = Cache(str(tmp_path / "c"), ttl_hours=1)
    key = cache.make_key("tracks", ["b", "a"])

    assert cache.get(key) is None
    cache.set(key, {"x": 1})
    assert cache.get(key) == {"x": 1}
    assert cache.clear() == 1
    assert cache.get(key) is None


def test_cache_expires(tmp_path):
    cache = Cache(str(tmp_path), ttl_hours=1)
    key = cache.make_key("track", "abc")
    with open(tmp_path / f"{key}.json", "w", encoding="utf-8") as f:
        json.dump({"timestamp": time.time() - 7200, "data": "stale"}, f)

    assert cache.get(key) is None
    assert not (tmp_path / f"{key}.json").exists()


def test_disabled_cache(tmp_path):
    cache = Cache(str(tmp_path / "off"), enabled=False)
    cache.set("k", 1)

    assert cache.get("k") is None
    assert not (tmp_path / "off").exists()
