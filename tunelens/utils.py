"""
Utility Functions
=================

Common utilities used across TuneLens.
"""

import json
import math
import hashlib
import time
from pathlib import Path
from typing import Any, Optional, Callable


class Cache:
    """Simple file-based cache with TTL support."""

    def __init__(self, cache_dir: str = ".cache", ttl_hours: int = 24, enabled: bool = True):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache files
            ttl_hours: Time-to-live in hours
            enabled: When False, every lookup misses and nothing is written
        """
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_hours * 3600
        self.enabled = enabled
        if enabled:
            self.cache_dir.mkdir(parents=True, exist_ok=True)

    def make_key(self, prefix: str, data: Any) -> str:
        """Generate cache key from data."""
        data_str = json.dumps(data, sort_keys=True, default=str)
        hash_val = hashlib.md5(data_str.encode()).hexdigest()[:12]
        return f"{prefix}_{hash_val}"

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self.enabled:
            return None

        cache_file = self.cache_dir / f"{key}.json"
        if not cache_file.exists():
            return None

        try:
            with open(cache_file, 'r', encoding='utf-8') as f:
                cached = json.load(f)

            # Check TTL
            if time.time() - cached.get('timestamp', 0) > self.ttl_seconds:
                cache_file.unlink()
                return None

            return cached.get('data')
        except (json.JSONDecodeError, IOError):
            return None

    def set(self, key: str, data: Any) -> None:
        """Set value in cache."""
        if not self.enabled:
            return

        cache_file = self.cache_dir / f"{key}.json"
        try:
            with open(cache_file, 'w', encoding='utf-8') as f:
                json.dump({
                    'timestamp': time.time(),
                    'data': data
                }, f)
        except IOError:
            pass

    def clear(self) -> int:
        """Clear all cache files. Returns number of files deleted."""
        count = 0
        for cache_file in self.cache_dir.glob("*.json"):
            try:
                cache_file.unlink()
                count += 1
            except IOError:
                pass
        return count


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity (-7.5 -> -7)."""
    floor = math.floor(value)
    if value - floor >= 0.5:
        return int(floor) + 1
    return int(floor)


def normalize_spotify_id(value: str, kind: str = "track") -> str:
    """
    Normalize Spotify URL, URI or bare ID to the bare ID.

    Args:
        value: Spotify URL, URI or ID
        kind: Resource type, e.g. "track" or "playlist"

    Returns:
        Clean ID
    """
    value = value.strip()
    if f"spotify.com/{kind}/" in value:
        return value.split(f"/{kind}/")[-1].split("?")[0]
    elif f"spotify:{kind}:" in value:
        return value.split(f"spotify:{kind}:")[-1]
    return value


def batch_process(items: list, batch_size: int, processor: Callable) -> list:
    """
    Process items in batches.

    Args:
        items: Items to process
        batch_size: Size of each batch
        processor: Function to call on each batch

    Returns:
        Flattened list of results
    """
    results = []

    for i in range(0, len(items), batch_size):
        batch = items[i:i + batch_size]
        batch_result = processor(batch)
        if isinstance(batch_result, list):
            results.extend(batch_result)
        else:
            results.append(batch_result)

    return results
