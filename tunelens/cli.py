"""
Command-Line Interface for TuneLens
===================================

Usage:
    python -m tunelens.cli <command> [options]

Commands:
    analyze <track>               Mood, characteristics and technical facts
    similar <track> [-n N]        Tracks that sound like the seed
    profile <tracks...>           Aggregated profile of tracks or a playlist
    params <tracks...> [--bias]   Recommendation parameters (and tracks)
    search <query> [-n N]         Search tracks and show their style
    compare <track> <track>       Similarity between two tracks
    categories                    List the mood/genre categories

Examples:
    python -m tunelens.cli search "daft punk" -n 5
    python -m tunelens.cli analyze https://open.spotify.com/track/xxxxx
    python -m tunelens.cli similar spotify:track:xxxxx -n 10 --format simple
    python -m tunelens.cli params --playlist spotify:playlist:xxxxx --bias Rock
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from tunelens.config import NUM_SIMILAR_TRACKS, OUTPUT_FORMATS
from tunelens.moods import MOOD_CATEGORIES
from tunelens.explainer import similarity_label
from tunelens.utils import normalize_spotify_id

logger = logging.getLogger("tunelens")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='tunelens',
        description='🎵 TuneLens - audio feature analytics for Spotify tracks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  SPOTIFY_CLIENT_ID      Your Spotify API client ID
  SPOTIFY_CLIENT_SECRET  Your Spotify API client secret
        """
    )

    parser.add_argument(
        '--format',
        type=str,
        choices=OUTPUT_FORMATS,
        default='json',
        help='Output format (default: json)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--no-cache',
        action='store_true',
        help='Disable API response caching'
    )

    sub = parser.add_subparsers(dest='command', required=True)

    analyze = sub.add_parser('analyze', help='Analyse a single track')
    analyze.add_argument('track', help='Spotify track URL, URI, or ID')

    similar = sub.add_parser('similar', help='Find tracks similar to a seed track')
    similar.add_argument('track', help='Spotify track URL, URI, or ID')
    similar.add_argument(
        '-n', '--num',
        type=int,
        default=NUM_SIMILAR_TRACKS,
        help=f'Number of similar tracks (default: {NUM_SIMILAR_TRACKS})'
    )

    for name, help_text in (
        ('profile', 'Aggregate a music profile'),
        ('params', 'Generate recommendation parameters and fetch recommendations'),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument('tracks', nargs='*', help='Spotify track URLs, URIs, or IDs')
        cmd.add_argument('--playlist', type=str, default=None, help='Use the tracks of this playlist')
        if name == 'params':
            cmd.add_argument(
                '--bias',
                type=str,
                default=None,
                help='Category name to steer the targets toward'
            )

    search = sub.add_parser('search', help='Search tracks by name or artist')
    search.add_argument('query', help='Search query')
    search.add_argument('-n', '--num', type=int, default=10, help='Number of results (default: 10)')

    compare = sub.add_parser('compare', help='Similarity between two tracks')
    compare.add_argument('first', help='Spotify track URL, URI, or ID')
    compare.add_argument('second', help='Spotify track URL, URI, or ID')

    sub.add_parser('categories', help='List mood/genre categories')

    return parser


def format_categories(fmt: str) -> str:
    if fmt == 'json':
        return json.dumps([c.to_dict() for c in MOOD_CATEGORIES], indent=2, ensure_ascii=False)

    lines = []
    for i, category in enumerate(MOOD_CATEGORIES, 1):
        ranges = ", ".join(f"{k} {lo:.1f}-{hi:.1f}" for k, (lo, hi) in category.criteria.items())
        lines.append(f"{i}. {category.emoji} {category.name}: {category.description}")
        lines.append(f"   {ranges}")
    return '\n'.join(lines)


def format_analysis(name: str, analysis, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps({"track_name": name, **analysis.to_dict()}, indent=2, ensure_ascii=False)

    mood = f"{analysis.mood.emoji} {analysis.mood.name}" if analysis.mood else "Uncategorized"
    lines = [f"🎵 {name}", f"   Mood: {mood}"]
    for key, value in analysis.characteristics.items():
        lines.append(f"   {key.replace('_', ' ').title()}: {value}")
    t = analysis.technical
    lines.append(f"   {t['key']} {t['mode']} | {t['time_signature']} | {t['tempo']} | {t['loudness']}")
    return '\n'.join(lines)


def format_similar(result, fmt: str) -> str:
    if fmt == 'json':
        return result.to_json(indent=2)

    lines = [
        f"🎵 Similar to: {result.seed_name}",
        f"   Track ID: {result.seed_id}",
        "",
        "Top {0} Similar Tracks:".format(len(result.tracks)),
        "-" * 50,
    ]
    for i, track in enumerate(result.tracks, 1):
        lines.append(f"{i:2}. {track.track_name}")
        lines.append(f"    Artists: {', '.join(track.artist_names)}")
        lines.append(f"    Similarity: {track.similarity:.4f} ({track.label})")
        lines.append(f"    Style: {track.analysis.characteristics['genre']}")
        lines.append("")
    return '\n'.join(lines)


def format_profile(profile, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(profile.to_dict(), indent=2)

    return '\n'.join([
        f"Danceability: {profile.avg_danceability:.3f}",
        f"Energy:       {profile.avg_energy:.3f}",
        f"Valence:      {profile.avg_valence:.3f}",
        f"Acousticness: {profile.avg_acousticness:.3f}",
        f"Tempo:        {profile.avg_tempo:.1f} BPM",
        f"Loudness:     {profile.avg_loudness:.1f} dB",
        f"Keys:         {sorted(profile.preferred_keys)}",
        f"Modes:        {sorted(profile.preferred_modes)}",
        f"Time sigs:    {sorted(profile.time_signature_preferences)}",
    ])


def format_recommendations(output, fmt: str) -> str:
    if fmt == 'json':
        return output.to_json(indent=2)

    lines = ["Parameters:"]
    lines.extend(f"   {k} = {v}" for k, v in output.params.items())
    lines.append("")
    lines.append(f"Recommendations ({len(output.tracks)}):")
    lines.append("-" * 50)
    for i, rec in enumerate(output.to_dict()['recommendations'], 1):
        lines.append(f"{i:2}. {rec['track_name']} - {', '.join(rec['artist_names'])}")
    return '\n'.join(lines)


def format_search(rows: List[dict], fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(rows, indent=2, ensure_ascii=False)

    lines = []
    for i, row in enumerate(rows, 1):
        style = row['style'] or 'No audio features'
        lines.append(f"{i:2}. {row['track_name']} - {', '.join(row['artist_names'])} [{style}]")
        lines.append(f"    Track ID: {row['track_id']}")
    return '\n'.join(lines)


def format_comparison(names: List[str], score: Optional[float], fmt: str) -> str:
    if fmt == 'json':
        return json.dumps({
            "tracks": names,
            "similarity": round(score, 4) if score is not None else None,
            "label": similarity_label(score) if score is not None else None,
        }, indent=2, ensure_ascii=False)

    if score is None:
        return f"{names[0]} vs {names[1]}: audio features unavailable"
    return f"{names[0]} vs {names[1]}: {score:.4f} ({similarity_label(score)})"


def validate_environment() -> bool:
    """Check if required environment variables are set."""
    client_id = os.environ.get('SPOTIFY_CLIENT_ID') or os.environ.get('SPOTIPY_CLIENT_ID')
    client_secret = os.environ.get('SPOTIFY_CLIENT_SECRET') or os.environ.get('SPOTIPY_CLIENT_SECRET')

    if not client_id or not client_secret:
        print("❌ Error: Spotify API credentials not found!", file=sys.stderr)
        print("", file=sys.stderr)
        print("Please set the following environment variables:", file=sys.stderr)
        print("  SPOTIFY_CLIENT_ID=your_client_id", file=sys.stderr)
        print("  SPOTIFY_CLIENT_SECRET=your_client_secret", file=sys.stderr)
        return False

    return True


def _resolve_tracks(spotify, args) -> List[str]:
    track_ids = list(args.tracks)
    if args.playlist:
        track_ids.extend(spotify.get_playlist_track_ids(args.playlist))
    return track_ids


def search_with_style(spotify, query: str, limit: int) -> List[dict]:
    """Search tracks and attach each result's style guess (None without features)."""
    from tunelens.explainer import genre_style

    tracks = spotify.search_tracks(query, limit=limit)
    vectors = spotify.get_feature_vectors([t['id'] for t in tracks])
    return [
        {
            "track_id": track['id'],
            "track_name": track.get('name', ''),
            "artist_names": [a.get('name', '') for a in track.get('artists', [])],
            "style": genre_style(vector) if vector is not None else None,
        }
        for track, vector in zip(tracks, vectors)
    ]


def run_command(args, spotify) -> str:
    """Execute a parsed command and return its formatted output."""
    from tunelens.recommender import SimilarTrackEngine
    from tunelens.explainer import analyze_track
    from tunelens.features import aggregate

    engine = SimilarTrackEngine(spotify_client=spotify)

    if args.command == 'analyze':
        track = spotify.get_track(args.track)
        vector = spotify.get_feature_vectors([track['id']])[0]
        if vector is None:
            raise ValueError(f"No audio features available for track {track['id']}")
        return format_analysis(track.get('name', ''), analyze_track(vector), args.format)

    if args.command == 'similar':
        return format_similar(engine.find_similar(args.track, limit=args.num), args.format)

    if args.command == 'search':
        return format_search(search_with_style(spotify, args.query, args.num), args.format)

    if args.command == 'compare':
        ids = [normalize_spotify_id(args.first), normalize_spotify_id(args.second)]
        by_id = {t['id']: t.get('name', '') for t in spotify.get_tracks(ids)}
        names = [by_id.get(track_id, track_id) for track_id in ids]
        return format_comparison(names, engine.compare_tracks(*ids), args.format)

    track_ids = _resolve_tracks(spotify, args)
    if args.command == 'profile':
        vectors = [v for v in spotify.get_feature_vectors(track_ids) if v is not None]
        return format_profile(aggregate(vectors), args.format)

    # params
    output = engine.recommend_for_tracks(track_ids, bias_category=args.bias)
    return format_recommendations(output, args.format)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == 'categories':
        print(format_categories(args.format))
        return 0

    if not validate_environment():
        return 1

    try:
        from tunelens.spotify_client import SpotifyClient

        spotify = SpotifyClient(use_cache=not args.no_cache)
        print(run_command(args, spotify))
        return 0

    except Exception as e:
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        if args.verbose:
            logger.exception("Command %s failed", args.command)
        return 1


if __name__ == '__main__':
    sys.exit(main())
