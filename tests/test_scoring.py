import pytest

from tunelens.config import DEFAULT_WEIGHTS, SimilarityWeights
from tunelens.features import MusicProfile, aggregate
from tunelens.scoring import rank_by_similarity, similarity, similarity_breakdown


def profile(**overrides):
    values = dict(
        avg_danceability=0.5,
        avg_energy=0.5,
        avg_acousticness=0.5,
        avg_valence=0.5,
        avg_tempo=120.0,
        avg_loudness=-8.0,
    )
    values.update(overrides)
    return MusicProfile(**values)


def test_weights_sum_to_098():
    assert sum(DEFAULT_WEIGHTS.to_dict().values()) == pytest.approx(0.98)


def test_self_similarity_is_090_not_one():
    p = profile()
    assert similarity(p, p) == pytest.approx(0.90)


def test_empty_profiles_score_090():
    assert similarity(aggregate([]), aggregate([])) == pytest.approx(0.90)


def test_key_and_mode_do_not_affect_score():
    a = profile(preferred_keys=frozenset({0}), preferred_modes=frozenset({1}))
    b = profile(preferred_keys=frozenset({6}), preferred_modes=frozenset({0}))
    assert similarity(a, b) == pytest.approx(0.90)


def test_monotonically_decreasing_in_energy_difference():
    base = profile(avg_energy=0.0)
    scores = [similarity(base, profile(avg_energy=e)) for e in (0.0, 0.25, 0.5, 0.75, 1.0)]

    assert all(earlier > later for earlier, later in zip(scores, scores[1:]))
    assert scores[-1] == pytest.approx(0.70)


def test_symmetric():
    a = profile(avg_energy=0.9, avg_tempo=90.0, avg_loudness=-3.0)
    b = profile(avg_energy=0.2, avg_tempo=170.0, avg_loudness=-20.0)
    assert similarity(a, b) == pytest.approx(similarity(b, a))


def test_tempo_term_floors_at_zero():
    a = profile(avg_tempo=60.0)
    b = profile(avg_tempo=400.0)

    breakdown = similarity_breakdown(a, b)

    assert breakdown.tempo == 0.0
    assert breakdown.final_score == pytest.approx(0.80)


def test_loudness_normalised_by_60_db():
    breakdown = similarity_breakdown(profile(avg_loudness=0.0), profile(avg_loudness=-30.0))
    assert breakdown.loudness == pytest.approx(0.5 * 0.05)


def test_breakdown_terms():
    a = profile(avg_danceability=1.0, avg_acousticness=0.0)
    b = profile(avg_danceability=0.5, avg_acousticness=1.0)

    breakdown = similarity_breakdown(a, b)

    assert breakdown.danceability == pytest.approx(0.5 * 0.20)
    assert breakdown.acousticness == pytest.approx(0.0)
    assert breakdown.energy == pytest.approx(0.20)
    assert breakdown.final_score == pytest.approx(breakdown.raw_total)


def test_result_is_clamped():
    # Out-of-range inputs are not validated, the final score still is
    a = profile(avg_energy=5.0, avg_valence=5.0, avg_danceability=5.0, avg_acousticness=5.0)
    b = profile(avg_energy=0.0, avg_valence=0.0, avg_danceability=0.0, avg_acousticness=0.0)
    assert similarity(a, b) == 0.0

    heavy = SimilarityWeights(danceability=1.0, energy=1.0)
    assert similarity(profile(), profile(), heavy) == 1.0


def test_rank_by_similarity():
    reference = profile(avg_energy=0.8)
    candidates = [
        ("low", profile(avg_energy=0.1)),
        ("exact", profile(avg_energy=0.8)),
        ("mid", profile(avg_energy=0.5)),
    ]

    ranked = rank_by_similarity(reference, candidates)
    assert [name for name, _ in ranked] == ["exact", "mid", "low"]
    assert ranked[0][1] == pytest.approx(0.90)

    assert [name for name, _ in rank_by_similarity(reference, candidates, limit=2)] == ["exact", "mid"]
