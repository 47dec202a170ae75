import pytest

from tunelens.features import aggregate
from tunelens.moods import (
    MOOD_CATEGORIES,
    MoodCategory,
    classify,
    find_category,
    in_range,
    _category,
)


def test_table_order_and_names():
    assert [c.name for c in MOOD_CATEGORIES] == [
        "Pop", "Rock", "EDM/Dance", "Acoustic", "Hip-Hop/R&B", "Ambient/Chill",
    ]


def test_every_category_has_energy_and_valence():
    for category in MOOD_CATEGORIES:
        assert "energy" in category.criteria
        assert "valence" in category.criteria


def test_criteria_are_read_only():
    with pytest.raises(TypeError):
        MOOD_CATEGORIES[0].criteria["energy"] = (0.0, 1.0)


def test_in_range_is_inclusive():
    assert in_range(0.4, (0.4, 0.8))
    assert in_range(0.8, (0.4, 0.8))
    assert not in_range(0.81, (0.4, 0.8))


def test_high_energy_danceable_track_is_edm(vector):
    v = vector(energy=0.9, valence=0.9, danceability=0.9, acousticness=0.1)
    assert classify(v).name == "EDM/Dance"


def test_no_match_returns_none(vector):
    v = vector(energy=0.05, valence=0.05)
    assert classify(v) is None


def test_first_match_wins(vector):
    # Inside both Pop and Hip-Hop/R&B; Pop comes first
    v = vector(energy=0.6, valence=0.6, danceability=0.7, acousticness=0.5)
    assert classify(v).name == "Pop"


def test_optional_criteria_are_checked_when_present(vector):
    # Fits Ambient/Chill on energy and valence but not instrumentalness
    v = vector(energy=0.1, valence=0.5, danceability=0.2, acousticness=0.2, instrumentalness=0.1)
    assert classify(v) is None

    v = vector(energy=0.1, valence=0.5, danceability=0.2, acousticness=0.2, instrumentalness=0.8)
    assert classify(v).name == "Ambient/Chill"


def test_boundary_values_match(vector):
    v = vector(energy=0.6, valence=0.3, danceability=0.1, acousticness=0.4)
    assert classify(v).name == "Rock"


def test_custom_table_end_to_end(vector):
    high_energy = _category("Charged", "High energy only", "red", "⚡", energy=(0.6, 1.0), valence=(0.0, 1.0))
    vectors = [vector(energy=e) for e in (0.2, 0.4, 0.6)]

    assert aggregate(vectors).avg_energy == pytest.approx(0.4)
    matches = [classify(v, [high_energy]) for v in vectors]
    assert matches == [None, None, high_energy]


def test_find_category():
    assert find_category("Rock") is MOOD_CATEGORIES[1]
    assert find_category("Polka") is None


def test_midpoint():
    rock = find_category("Rock")
    assert rock.midpoint("energy") == pytest.approx(0.8)
    assert rock.midpoint("danceability") is None


def test_to_dict():
    data = find_category("Pop").to_dict()
    assert data["criteria"]["energy"] == [0.4, 0.8]
    assert data["emoji"] == "🎵"
    assert isinstance(find_category("Pop"), MoodCategory)
