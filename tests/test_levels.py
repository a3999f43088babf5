import pytest

from app.features.progress.levels import (
    ECO_LEVELS,
    MAX_LEVEL,
    calculate_level,
    get_level_name,
    points_to_next_level,
)


@pytest.mark.parametrize(
    "points,level",
    [(0, 1), (99, 1), (100, 2), (299, 2), (300, 3), (500, 3), (599, 3), (600, 4),
     (1000, 5), (1500, 6), (2499, 6), (2500, 7), (3999, 7), (4000, 8), (100000, 8)],
)
def test_level_boundaries(points, level):
    assert calculate_level(points) == level


def test_level_is_non_decreasing():
    levels = [calculate_level(p) for p in range(0, 4200, 7)]
    assert levels == sorted(levels)
    assert levels[0] == 1
    assert levels[-1] == MAX_LEVEL


def test_each_tier_starts_at_its_threshold():
    for tier in ECO_LEVELS:
        assert calculate_level(tier.min_points) == tier.level
        if tier.min_points:
            assert calculate_level(tier.min_points - 1) == tier.level - 1


def test_level_names_and_points_to_next():
    assert get_level_name(1) == "Eco Beginner"
    assert get_level_name(8) == "Eco Legend"
    assert points_to_next_level(450) == 150
    assert points_to_next_level(4000) == 0


def test_user_level_follows_points(make_user):
    user = make_user(eco_points=450, level=1)
    assert user.level == 3
