"""Tests for configuration helpers."""

from food_resolver.config import parse_data_types


def test_plausibility_limits_follow_settings(settings) -> None:
    tuned = settings.model_copy(update={"max_calorie_divergence": 0.2})

    limits = tuned.plausibility_limits()

    assert limits.max_calorie_divergence == 0.2
    assert limits.divergence_min_calories == 50
    assert limits.max_calories == 900


def test_parse_data_types() -> None:
    assert parse_data_types(None) == ()
    assert parse_data_types("Survey (FNDDS), Foundation,") == (
        "Survey (FNDDS)",
        "Foundation",
    )
