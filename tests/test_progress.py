"""Tests for dashboard progress status."""

import pytest

from macro_tracker.domain.nutrition import DEFAULT_TARGETS, Nutrients
from macro_tracker.services.progress import day_progress, nutrient_progress


def test_training_kcal_bands() -> None:
    low = nutrient_progress("kcal", 2400, 2500, is_training_day=True)
    ok = nutrient_progress("kcal", 2550, 2500, is_training_day=True)
    over = nutrient_progress("kcal", 2600, 2500, is_training_day=True)

    assert (low.state, low.delta) == ("low", pytest.approx(100))
    assert (ok.state, ok.delta) == ("ok", 0.0)
    assert (over.state, over.delta) == ("over", pytest.approx(100))


def test_rest_day_uses_wider_kcal_band() -> None:
    training = nutrient_progress("kcal", 1945, 2000, is_training_day=True)
    rest = nutrient_progress("kcal", 1945, 2000, is_training_day=False)

    assert training.state == "low"
    assert rest.state == "ok"


def test_percentage_is_capped() -> None:
    progress = nutrient_progress("protein", 400, 180, is_training_day=True)

    assert progress.percentage == 110


def test_zero_target() -> None:
    assert nutrient_progress("fiber", 0, 0, is_training_day=True).state == "ok"
    assert nutrient_progress("fiber", 3, 0, is_training_day=True).state == "over"


def test_day_progress_covers_every_nutrient() -> None:
    progress = day_progress(Nutrients(), DEFAULT_TARGETS.training, True)

    assert [p.nutrient for p in progress] == [
        "kcal",
        "carbs",
        "protein",
        "fat",
        "fiber",
    ]
    assert all(p.state == "low" for p in progress)
