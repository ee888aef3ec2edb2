import math

import pytest

from apps.okrs.domain.progress import (
    is_completed, normalize_kr_progress, normalize_progress, objective_progress,
)


class TestNormalizeProgress:
    def test_fraction_is_scaled_to_percent(self):
        assert normalize_progress(0.42) == 42

    def test_over_achievement_is_not_capped(self):
        assert normalize_progress(142) == 142

    def test_exactly_one_means_complete(self):
        assert normalize_progress(1) == 100

    @pytest.mark.parametrize('value', [None, '', 'abc', math.nan, math.inf])
    def test_degenerate_input_is_zero(self, value):
        assert normalize_progress(value) == 0

    def test_numeric_string_is_parsed(self):
        assert normalize_progress('0.5') == 50

    def test_negative_is_floored(self):
        assert normalize_progress(-5) == 0

    def test_half_rounds_up(self):
        assert normalize_progress(42.5) == 43


class TestKeyResultProgress:
    @pytest.mark.parametrize('current, expected', [(1, 100), (True, 100), (0, 0), (None, 0)])
    def test_boolean(self, current, expected):
        assert normalize_kr_progress({'kind': 'boolean', 'current_value': current}) == expected

    def test_percent_uses_current_value(self):
        assert normalize_kr_progress({'kind': 'percent', 'current_value': 37.6}) == 38

    def test_numeric_up(self):
        kr = {'kind': 'numeric', 'direction': 'up', 'current_value': 3, 'target_value': 12}
        assert normalize_kr_progress(kr) == 25

    def test_numeric_up_zero_target(self):
        kr = {'kind': 'numeric', 'direction': 'up', 'current_value': 5, 'target_value': 0}
        assert normalize_kr_progress(kr) == 0

    def test_numeric_down(self):
        # 90 kg -> 80 kg, teraz 85
        kr = {'kind': 'numeric', 'direction': 'down', 'baseline_value': 90, 'current_value': 85, 'target_value': 80}
        assert normalize_kr_progress(kr) == 50

    def test_numeric_down_baseline_equals_target(self):
        kr = {'kind': 'numeric', 'direction': 'down', 'baseline_value': 80, 'current_value': 85, 'target_value': 80}
        assert normalize_kr_progress(kr) == 0

    @pytest.mark.parametrize('baseline', [0, None])
    def test_numeric_down_without_baseline(self, baseline):
        kr = {'kind': 'numeric', 'direction': 'down', 'baseline_value': baseline, 'current_value': 5, 'target_value': 1}
        assert normalize_kr_progress(kr) == 0

    def test_numeric_down_moving_away_is_floored(self):
        kr = {'kind': 'numeric', 'direction': 'down', 'baseline_value': 90, 'current_value': 95, 'target_value': 80}
        assert normalize_kr_progress(kr) == 0

    def test_explicit_progress_wins(self):
        kr = {'kind': 'boolean', 'current_value': 0, 'progress': 0.42}
        assert normalize_kr_progress(kr) == 42

    def test_explicit_over_achievement(self):
        assert normalize_kr_progress({'progress': 142}) == 142

    def test_accepts_objects(self):
        class Row:
            kind = 'numeric'
            direction = 'up'
            current_value = 10
            target_value = 10
            baseline_value = None
            progress = None

        assert normalize_kr_progress(Row()) == 100
        assert is_completed(Row())


def test_objective_progress_is_mean_of_key_results():
    krs = [{'progress': 1}, {'progress': 0.5}, {'kind': 'boolean', 'current_value': 0}]
    assert objective_progress(krs) == 50


def test_objective_without_key_results():
    assert objective_progress([]) == 0
