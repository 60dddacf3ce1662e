import math

import pytest

from slatescore.utils.calcs import (
    calculate_win_percentage,
    inverse_sigmoid,
    neg_exp,
    parse_record,
    sigmoid,
    to_float,
)
from slatescore.utils.misc_utils import mappify, path_segment_after, url_path


class TestCurves:
    def test_sigmoid_is_half_at_center(self):
        assert sigmoid(0.5, 0.15, 0.5) == pytest.approx(0.5)

    @pytest.mark.parametrize("p", [0.01, 0.25, 0.5, 0.75, 0.99])
    @pytest.mark.parametrize("scale,center", [(1, 0), (2, 0), (0.15, 0.5), (-3, 1)])
    def test_inverse_sigmoid_inverts_sigmoid(self, p, scale, center):
        assert sigmoid(inverse_sigmoid(p, scale, center), scale, center) == pytest.approx(p)

    def test_inverse_sigmoid_of_075(self):
        assert inverse_sigmoid(0.75, 1, 0) == pytest.approx(math.log(3))

    def test_neg_exp_peaks_at_zero(self):
        assert neg_exp(0, 50) == 1.0
        assert neg_exp(7, 50) == neg_exp(-7, 50)

    @pytest.mark.parametrize("x", [-20, -1, 0.5, 3, 40])
    def test_neg_exp_in_unit_interval(self, x):
        assert 0 < neg_exp(x, 50) <= 1


class TestWinPercentage:
    def test_undefeated_is_regularized(self):
        assert calculate_win_percentage("10-0", 2) == pytest.approx(12 / 14)

    def test_no_games_is_even(self):
        assert calculate_win_percentage("0-0", 2) == 0.5

    def test_zero_pseudo_no_games_falls_back(self):
        assert calculate_win_percentage("0-0", 0) == 0.5

    def test_ties_and_overtime_losses_ignored(self):
        assert parse_record("30-20-5") == (30, 20)
        assert calculate_win_percentage("30-20-5", 0) == pytest.approx(0.6)

    @pytest.mark.parametrize("record", ["", "ten-two", "10", "10-"])
    def test_malformed_record_raises(self, record):
        with pytest.raises(ValueError):
            calculate_win_percentage(record)


class TestConversions:
    @pytest.mark.parametrize(
        "value,expected",
        [(3, 3.0), ("1,234", 1234.0), ("52.1%", 52.1), (" .545 ", 0.545), ("", None), ("N/A", None), (None, None), (True, None)],
    )
    def test_to_float(self, value, expected):
        assert to_float(value) == expected

    def test_mappify_zips_by_position(self):
        assert mappify(["bpi", "bpirank"], [4.1, 3]) == {"bpi": 4.1, "bpirank": 3}

    def test_mappify_rejects_mismatched_lengths(self):
        with pytest.raises(ValueError):
            mappify(["bpi", "bpirank"], [4.1])

    def test_url_path_strips_host(self):
        assert url_path("https://a.espncdn.com/i/teamlogos/nba/500/bos.png") == "i/teamlogos/nba/500/bos.png"
        assert url_path(None) is None

    def test_path_segment_after(self):
        href = "/mlb/team/_/name/nyy/new-york-yankees"
        assert path_segment_after(href, "name") == "nyy"
        assert path_segment_after(href, "missing") is None
        assert path_segment_after("/mlb/team/_/name", "name") is None
