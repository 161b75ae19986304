import itertools

import pytest

from livebgconf.colors import hsv_to_rgb, rgb_to_hsv


def test_pure_red():
    assert rgb_to_hsv(1.0, 0.0, 0.0) == pytest.approx((0.0, 1.0, 1.0))


def test_black_has_undefined_hue():
    assert rgb_to_hsv(0.0, 0.0, 0.0) == (-1.0, 0.0, 0.0)


def test_zero_saturation_is_gray():
    assert hsv_to_rgb(0.3, 0.0, 0.5) == (0.5, 0.5, 0.5)


def test_full_hue_wraps_to_red():
    assert hsv_to_rgb(1.0, 1.0, 1.0) == pytest.approx((1.0, 0.0, 0.0))


_LEVELS = [0.0, 0.2, 0.5, 0.8, 1.0]


@pytest.mark.parametrize("rgb", list(itertools.product(_LEVELS, repeat=3)))
def test_rgb_round_trip(rgb):
    if max(rgb) == 0:
        h, s, v = rgb_to_hsv(*rgb)
        assert (s, v) == (0.0, 0.0)
        return_rgb = hsv_to_rgb(h, s, v)
    else:
        return_rgb = hsv_to_rgb(*rgb_to_hsv(*rgb))
    assert return_rgb == pytest.approx(rgb, abs=1e-9)


@pytest.mark.parametrize("rgb", list(itertools.product(_LEVELS, repeat=3)))
def test_value_is_max_component(rgb):
    h, s, v = rgb_to_hsv(*rgb)
    assert v == max(rgb)
    assert 0.0 <= s <= 1.0
    assert h == -1.0 or 0.0 <= h < 1.0


@pytest.mark.parametrize("h", [i / 12 for i in range(12)])
def test_hsv_round_trip_saturated(h):
    rgb = hsv_to_rgb(h, 1.0, 1.0)
    assert rgb_to_hsv(*rgb) == pytest.approx((h, 1.0, 1.0), abs=1e-9)


@pytest.mark.parametrize("h", [i / 7 for i in range(7)])
def test_hsv_to_rgb_components_in_range(h):
    rgb = hsv_to_rgb(h, 0.6, 0.9)
    assert all(0.0 <= c <= 0.9 + 1e-12 for c in rgb)
    assert max(rgb) == pytest.approx(0.9)