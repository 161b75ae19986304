import pytest

from livebgconf.widgets import (
    CBOX_HEIGHT,
    COLOR_WIDGET_WIDTH,
    CBOX_WIDTH,
    _colorbox_pixels,
    _hex_color,
    _initial_dir,
    _quantize,
    slider_decimals,
)


def test_slider_decimals_unit_range():
    assert slider_decimals(0, 1) == 2


def test_slider_decimals_hundred_steps_needs_none():
    assert slider_decimals(0, 100) == 0


@pytest.mark.parametrize(
    "lo, hi",
    [(0, 10), (-1, 1), (0, 0.5), (1, 61), (0, 1000), (0.0, 0.001), (-5, 5)],
)
def test_slider_decimals_gives_at_least_hundred_steps(lo, hi):
    decimals = slider_decimals(lo, hi)
    delta = hi - lo
    assert delta * 10**decimals >= 100 * (1 - 1e-9)
    if decimals > 0:
        assert delta * 10 ** (decimals - 1) < 100


@pytest.mark.parametrize("lo, hi", [(1, 1), (2, 1), (0, 1e-7)])
def test_slider_decimals_rejects_empty_range(lo, hi):
    with pytest.raises(ValueError):
        slider_decimals(lo, hi)


@pytest.mark.parametrize("value, decimals", [(0.456, 2), (3.14159, 3), (7.9, 0), (0.5, 1)])
def test_quantize_truncates_within_one_step(value, decimals):
    result = _quantize(value, decimals)
    assert result <= value
    assert value - result < 10**-decimals


def test_quantize_keeps_exact_values():
    assert _quantize(-0.5, 1) == -0.5


def test_initial_dir_takes_directory_part():
    assert _initial_dir("/home/user/pic.png") == "/home/user"


def test_initial_dir_without_slash_keeps_text():
    assert _initial_dir("pic.png") == "pic.png"


@pytest.mark.parametrize("path", ["", "/pic.png"])
def test_initial_dir_empty_is_none(path):
    assert _initial_dir(path) is None


def test_initial_dir_truncates_long_paths():
    path = "a" * 600
    assert _initial_dir(path) == "a" * 511


def test_hex_color_formats_sixteen_bit_channels():
    assert _hex_color((65535, 0, 32768)) == "#ffff00008000"


def test_hex_color_clamps_out_of_range():
    assert _hex_color((70000, -5, 0)) == _hex_color((65535, 0, 0))


def test_colorbox_dimensions():
    rows = _colorbox_pixels((0.5, 0.5, 0.5), 0x123456)
    assert len(rows) == CBOX_HEIGHT
    assert all(len(row) == COLOR_WIDGET_WIDTH for row in rows)


def test_colorbox_hue_bar_margin_is_background():
    background = 0x123456
    rows = _colorbox_pixels((0.5, 0.5, 0.5), background)
    for row in rows:
        assert row[CBOX_WIDTH:CBOX_WIDTH + 5] == [background] * 5
        assert len(set(row[CBOX_WIDTH + 5:])) == 1


def test_colorbox_top_of_hue_bar_is_red():
    rows = _colorbox_pixels((0.5, 0.5, 0.5), 0)
    assert rows[0][-1] == 0xFF0000


def test_colorbox_selected_value_row_is_inverted():
    first = _colorbox_pixels((0.5, 0.5, 0.5), 0)
    other = _colorbox_pixels((0.5, 0.9, 0.1), 0)
    for j in range(150):
        assert first[90][j] ^ other[90][j] == 0xFFFFFF


def test_colorbox_unselected_pixels_depend_only_on_hue():
    first = _colorbox_pixels((0.25, 0.5, 0.5), 0)
    other = _colorbox_pixels((0.25, 0.9, 0.1), 0)
    assert first[10][10] == other[10][10]
    assert first[40][30] == other[40][30]


def test_colorbox_selected_hue_inverts_bar():
    first = _colorbox_pixels((0.5, 0.5, 0.5), 0)
    other = _colorbox_pixels((0.0, 0.5, 0.5), 0)
    assert first[90][-1] ^ other[90][-1] == 0xFFFFFF