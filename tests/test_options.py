"""Tests for comparison options and color parsing."""

import dataclasses

import pytest

from pixelmatch_core.options import MatchOptions, OutputSlot, parse_color


@pytest.mark.parametrize(
    "value, expected",
    [
        ("255,0,0", (255, 0, 0)),
        (" 0, 128 ,255 ", (0, 128, 255)),
        ("10,20,30,40", (10, 20, 30)),
        ("#00ff00", (0, 255, 0)),
        ("yellow", (255, 255, 0)),
        ("rgb(1,2,3)", (1, 2, 3)),
        ((4, 5, 6), (4, 5, 6)),
        ([7, 8, 9, 255], (7, 8, 9)),
    ],
)
def test_parse_color_accepts_common_forms(value, expected):
    assert parse_color(value) == expected


@pytest.mark.parametrize("value", ["256,0,0", "1,2", "-1,0,0", "not-a-color", (1, 2), (0, 0, 0, 0, 0)])
def test_parse_color_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_defaults():
    options = MatchOptions()
    assert options.threshold == 0.1
    assert options.alpha == 0.1
    assert not options.include_anti_aliasing
    assert options.anti_aliased_color == (255, 255, 0)
    assert options.diff_color == (255, 0, 0)
    assert options.diff_color_alt is None
    assert not options.diff_mask
    assert not options.renders


def test_colors_are_normalised():
    options = MatchOptions(diff_color="blue", diff_color_alt="0,255,0", anti_aliased_color=[1, 2, 3])
    assert options.diff_color == (0, 0, 255)
    assert options.diff_color_alt == (0, 255, 0)
    assert options.anti_aliased_color == (1, 2, 3)


@pytest.mark.parametrize("field", ["threshold", "alpha"])
@pytest.mark.parametrize("value", [-0.01, 1.01])
def test_out_of_range_values_rejected(field, value):
    with pytest.raises(ValueError, match=field):
        MatchOptions(**{field: value})


def test_boundaries_accepted():
    MatchOptions(threshold=0.0, alpha=0.0)
    MatchOptions(threshold=1.0, alpha=1.0)


def test_options_are_frozen():
    options = MatchOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.threshold = 0.5


def test_with_changes_validates_and_keeps_other_fields():
    slot = OutputSlot()
    base = MatchOptions(threshold=0.3, diff_mask=True)
    changed = base.with_changes(write_to=slot, diff_color="#000000")
    assert changed.threshold == 0.3
    assert changed.diff_mask
    assert changed.diff_color == (0, 0, 0)
    assert changed.write_to is slot
    assert changed.renders
    assert base.write_to is None

    with pytest.raises(ValueError):
        base.with_changes(threshold=2.0)
