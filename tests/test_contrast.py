"""ContrastValidator tests."""

import pytest

from qrpro.contrast import check, is_poor, luminance, parse_hex, score


def test_black_on_white_is_maximum():
    assert score("#000000", "#ffffff") == pytest.approx(21.0)


def test_order_does_not_matter():
    assert score("#ffffff", "#000000") == pytest.approx(score("#000000", "#ffffff"))


def test_identical_colours_score_one():
    assert score("#336699", "#336699") == pytest.approx(1.0)


def test_similar_greys_are_flagged():
    ratio = score("#777777", "#888888")
    assert ratio < 3.0
    assert is_poor(ratio)

    report = check("#777777", "#888888")
    assert not report.ok
    assert "recommended: 3:1 minimum" in report.message
    assert f"{ratio:.1f}:1" in report.message


def test_good_pair_has_no_message():
    report = check("#000000", "#ffffff")
    assert report.ok
    assert report.message is None


def test_custom_threshold():
    ratio = score("#000000", "#777777")
    assert check("#000000", "#777777", threshold=ratio + 1).ok is False
    assert check("#000000", "#777777", threshold=ratio - 1).ok is True


def test_luminance_endpoints():
    assert luminance((0, 0, 0)) == 0.0
    assert luminance((255, 255, 255)) == pytest.approx(1.0)


@pytest.mark.parametrize("value, expected", [
    ("#ff8000", (255, 128, 0)),
    ("FF8000", (255, 128, 0)),
    (" #00ff00 ", (0, 255, 0)),
])
def test_parse_hex(value, expected):
    assert parse_hex(value) == expected


@pytest.mark.parametrize("value", ["#fff", "#gggggg", "", "#1234567"])
def test_parse_hex_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_hex(value)
