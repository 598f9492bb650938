"""color_utils 보조 함수 테스트"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from color_metrics.delta_e import rgb_delta_e_ciede2000
from color_utils import RGBColor, rgb_to_hex, rgb_to_lab


def test_rgb_color_to_255_and_hex():
    color = RGBColor(1.0, 107 / 255, 92 / 255)
    assert color.to_rgb255() == (255, 107, 92)
    assert color.to_hex() == "#FF6B5C"


def test_rgb_color_rejects_out_of_range_channel():
    with pytest.raises(ValueError):
        RGBColor(1.2, 0.0, 0.0)
    with pytest.raises(ValueError):
        RGBColor(0.5, -0.01, 0.0)


def test_rgb_to_hex_validates_range():
    assert rgb_to_hex(10, 11, 12) == "#0A0B0C"
    with pytest.raises(ValueError):
        rgb_to_hex(256, 0, 0)


def test_rgb_to_lab_white_and_black():
    white = rgb_to_lab(RGBColor(1.0, 1.0, 1.0))
    black = rgb_to_lab(RGBColor(0.0, 0.0, 0.0))
    assert white[0] == pytest.approx(100.0, abs=0.01)
    assert black[0] == pytest.approx(0.0, abs=0.01)


def test_ciede2000_reference_distance():
    gray = RGBColor(0.5, 0.5, 0.5)
    assert rgb_delta_e_ciede2000(gray, gray) == pytest.approx(0.0, abs=1e-9)
    near = rgb_delta_e_ciede2000(gray, RGBColor(0.52, 0.5, 0.5))
    far = rgb_delta_e_ciede2000(gray, RGBColor(0.9, 0.2, 0.2))
    assert 0.0 < near < far
    assert rgb_delta_e_ciede2000(RGBColor(0.0, 0.0, 0.0), RGBColor(1.0, 1.0, 1.0)) == pytest.approx(100.0, abs=0.1)
