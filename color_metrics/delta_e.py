"""CIEDE2000 계산 래퍼 (OKLCH ΔE 옆에 보여줄 참고값)"""
from __future__ import annotations

import numpy as np
from skimage import color as skcolor

from color_utils import RGBColor, rgb_to_lab


def delta_e_ciede2000(lab1: np.ndarray, lab2: np.ndarray) -> float:
    """CIEDE2000 ΔE 값을 반환한다."""
    d = skcolor.deltaE_ciede2000(lab1.reshape(1, 1, 3), lab2.reshape(1, 1, 3))
    return float(d[0, 0])


def rgb_delta_e_ciede2000(a: RGBColor, b: RGBColor) -> float:
    return delta_e_ciede2000(rgb_to_lab(a), rgb_to_lab(b))
