"""색상 값 타입과 변환 유틸"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from skimage import color as skcolor


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


@dataclass(frozen=True)
class RGBColor:
    """감마 인코딩된 sRGB 색상. 채널 범위는 0~1."""

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"RGB 채널은 0~1 범위여야 해: {name}={value}")

    def to_rgb255(self) -> Tuple[int, int, int]:
        return (
            int(round(self.r * 255)),
            int(round(self.g * 255)),
            int(round(self.b * 255)),
        )

    def to_hex(self) -> str:
        return rgb_to_hex(*self.to_rgb255())

    def as_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=float)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    if not (0 <= r <= 255 and 0 <= g <= 255 and 0 <= b <= 255):
        raise ValueError("RGB 범위는 0~255야.")
    return f"#{r:02X}{g:02X}{b:02X}"


def rgb_to_lab(color: RGBColor) -> np.ndarray:
    """CIELAB(D65) 좌표. CIEDE2000 참고값 계산용."""
    arr = color.as_array().reshape(1, 1, 3)
    lab = skcolor.rgb2lab(arr)
    return lab[0, 0]
