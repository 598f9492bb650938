"""OKLCH(OKLab) 색공간 변환과 지각 거리(ΔE)

좌표계:
    - L (Lightness): 0~1, 0=검정, 1=하양
    - C (Chroma): 0~약 0.4, 0=무채색
    - H (Hue): 0~360도, 원형

OKLab 공식: https://bottosson.github.io/posts/oklab/
배열 함수는 마지막 축이 3인 numpy 배열을 받고, 스칼라 함수는 RGBColor/PerceptualColor를 다룬다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace

import numpy as np

from color_utils import RGBColor

# sRGB 전달 함수 상수
SRGB_THRESHOLD = 0.04045
SRGB_SCALE = 12.92
SRGB_OFFSET = 0.055
SRGB_GAMMA = 2.4
LINEAR_THRESHOLD = SRGB_THRESHOLD / SRGB_SCALE

# 선형 RGB → LMS 원뿔 응답
M1 = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])
# 세제곱근 LMS → OKLab
M2 = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])
M2_INV = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])
M1_INV = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])

# 부동소수 오차 허용치 (흰색/검정 경계)
GAMUT_EPSILON = 1e-7
CLAMP_ITERATIONS = 20


def normalize_hue(h: float) -> float:
    h = h % 360.0
    # -1e-17 % 360 == 360.0
    if h >= 360.0:
        h = 0.0
    return h


@dataclass(frozen=True)
class PerceptualColor:
    """OKLCH 색상. Hue는 항상 [0, 360)으로 정규화된다."""

    l: float
    c: float
    h: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "h", normalize_hue(float(self.h)))


# ========== 배열 변환 ==========

def srgb_to_linear(rgb: np.ndarray) -> np.ndarray:
    rgb = np.asarray(rgb, dtype=float)
    power = np.power((np.maximum(rgb, SRGB_THRESHOLD) + SRGB_OFFSET) / (1.0 + SRGB_OFFSET), SRGB_GAMMA)
    return np.where(rgb <= SRGB_THRESHOLD, rgb / SRGB_SCALE, power)


def linear_to_srgb(linear: np.ndarray) -> np.ndarray:
    linear = np.asarray(linear, dtype=float)
    power = (1.0 + SRGB_OFFSET) * np.power(np.maximum(linear, LINEAR_THRESHOLD), 1.0 / SRGB_GAMMA) - SRGB_OFFSET
    return np.where(linear <= LINEAR_THRESHOLD, linear * SRGB_SCALE, power)


def linear_srgb_to_oklab(linear: np.ndarray) -> np.ndarray:
    lms = np.asarray(linear, dtype=float) @ M1.T
    return np.cbrt(lms) @ M2.T


def oklab_to_linear_srgb(lab: np.ndarray) -> np.ndarray:
    lms_ = np.asarray(lab, dtype=float) @ M2_INV.T
    return (lms_ ** 3) @ M1_INV.T


def oklab_to_oklch(lab: np.ndarray) -> np.ndarray:
    lab = np.asarray(lab, dtype=float)
    c = np.hypot(lab[..., 1], lab[..., 2])
    h = np.degrees(np.arctan2(lab[..., 2], lab[..., 1])) % 360.0
    h = np.where(h >= 360.0, 0.0, h)
    return np.stack([lab[..., 0], c, h], axis=-1)


def oklch_to_oklab(lch: np.ndarray) -> np.ndarray:
    lch = np.asarray(lch, dtype=float)
    rad = np.radians(lch[..., 2])
    return np.stack([lch[..., 0], lch[..., 1] * np.cos(rad), lch[..., 1] * np.sin(rad)], axis=-1)


def in_gamut_mask(linear: np.ndarray) -> np.ndarray:
    """선형 RGB 배열의 각 픽셀이 [0, 1] 안에 있는지 (클램핑 없이)."""
    return np.all((linear >= -GAMUT_EPSILON) & (linear <= 1.0 + GAMUT_EPSILON), axis=-1)


# ========== 스칼라 변환 ==========

def to_perceptual(color: RGBColor) -> PerceptualColor:
    """sRGB → Linear RGB → LMS → OKLab → OKLCH"""
    lab = linear_srgb_to_oklab(srgb_to_linear(color.as_array()))
    lch = oklab_to_oklch(lab)
    return PerceptualColor(float(lch[0]), float(lch[1]), float(lch[2]))


def to_linear_rgb(color: PerceptualColor) -> np.ndarray:
    """OKLCH → 선형 RGB. 감마 인코딩/클램핑 전 값이라 가멧 밖이면 0~1을 벗어난다."""
    return oklab_to_linear_srgb(oklch_to_oklab(np.array([color.l, color.c, color.h])))


def to_rgb(color: PerceptualColor) -> RGBColor:
    """OKLCH → sRGB. 클램핑은 마지막 단계에서만 한다."""
    srgb = np.clip(linear_to_srgb(to_linear_rgb(color)), 0.0, 1.0)
    return RGBColor(float(srgb[0]), float(srgb[1]), float(srgb[2]))


def is_in_gamut(color: PerceptualColor) -> bool:
    return bool(in_gamut_mask(to_linear_rgb(color)))


def clamp_to_gamut(color: PerceptualColor) -> PerceptualColor:
    """명도와 색상은 고정하고 Chroma만 이분 탐색으로 줄여 가멧 안으로 넣는다."""
    if is_in_gamut(color):
        return color

    low = 0.0
    high = color.c
    result = replace(color, c=0.0)
    for _ in range(CLAMP_ITERATIONS):
        mid = (low + high) / 2.0
        test = replace(color, c=mid)
        if is_in_gamut(test):
            result = test
            low = mid
        else:
            high = mid
    return result


def shortest_hue_difference(h1: float, h2: float) -> float:
    """h1 - h2의 부호 있는 최단 원형 차이 (-180~180)."""
    d = (h1 - h2) % 360.0
    if d > 180.0:
        d -= 360.0
    return d


def perceptual_distance(a: PerceptualColor, b: PerceptualColor) -> float:
    """OKLCH 지각 거리(ΔE). 실용 범위는 0~30 정도."""
    d_l = a.l - b.l
    d_c = a.c - b.c
    d_hue = math.radians(shortest_hue_difference(a.h, b.h))
    avg_c = (a.c + b.c) / 2.0
    # Hue 차이를 현(chord) 길이로 변환
    d_h = 2.0 * avg_c * math.sin(d_hue / 2.0)
    return math.sqrt(d_l * d_l + d_c * d_c + d_h * d_h) * 100.0
