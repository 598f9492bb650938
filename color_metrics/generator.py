"""OKLCH 기반 색상 구별 세트 생성기

지각 거리(ΔE)를 기준으로 색을 만들어서 "같은 ΔE = 같은 체감 난이도"가 되게 한다.
탐색은 항상 max_attempts 안에서 끝나고, 허용 오차를 못 맞추면 가장 가까운 가멧 내 색을 돌려준다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from color_metrics.oklch import (
    PerceptualColor,
    clamp_to_gamut,
    is_in_gamut,
    perceptual_distance,
    to_rgb,
)
from color_utils import RGBColor, clamp
from config import DEFAULT_GENERATOR, GeneratorConfig
from levels import VariationStrategy

# (dL, dC, dH) 축별 방향 가중치. 0이면 그 축은 고정.
_DIRECTION_WEIGHTS = {
    VariationStrategy.HUE_ONLY: (0.0, 0.0, 1.0),
    VariationStrategy.HUE_AND_CHROMA: (0.0, 0.75, 1.0),
    VariationStrategy.HUE_AND_LIGHTNESS: (0.75, 0.0, 1.0),
    VariationStrategy.CHROMA_AND_LIGHTNESS: (1.0, 1.0, 0.0),
    VariationStrategy.ALL_AXES: (1.0, 1.0, 1.0),
}


@dataclass(frozen=True)
class ColorSet:
    base: PerceptualColor
    distinct: PerceptualColor
    target_distance: float  # 지터가 적용된 실제 목표
    colors: Tuple[RGBColor, ...]  # 기준색 count-1개 + 마지막이 구별색

    @property
    def actual_distance(self) -> float:
        return perceptual_distance(self.base, self.distinct)


class PaletteGenerator:
    """인스턴스마다 독립 RNG를 가진다. 스레드별로 하나씩 만들어 쓰면 된다."""

    def __init__(self, rng: np.random.Generator | int | None = None, config: GeneratorConfig | None = None):
        self.rng = np.random.default_rng(rng)
        self.config = config or DEFAULT_GENERATOR

    def safe_base_color(self) -> PerceptualColor:
        cfg = self.config
        for _ in range(cfg.max_attempts):
            candidate = PerceptualColor(
                float(self.rng.uniform(*cfg.base_lightness)),
                float(self.rng.uniform(*cfg.base_chroma)),
                float(self.rng.uniform(0.0, 360.0)),
            )
            if is_in_gamut(candidate):
                return candidate
        # 최대 시도 후에도 실패하면 안전한 기본값
        fallback = PerceptualColor(cfg.fallback_lightness, cfg.fallback_chroma, float(self.rng.uniform(0.0, 360.0)))
        return clamp_to_gamut(fallback)

    def direction_vector(self, strategy: VariationStrategy) -> np.ndarray:
        weights = np.array(_DIRECTION_WEIGHTS[strategy])
        return self.rng.uniform(-1.0, 1.0, size=3) * weights

    def jittered_target(self, target_distance: float) -> float:
        cfg = self.config
        variance = 1.0 + float(self.rng.uniform(-1.0, 1.0)) * cfg.distance_jitter
        return clamp(target_distance * variance, cfg.min_target_distance, cfg.max_target_distance)

    def distinct_color(
        self,
        base: PerceptualColor,
        target_distance: float,
        strategy: VariationStrategy | str,
    ) -> PerceptualColor:
        if isinstance(strategy, str):
            strategy = VariationStrategy.from_tag(strategy)
        if not math.isfinite(target_distance) or target_distance <= 0:
            raise ValueError(f"목표 ΔE는 0보다 커야 해: {target_distance}")

        tolerance = target_distance * self.config.distance_tolerance
        attempts: List[PerceptualColor] = []
        for _ in range(self.config.max_attempts):
            direction = self.direction_vector(strategy)
            candidate = self._clamp_safe(_apply_distance(base, direction, target_distance, strategy))
            attempts.append(candidate)
            if is_in_gamut(candidate) and abs(perceptual_distance(base, candidate) - target_distance) <= tolerance:
                return candidate

        # 탐색 소진: 가멧 클램핑 후 목표에 가장 가까운 시도를 채택
        clamped = [clamp_to_gamut(candidate) for candidate in attempts]
        return min(clamped, key=lambda c: abs(perceptual_distance(base, c) - target_distance))

    def build_challenge_set(self, count: int, base: PerceptualColor, distinct: PerceptualColor) -> List[RGBColor]:
        if count < 2:
            raise ValueError(f"색상 개수는 2개 이상이어야 해: {count}")
        base_rgb = to_rgb(base)
        return [base_rgb] * (count - 1) + [to_rgb(distinct)]

    def generate_distinguish_colors(
        self,
        target_distance: float,
        strategy: VariationStrategy | str,
        count: int = 9,
    ) -> ColorSet:
        base = self.safe_base_color()
        jittered = self.jittered_target(target_distance)
        distinct = self.distinct_color(base, jittered, strategy)
        colors = self.build_challenge_set(count, base, distinct)
        return ColorSet(base=base, distinct=distinct, target_distance=jittered, colors=tuple(colors))

    def _clamp_safe(self, color: PerceptualColor) -> PerceptualColor:
        cfg = self.config
        return PerceptualColor(
            clamp(color.l, cfg.min_lightness, cfg.max_lightness),
            clamp(color.c, cfg.min_chroma, cfg.max_chroma),
            color.h,
        )


def _apply_distance(
    base: PerceptualColor,
    direction: np.ndarray,
    target_distance: float,
    strategy: VariationStrategy,
) -> PerceptualColor:
    """방향 벡터를 ΔE 공간에서 target_distance 길이로 맞춰 적용한다.

    Hue 성분은 거리 공식의 현(chord) 길이라서 2·asin(chord / 2·avgC)로 각도로 되돌린다.
    평균 채도가 작아 현 길이를 낼 수 없으면 180도 회전이 최대다.
    """
    magnitude = float(np.linalg.norm(direction))
    if magnitude < 1e-12:
        # 방향이 없으면 허용된 첫 축으로
        axis = strategy.axes.index(True)
        direction = np.zeros(3)
        direction[axis] = 1.0
        magnitude = 1.0

    d_l, d_c, chord = (float(x) for x in direction / magnitude * (target_distance / 100.0))
    new_c = base.c + d_c
    avg_c = (base.c + new_c) / 2.0
    d_hue = 0.0
    if avg_c > 1e-9 and chord != 0.0:
        ratio = clamp(chord / (2.0 * avg_c), -1.0, 1.0)
        d_hue = math.degrees(2.0 * math.asin(ratio))
    return PerceptualColor(base.l + d_l, new_c, base.h + d_hue)
