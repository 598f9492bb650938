"""색상 구별 게임 한 문제(ColorChallenge) 생성"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from color_metrics.generator import PaletteGenerator
from color_utils import RGBColor
from levels import VariationStrategy, level_profile

logger = logging.getLogger("rainbow_training")

DEFAULT_TILE_COUNT = 9  # 3x3 그리드


@dataclass(frozen=True)
class ColorChallenge:
    level: int
    colors: Tuple[RGBColor, ...]
    correct_index: int
    required_score: int
    target_distance: float
    tier_name: str
    strategy: VariationStrategy
    actual_distance: float


def generate_color_challenge(
    level: int,
    generator: PaletteGenerator | None = None,
    tile_count: int = DEFAULT_TILE_COUNT,
) -> ColorChallenge:
    """레벨 프로필로 목표 ΔE/전략을 정하고, 색상 세트를 만들어 섞는다."""
    profile = level_profile(level)
    gen = generator or PaletteGenerator()
    color_set = gen.generate_distinguish_colors(profile.target_distance, profile.strategy, tile_count)

    # 구별색은 세트의 마지막 원소. 섞은 뒤 위치를 추적한다.
    order = gen.rng.permutation(tile_count)
    colors = tuple(color_set.colors[i] for i in order)
    correct_index = int(list(order).index(tile_count - 1))

    actual = color_set.actual_distance
    tolerance = color_set.target_distance * gen.config.distance_tolerance
    if abs(actual - color_set.target_distance) > tolerance:
        logger.warning(
            "[경고] 레벨 %d: 목표 ΔE %.2f 대신 %.2f로 생성됐어 (전략=%s)",
            level,
            color_set.target_distance,
            actual,
            profile.strategy.value,
        )

    return ColorChallenge(
        level=level,
        colors=colors,
        correct_index=correct_index,
        required_score=profile.required_score,
        target_distance=profile.target_distance,
        tier_name=profile.tier_name,
        strategy=profile.strategy,
        actual_distance=actual,
    )
