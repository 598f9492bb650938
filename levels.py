"""레벨(1~30) → 목표 ΔE/변화 전략/통과 점수/난이도 이름"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from config import DEFAULT_DIFFICULTY, DifficultyConfig

MIN_LEVEL = 1
MAX_LEVEL = 30
LEVELS_PER_TIER = 5
TIER_START_LEVELS: Tuple[int, ...] = (1, 6, 11, 16, 21, 26)
TIER_NAMES: Tuple[str, ...] = ("쉬움", "보통", "어려움", "고급", "전문가", "마스터")


class VariationStrategy(Enum):
    """기준 색상과 구별 색상 사이에서 달라질 수 있는 OKLCH 축"""

    HUE_ONLY = "hue_only"
    HUE_AND_CHROMA = "hue_and_chroma"
    HUE_AND_LIGHTNESS = "hue_and_lightness"
    CHROMA_AND_LIGHTNESS = "chroma_and_lightness"
    ALL_AXES = "all_axes"

    @property
    def axes(self) -> Tuple[bool, bool, bool]:
        """(Lightness, Chroma, Hue) 변화 허용 여부"""
        return _STRATEGY_AXES[self]

    @classmethod
    def from_tag(cls, tag: str) -> "VariationStrategy":
        for strategy in cls:
            if strategy.value == tag or strategy.name == tag:
                return strategy
        raise ValueError(f"알 수 없는 변화 전략이야: {tag!r}")


_STRATEGY_AXES = {
    VariationStrategy.HUE_ONLY: (False, False, True),
    VariationStrategy.HUE_AND_CHROMA: (False, True, True),
    VariationStrategy.HUE_AND_LIGHTNESS: (True, False, True),
    VariationStrategy.CHROMA_AND_LIGHTNESS: (True, True, False),
    VariationStrategy.ALL_AXES: (True, True, True),
}

# (구간 끝 레벨, 전략)
_STRATEGY_BANDS: Tuple[Tuple[int, VariationStrategy], ...] = (
    (10, VariationStrategy.HUE_ONLY),
    (15, VariationStrategy.HUE_AND_CHROMA),
    (20, VariationStrategy.HUE_AND_LIGHTNESS),
    (25, VariationStrategy.CHROMA_AND_LIGHTNESS),
    (30, VariationStrategy.ALL_AXES),
)


@dataclass(frozen=True)
class LevelProfile:
    level: int
    target_distance: float
    required_score: int
    strategy: VariationStrategy
    tier_name: str


def validate_level(level: int) -> int:
    if isinstance(level, bool) or not isinstance(level, int) or not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValueError(f"레벨은 {MIN_LEVEL}~{MAX_LEVEL} 범위여야 해: {level!r}")
    return level


def _tier_index(level: int) -> int:
    return (validate_level(level) - MIN_LEVEL) // LEVELS_PER_TIER


def target_distance(level: int, config: DifficultyConfig | None = None) -> float:
    """레벨이 오를수록 목표 ΔE가 지수적으로 줄어든다 (하한 end_distance)."""
    cfg = config or DEFAULT_DIFFICULTY
    validate_level(level)
    decayed = cfg.start_distance * (1.0 - cfg.decay_rate) ** (level - 1)
    return max(cfg.end_distance, decayed)


def variation_strategy(level: int) -> VariationStrategy:
    validate_level(level)
    for band_end, strategy in _STRATEGY_BANDS:
        if level <= band_end:
            return strategy
    raise AssertionError("unreachable")


def required_score(level: int, config: DifficultyConfig | None = None) -> int:
    cfg = config or DEFAULT_DIFFICULTY
    validate_level(level)
    if level <= 10:
        score = 50 + (level - 1) * 2  # 50 → 68
    elif level <= 20:
        score = 70 + (level - 11) * 2  # 70 → 88
    else:
        score = 90 + (level - 21)  # 90 → 95 (상한)
    return min(score, cfg.max_required_score)


def tier_name(level: int) -> str:
    return TIER_NAMES[_tier_index(level)]


def tier_start_level(level: int) -> int:
    return TIER_START_LEVELS[_tier_index(level)]


def tier_end_level(level: int) -> int:
    return tier_start_level(level) + LEVELS_PER_TIER - 1


def is_tier_start(level: int) -> bool:
    validate_level(level)
    return level in TIER_START_LEVELS


def level_profile(level: int, config: DifficultyConfig | None = None) -> LevelProfile:
    return LevelProfile(
        level=level,
        target_distance=target_distance(level, config),
        required_score=required_score(level, config),
        strategy=variation_strategy(level),
        tier_name=tier_name(level),
    )


def all_level_profiles(config: DifficultyConfig | None = None) -> List[LevelProfile]:
    return [level_profile(level, config) for level in range(MIN_LEVEL, MAX_LEVEL + 1)]
