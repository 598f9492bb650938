"""난이도/색상 생성/채점 파라미터"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class DifficultyConfig:
    start_distance: float = 8.0  # 레벨 1 목표 ΔE
    end_distance: float = 1.5  # 하한 (레벨 30 근처)
    decay_rate: float = 0.06  # 레벨당 지수 감소율
    max_required_score: int = 95


@dataclass
class GeneratorConfig:
    # OKLCH 안전 범위 (sRGB 가멧 안에서 안정적인 영역)
    min_lightness: float = 0.20
    max_lightness: float = 0.85
    min_chroma: float = 0.02
    max_chroma: float = 0.32
    # 기준 색상 샘플링 범위 (안전 범위의 중간 영역)
    base_lightness: Tuple[float, float] = (0.30, 0.80)
    base_chroma: Tuple[float, float] = (0.05, 0.25)
    fallback_lightness: float = 0.5
    fallback_chroma: float = 0.15
    max_attempts: int = 100
    distance_tolerance: float = 0.10  # 목표 ΔE 대비 ±10%
    distance_jitter: float = 0.08  # 패턴 학습 방지용 ±8%
    min_target_distance: float = 1.0
    max_target_distance: float = 30.0


@dataclass
class ScoringConfig:
    base_score: int = 10
    max_time_bonus: int = 10
    bonus_interval_ms: int = 500
    bonus_decrease: int = 1
    questions_per_level: int = 5


DEFAULT_DIFFICULTY = DifficultyConfig()
DEFAULT_GENERATOR = GeneratorConfig()
DEFAULT_SCORING = ScoringConfig()


GAME_MODE_DISPLAY_ORDER = [
    ("COLOR_DISTINGUISH", "색상 구별"),
    ("COLOR_HARMONY", "색상 조합"),
    ("COLOR_MEMORY", "색상 기억"),
]
