"""게임 모드별 진행도와 결과 반영(fold) 로직

모든 함수는 순수 함수다. 저장은 progress_store 쪽 책임.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from levels import MAX_LEVEL, MIN_LEVEL, TIER_START_LEVELS, required_score, validate_level


class GameMode(Enum):
    COLOR_DISTINGUISH = "COLOR_DISTINGUISH"  # 3x3 그리드에서 다른 색 찾기
    COLOR_HARMONY = "COLOR_HARMONY"  # 기준색에 어울리는 조화색 찾기
    COLOR_MEMORY = "COLOR_MEMORY"  # 색 패턴 기억하기

    @classmethod
    def from_tag(cls, tag: str) -> "GameMode":
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"알 수 없는 게임 모드야: {tag!r}") from None


@dataclass(frozen=True)
class GameProgress:
    game_mode: GameMode
    current_level: int = 1  # 해금 프론티어
    level_scores: Dict[int, int] = field(default_factory=dict)  # 레벨 → 최고 점수
    total_score: int = 0
    completed_levels: int = 0
    last_played_at: Optional[datetime] = None

    def best_score(self, level: int) -> int:
        return self.level_scores.get(level, 0)

    def is_level_completed(self, level: int, threshold: int | None = None) -> bool:
        if threshold is None:
            threshold = required_score(level)
        return level in self.level_scores and self.best_score(level) >= threshold

    @property
    def completion_rate(self) -> float:
        return self.completed_levels / MAX_LEVEL

    @property
    def average_score(self) -> float:
        if not self.level_scores:
            return 0.0
        return self.total_score / len(self.level_scores)


def default_progress(game_mode: GameMode) -> GameProgress:
    return GameProgress(game_mode=game_mode)


def reset_progress(progress: GameProgress) -> GameProgress:
    return default_progress(progress.game_mode)


def fold_result(
    progress: GameProgress,
    level: int,
    score: int,
    threshold: int,
    played_at: datetime | None = None,
) -> GameProgress:
    """새 (레벨, 점수) 기록을 진행도에 반영한다.

    최고 점수 이하의 재반영은 아무것도 바꾸지 않고 같은 객체를 돌려준다.
    played_at은 상태가 실제로 바뀔 때만 기록된다.
    """
    validate_level(level)
    if score < 0:
        raise ValueError(f"점수는 0 이상이어야 해: {score}")

    previous_best = progress.best_score(level)
    if score <= previous_best:
        return progress

    level_scores = dict(progress.level_scores)
    level_scores[level] = score

    completed_levels = progress.completed_levels
    current_level = progress.current_level
    # 처음으로 통과 점수에 도달한 경우에만 완료 처리
    if score >= threshold and previous_best < threshold:
        completed_levels += 1
        if level >= current_level:
            current_level = min(level + 1, MAX_LEVEL)

    return replace(
        progress,
        current_level=current_level,
        level_scores=level_scores,
        total_score=sum(level_scores.values()),
        completed_levels=completed_levels,
        last_played_at=played_at or progress.last_played_at,
    )


def is_unlocked(level: int, progress: GameProgress) -> bool:
    """각 난이도의 첫 레벨은 항상 해금, 나머지는 직전 레벨을 통과해야 해금."""
    validate_level(level)
    if level in TIER_START_LEVELS:
        return True
    previous = level - 1
    return progress.is_level_completed(previous, required_score(previous))


def unlocked_levels(progress: GameProgress) -> List[int]:
    return [level for level in range(MIN_LEVEL, MAX_LEVEL + 1) if is_unlocked(level, progress)]


def next_playable_level(progress: GameProgress) -> int:
    """해금됐지만 아직 통과 못 한 가장 낮은 레벨. 전부 통과했으면 마지막 해금 레벨."""
    unlocked = unlocked_levels(progress)
    for level in unlocked:
        if not progress.is_level_completed(level):
            return level
    return unlocked[-1] if unlocked else MIN_LEVEL


@dataclass(frozen=True)
class LevelCompleteResult:
    game_mode: GameMode
    level: int
    score: int
    required_score: int
    is_pass: bool
    is_new_best_score: bool
    is_new_completion: bool
    next_level_unlocked: bool
    previous_best_score: int
    new_current_level: int
    total_completed_levels: int
    updated_total_score: int

    @property
    def score_improvement(self) -> int:
        return self.score - self.previous_best_score

    @property
    def shortfall_score(self) -> int:
        return 0 if self.is_pass else self.required_score - self.score

    @property
    def completion_status(self) -> str:
        if self.is_new_completion:
            return "신규 완료"
        if self.is_pass and self.is_new_best_score:
            return "기록 갱신"
        if self.is_pass:
            return "재통과"
        return "미통과"


def complete_level(
    progress: GameProgress,
    level: int,
    score: int,
    played_at: datetime | None = None,
) -> Tuple[GameProgress, LevelCompleteResult]:
    """레벨의 통과 점수를 구해 fold_result를 적용하고 결과 요약을 함께 돌려준다."""
    threshold = required_score(level)
    previous_best = progress.best_score(level)
    updated = fold_result(progress, level, score, threshold, played_at)
    is_pass = score >= threshold
    result = LevelCompleteResult(
        game_mode=progress.game_mode,
        level=level,
        score=score,
        required_score=threshold,
        is_pass=is_pass,
        is_new_best_score=score > previous_best,
        is_new_completion=is_pass and previous_best < threshold,
        next_level_unlocked=is_pass and level < MAX_LEVEL,
        previous_best_score=previous_best,
        new_current_level=updated.current_level,
        total_completed_levels=updated.completed_levels,
        updated_total_score=updated.total_score,
    )
    return updated, result
