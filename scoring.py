"""응답 시간 기반 채점 규칙"""
from __future__ import annotations

from dataclasses import dataclass, replace

from config import DEFAULT_SCORING, ScoringConfig
from levels import MAX_LEVEL, MIN_LEVEL, required_score, validate_level


def score_for_response_time(elapsed_ms: int, config: ScoringConfig | None = None) -> int:
    """기본 점수 + 시간 보너스.

    첫 구간(500ms) 이내면 보너스 전액, 이후 구간마다 1점씩 줄고 기본 점수 아래로는 내려가지 않는다.
    400ms → 20점, 1200ms → 19점.
    """
    cfg = config or DEFAULT_SCORING
    if elapsed_ms < 0:
        raise ValueError(f"경과 시간은 0 이상이어야 해: {elapsed_ms}")
    if elapsed_ms <= cfg.bonus_interval_ms:
        return cfg.base_score + cfg.max_time_bonus
    intervals = int(elapsed_ms // cfg.bonus_interval_ms)
    bonus = max(0, cfg.max_time_bonus - (intervals - 1) * cfg.bonus_decrease)
    return cfg.base_score + bonus


@dataclass(frozen=True)
class RoundTally:
    """한 레벨(5문제) 진행 중 누적 상태. 한 문제라도 틀리면 즉시 실패."""

    answered: int = 0
    score: int = 0
    failed: bool = False
    questions: int = DEFAULT_SCORING.questions_per_level

    @property
    def finished(self) -> bool:
        return self.failed or self.answered >= self.questions


def record_answer(tally: RoundTally, correct: bool, elapsed_ms: int, config: ScoringConfig | None = None) -> RoundTally:
    if tally.finished:
        raise ValueError("이미 끝난 라운드야.")
    if not correct:
        return replace(tally, answered=tally.answered + 1, failed=True)
    points = score_for_response_time(elapsed_ms, config)
    return replace(tally, answered=tally.answered + 1, score=tally.score + points)


def is_level_passed(level: int, score: int) -> bool:
    validate_level(level)
    if score < 0:
        raise ValueError(f"점수는 0 이상이어야 해: {score}")
    return score >= required_score(level)


def max_achievable_level(score: int) -> int:
    """주어진 점수로 통과 가능한 가장 높은 레벨. 하나도 없으면 0."""
    if score < 0:
        raise ValueError(f"점수는 0 이상이어야 해: {score}")
    for level in range(MAX_LEVEL, MIN_LEVEL - 1, -1):
        if score >= required_score(level):
            return level
    return 0
