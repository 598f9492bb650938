"""진행도 fold/해금 로직 테스트"""
from datetime import datetime, timezone
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

from levels import required_score
from progress import (
    GameMode,
    complete_level,
    default_progress,
    fold_result,
    is_unlocked,
    next_playable_level,
    reset_progress,
    unlocked_levels,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def fresh():
    return default_progress(GameMode.COLOR_DISTINGUISH)


def test_first_completion_scenario():
    progress = fold_result(fresh(), level=1, score=60, threshold=50)
    assert progress.completed_levels == 1
    assert progress.best_score(1) == 60
    assert progress.total_score == 60
    assert progress.current_level == 2


def test_replay_with_lower_or_equal_score_is_noop():
    progress = fold_result(fresh(), 1, 60, 50, played_at=NOW)
    assert fold_result(progress, 1, 60, 50) is progress
    assert fold_result(progress, 1, 40, 50, played_at=datetime.now(timezone.utc)) == progress


def test_new_best_does_not_double_count_completion():
    progress = fold_result(fresh(), 3, 55, 54)
    progress = fold_result(progress, 3, 90, 54)
    assert progress.completed_levels == 1
    assert progress.best_score(3) == 90
    assert progress.total_score == 90


def test_failing_score_is_recorded_without_completion():
    progress = fold_result(fresh(), 1, 30, 50)
    assert progress.best_score(1) == 30
    assert progress.completed_levels == 0
    assert progress.current_level == 1
    progress = fold_result(progress, 1, 70, 50)
    assert progress.completed_levels == 1
    assert progress.current_level == 2


def test_frontier_only_advances_from_at_or_beyond_it():
    progress = fold_result(fresh(), 6, 80, required_score(6))
    assert progress.current_level == 7
    progress = fold_result(progress, 1, 80, required_score(1))
    assert progress.current_level == 7
    assert progress.completed_levels == 2


def test_frontier_capped_at_last_level():
    progress = fold_result(fresh(), 30, 100, required_score(30))
    assert progress.current_level == 30


def test_invariants_hold_over_random_history():
    rng = np.random.default_rng(99)
    progress = fresh()
    for _ in range(300):
        level = int(rng.integers(1, 31))
        score = int(rng.integers(0, 101))
        progress = fold_result(progress, level, score, required_score(level))
        assert progress.total_score == sum(progress.level_scores.values())
        completed = sum(1 for lv, best in progress.level_scores.items() if best >= required_score(lv))
        assert progress.completed_levels == completed


def test_fold_rejects_invalid_input():
    with pytest.raises(ValueError):
        fold_result(fresh(), 0, 10, 50)
    with pytest.raises(ValueError):
        fold_result(fresh(), 1, -5, 50)


def test_tier_heads_always_unlocked():
    progress = fresh()
    assert unlocked_levels(progress) == [1, 6, 11, 16, 21, 26]
    assert not is_unlocked(2, progress)


def test_level_unlocks_after_previous_completion():
    progress = fold_result(fresh(), 1, 50, required_score(1))
    assert is_unlocked(2, progress)
    assert not is_unlocked(3, progress)
    with pytest.raises(ValueError):
        is_unlocked(31, progress)


def test_next_playable_level():
    progress = fresh()
    assert next_playable_level(progress) == 1
    progress = fold_result(progress, 1, 60, required_score(1))
    assert next_playable_level(progress) == 2


def test_complete_level_reports_outcome():
    progress, result = complete_level(fresh(), 1, 60, played_at=NOW)
    assert result.is_pass
    assert result.is_new_completion
    assert result.next_level_unlocked
    assert result.completion_status == "신규 완료"
    assert result.new_current_level == 2
    assert progress.last_played_at == NOW

    progress, result = complete_level(progress, 1, 80)
    assert result.completion_status == "기록 갱신"
    assert result.score_improvement == 20
    assert progress.completed_levels == 1

    _, result = complete_level(progress, 2, 10)
    assert not result.is_pass
    assert result.shortfall_score == required_score(2) - 10
    assert result.completion_status == "미통과"


def test_reset_and_derived_fields():
    progress = fold_result(fresh(), 1, 60, 50)
    progress = fold_result(progress, 2, 40, 52)
    assert progress.average_score == pytest.approx(50.0)
    assert progress.completion_rate == pytest.approx(1 / 30)
    assert reset_progress(progress) == fresh()
