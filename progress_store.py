"""진행도 레코드 직렬화와 JSON 파일 저장소"""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, TypeVar

from progress import GameMode, GameProgress, default_progress

logger = logging.getLogger("rainbow_training")

T = TypeVar("T")


def parse_level_scores(raw: Any) -> Dict[int, int]:
    """레벨별 점수({"1": 60, ...})를 int 키 맵으로 변환. 어떤 파싱 실패든 빈 맵."""
    try:
        if raw is None:
            return {}
        if isinstance(raw, str):
            if not raw.strip():
                return {}
            raw = json.loads(raw)
        if not isinstance(raw, Mapping):
            return {}
        return {int(k): int(v) for k, v in raw.items()}
    except (TypeError, ValueError, OverflowError):
        return {}


def serialize_level_scores(level_scores: Mapping[int, int]) -> str:
    return json.dumps({str(k): v for k, v in sorted(level_scores.items())})


def _parse_int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError):
        return default


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        return None


def progress_to_record(progress: GameProgress) -> Dict[str, Any]:
    return {
        "gameMode": progress.game_mode.value,
        "currentLevel": progress.current_level,
        "levelScores": serialize_level_scores(progress.level_scores),
        "totalScore": progress.total_score,
        "completedLevels": progress.completed_levels,
        "lastPlayedAt": progress.last_played_at.isoformat() if progress.last_played_at else None,
    }


def progress_from_record(record: Mapping[str, Any]) -> GameProgress:
    game_mode = GameMode.from_tag(record.get("gameMode", ""))
    return GameProgress(
        game_mode=game_mode,
        current_level=_parse_int(record.get("currentLevel"), 1),
        level_scores=parse_level_scores(record.get("levelScores")),
        total_score=_parse_int(record.get("totalScore"), 0),
        completed_levels=_parse_int(record.get("completedLevels"), 0),
        last_played_at=_parse_timestamp(record.get("lastPlayedAt")),
    )


class ProgressRepository:
    """게임 모드별 JSON 파일 한 개. 없으면 기본 진행도를 돌려준다.

    같은 모드에 대한 load → fold → save는 모드별 락 안에서 update()로 묶는다.
    파일은 임시 파일에 쓴 뒤 교체하므로 쓰다 만 파일이 남지 않는다.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir
        self._cache: Dict[GameMode, GameProgress] = {}
        self._locks: Dict[GameMode, threading.RLock] = {mode: threading.RLock() for mode in GameMode}

    def _path(self, game_mode: GameMode) -> Path:
        return self.base_dir / f"{game_mode.value.lower()}.json"

    def _read_record(self, path: Path, game_mode: GameMode) -> GameProgress:
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except ValueError:
            # JSONDecodeError, UnicodeDecodeError 모두 여기로
            raw = None
        if not isinstance(raw, dict):
            logger.warning("[경고] 진행도 파일이 손상돼서 기본값을 쓸게: %s", path)
            return default_progress(game_mode)
        record = dict(raw)
        record.setdefault("gameMode", game_mode.value)
        try:
            return progress_from_record(record)
        except ValueError as exc:
            logger.warning("[경고] 진행도 레코드를 읽을 수 없어서 기본값을 쓸게: %s (%s)", path, exc)
            return default_progress(game_mode)

    def load(self, game_mode: GameMode) -> GameProgress:
        with self._locks[game_mode]:
            if game_mode in self._cache:
                return self._cache[game_mode]
            path = self._path(game_mode)
            if not path.exists():
                return default_progress(game_mode)
            progress = self._read_record(path, game_mode)
            self._cache[game_mode] = progress
            return progress

    def load_all(self) -> Dict[GameMode, GameProgress]:
        return {mode: self.load(mode) for mode in GameMode}

    def save(self, progress: GameProgress) -> None:
        record = progress_to_record(progress)
        if record["lastPlayedAt"] is None:
            record["lastPlayedAt"] = datetime.now(timezone.utc).isoformat()
        path = self._path(progress.game_mode)
        with self._locks[progress.game_mode]:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
            self._cache[progress.game_mode] = progress
        logger.info(
            "[정보] 진행도 저장: %s 프론티어=%d 완료=%d 총점=%d",
            progress.game_mode.value,
            progress.current_level,
            progress.completed_levels,
            progress.total_score,
        )

    def update(
        self,
        game_mode: GameMode,
        fn: Callable[[GameProgress], Tuple[GameProgress, T]],
    ) -> Tuple[GameProgress, T]:
        """모드 락을 잡은 채로 현재 진행도에 fn을 적용하고 결과를 저장한다.

        fn은 (새 진행도, 부가 결과)를 돌려준다. 진행도가 그대로면 저장하지 않는다.
        """
        with self._locks[game_mode]:
            current = self.load(game_mode)
            updated, extra = fn(current)
            if updated is not current:
                self.save(updated)
            return updated, extra

    def reset(self, game_mode: GameMode | None = None) -> None:
        modes = [game_mode] if game_mode is not None else list(GameMode)
        for mode in modes:
            self.save(default_progress(mode))
        logger.info("[정보] 진행도 초기화: %s", ", ".join(m.value for m in modes))
