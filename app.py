"""레인보우 트레이닝: 색상 구별 게임 Gradio 앱"""
from __future__ import annotations
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr
from PIL import Image

from challenge import ColorChallenge, generate_color_challenge
from color_metrics.delta_e import rgb_delta_e_ciede2000
from color_metrics.generator import PaletteGenerator
from color_metrics.oklch import to_perceptual
from config import DEFAULT_SCORING, GAME_MODE_DISPLAY_ORDER
from levels import level_profile, tier_name
from progress import GameMode, LevelCompleteResult, complete_level, next_playable_level, unlocked_levels
from progress_store import ProgressRepository
from scoring import RoundTally, record_answer
from ui.colorwheel import generate_chroma_hue_slice
from ui.grid import render_challenge_grid, tile_index_at

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("rainbow_training")

REPO = ProgressRepository(Path("progress"))
GENERATOR = PaletteGenerator()
DEFAULT_MODE = GameMode.COLOR_DISTINGUISH


def mode_options() -> List[Tuple[str, str]]:
    return GAME_MODE_DISPLAY_ORDER


def resolve_mode(label: str) -> GameMode:
    for tag, display in mode_options():
        if display == label:
            return GameMode.from_tag(tag)
    return DEFAULT_MODE


def level_choices(mode: GameMode) -> List[Tuple[str, int]]:
    progress = REPO.load(mode)
    choices = []
    for level in unlocked_levels(progress):
        mark = " ✓" if progress.is_level_completed(level) else ""
        choices.append((f"레벨 {level} · {tier_name(level)}{mark}", level))
    return choices


def render_status(session: Dict[str, Any]) -> str:
    tally: RoundTally = session["tally"]
    challenge: ColorChallenge = session["challenge"]
    return f"""
    <div style='display:flex;gap:16px;align-items:center;font-size:14px;'>
      <div><b>레벨 {challenge.level}</b> ({challenge.tier_name})</div>
      <div>문제 {min(tally.answered + 1, tally.questions)}/{tally.questions}</div>
      <div>점수 <b>{tally.score}</b> / 통과 {challenge.required_score}</div>
    </div>
    """


def render_challenge_info(challenge: ColorChallenge) -> str:
    base = challenge.colors[(challenge.correct_index + 1) % len(challenge.colors)]
    distinct = challenge.colors[challenge.correct_index]
    ciede = rgb_delta_e_ciede2000(base, distinct)
    return f"""
    <div style='font-size:13px;color:#555;'>
      목표 ΔE(OKLCH) <b>{challenge.target_distance:.2f}</b>, 실제 <b>{challenge.actual_distance:.2f}</b>,
      CIEDE2000 참고값 <b>{ciede:.2f}</b>, 변화 전략 <code>{challenge.strategy.value}</code>
      <div>기준색 <code>{base.to_hex()}</code></div>
    </div>
    """


def render_result(result: LevelCompleteResult) -> str:
    if result.is_pass:
        color = "#4CAF50"
        message = f"레벨 {result.level} 통과! ({result.completion_status})"
        if result.is_new_best_score and result.score_improvement > 0:
            message += f" 최고 기록 +{result.score_improvement}점"
    else:
        color = "#E57373"
        message = f"아쉽지만 {result.shortfall_score}점이 부족해. 다시 도전해봐!"
    return f"""
    <div style='padding:10px 14px;border-radius:12px;border:1px solid {color};'>
      <b>{message}</b>
      <div style='font-size:13px;color:#555;'>점수 {result.score} / 통과 {result.required_score} ·
      완료 레벨 {result.total_completed_levels} · 누적 {result.updated_total_score}점</div>
    </div>
    """


def render_wheel(challenge: ColorChallenge) -> Image.Image:
    base_rgb = challenge.colors[(challenge.correct_index + 1) % len(challenge.colors)]
    base = to_perceptual(base_rgb)
    distinct = to_perceptual(challenge.colors[challenge.correct_index])
    return generate_chroma_hue_slice(base.l, base, distinct)


def new_question(session: Dict[str, Any]) -> Dict[str, Any]:
    challenge = generate_color_challenge(session["level"], GENERATOR)
    session["challenge"] = challenge
    session["started_at"] = time.monotonic()
    return session


def on_start(mode_label: str, level: Optional[int]):
    mode = resolve_mode(mode_label)
    if level is None:
        level = next_playable_level(REPO.load(mode))
    profile = level_profile(int(level))
    session: Dict[str, Any] = {
        "mode": mode,
        "level": profile.level,
        "tally": RoundTally(questions=DEFAULT_SCORING.questions_per_level),
    }
    new_question(session)
    challenge = session["challenge"]
    logger.info("[정보] %s 레벨 %d 시작 (목표 ΔE %.2f)", mode.value, profile.level, profile.target_distance)
    return (
        session,
        render_challenge_grid(challenge.colors),
        render_status(session),
        render_challenge_info(challenge),
        render_wheel(challenge),
        "",
    )


def finish_round(session: Dict[str, Any]) -> str:
    mode: GameMode = session["mode"]
    tally: RoundTally = session["tally"]
    level = session["level"]
    _, result = REPO.update(mode, lambda progress: complete_level(progress, level, tally.score))
    logger.info(
        "[정보] 레벨 %d 종료: %d점 (통과 %d) → %s",
        result.level,
        result.score,
        result.required_score,
        result.completion_status,
    )
    return render_result(result)


def on_grid_select(session: Optional[Dict[str, Any]], evt: gr.SelectData):
    if not session or session["tally"].finished:
        gr.Warning("먼저 레벨을 시작해줘.")
        return session, gr.update(), gr.update(), gr.update(), gr.update(), gr.update()
    challenge: ColorChallenge = session["challenge"]
    idx = tile_index_at(int(evt.index[0]), int(evt.index[1]), len(challenge.colors))
    if idx is None:
        return session, gr.update(), gr.update(), gr.update(), gr.update(), gr.update()

    elapsed_ms = int((time.monotonic() - session["started_at"]) * 1000)
    correct = idx == challenge.correct_index
    session["tally"] = record_answer(session["tally"], correct, elapsed_ms)
    logger.info("[정보] 선택 %d (정답 %d), %dms → 누적 %d점", idx, challenge.correct_index, elapsed_ms, session["tally"].score)

    if session["tally"].finished:
        grid = render_challenge_grid(challenge.colors, selected_index=idx, correct_index=challenge.correct_index)
        result_html = finish_round(session)
        return session, grid, render_status(session), render_challenge_info(challenge), render_wheel(challenge), result_html

    new_question(session)
    nxt = session["challenge"]
    return (
        session,
        render_challenge_grid(nxt.colors),
        render_status(session),
        render_challenge_info(nxt),
        render_wheel(nxt),
        "",
    )


def on_mode_change(mode_label: str):
    mode = resolve_mode(mode_label)
    return gr.update(choices=level_choices(mode), value=next_playable_level(REPO.load(mode)))


def build_ui() -> gr.Blocks:
    with gr.Blocks(title="레인보우 트레이닝", css="body{background:#faf8f5;}") as demo:
        gr.Markdown("""
        # 레인보우 트레이닝: 다른 색 찾기
        9개 타일 중 하나만 살짝 달라. 레벨이 오를수록 지각 거리(ΔE)가 줄어들어. 빨리 찾을수록 점수가 높아!
        """)
        session_state = gr.State(None)
        with gr.Row():
            with gr.Column(scale=1):
                mode_dropdown = gr.Dropdown(
                    choices=[label for _, label in mode_options()],
                    label="게임 모드",
                    value=mode_options()[0][1],
                    interactive=True,
                )
                level_dropdown = gr.Dropdown(
                    choices=level_choices(DEFAULT_MODE),
                    label="레벨",
                    value=next_playable_level(REPO.load(DEFAULT_MODE)),
                    interactive=True,
                )
                start_btn = gr.Button("시작", variant="primary")
                status_out = gr.HTML(label="진행 상황")
                result_out = gr.HTML(label="결과")
            with gr.Column(scale=2):
                grid_out = gr.Image(label="다른 색을 골라줘", type="pil", interactive=False)
                info_out = gr.HTML(label="문제 정보")
                wheel_out = gr.Image(label="OKLCH 색상환 단면", image_mode="RGBA")

        outputs = [session_state, grid_out, status_out, info_out, wheel_out, result_out]
        mode_dropdown.change(fn=on_mode_change, inputs=[mode_dropdown], outputs=[level_dropdown])
        start_btn.click(fn=on_start, inputs=[mode_dropdown, level_dropdown], outputs=outputs)
        grid_out.select(fn=on_grid_select, inputs=[session_state], outputs=outputs)

    return demo


if __name__ == "__main__":
    print("Gradio 앱을 시작할게. 브라우저에서 확인해줘.")
    app = build_ui()
    app.launch()
