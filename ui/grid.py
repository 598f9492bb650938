"""색상 구별 그리드 렌더링/클릭 좌표 → 타일 인덱스"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from color_utils import RGBColor

TILE_SIZE = 96
GAP = 10
BACKGROUND = (250, 248, 245)
CORRECT_OUTLINE = (76, 175, 80)
WRONG_OUTLINE = (229, 57, 53)


def grid_size_for(count: int) -> int:
    return max(1, math.ceil(math.sqrt(count)))


def _tile_box(index: int, columns: int, tile_size: int, gap: int) -> Tuple[int, int, int, int]:
    row, col = divmod(index, columns)
    x0 = gap + col * (tile_size + gap)
    y0 = gap + row * (tile_size + gap)
    return x0, y0, x0 + tile_size - 1, y0 + tile_size - 1


def render_challenge_grid(
    colors: Sequence[RGBColor],
    selected_index: Optional[int] = None,
    correct_index: Optional[int] = None,
    tile_size: int = TILE_SIZE,
    gap: int = GAP,
) -> Image.Image:
    columns = grid_size_for(len(colors))
    rows = math.ceil(len(colors) / columns)
    size = (gap + columns * (tile_size + gap), gap + rows * (tile_size + gap))
    canvas = Image.new("RGB", size, BACKGROUND)
    draw = ImageDraw.Draw(canvas)
    for idx, color in enumerate(colors):
        draw.rounded_rectangle(_tile_box(idx, columns, tile_size, gap), radius=tile_size // 8, fill=color.to_rgb255())

    # 선택 후 피드백: 정답은 초록, 오답 선택은 빨강 테두리
    if selected_index is not None and correct_index is not None:
        if selected_index != correct_index:
            draw.rounded_rectangle(
                _tile_box(selected_index, columns, tile_size, gap), radius=tile_size // 8, outline=WRONG_OUTLINE, width=5
            )
        draw.rounded_rectangle(
            _tile_box(correct_index, columns, tile_size, gap), radius=tile_size // 8, outline=CORRECT_OUTLINE, width=5
        )
    return canvas


def tile_index_at(x: int, y: int, count: int, tile_size: int = TILE_SIZE, gap: int = GAP) -> Optional[int]:
    """클릭 좌표가 가리키는 타일. 간격/바깥이면 None."""
    columns = grid_size_for(count)
    for idx in range(count):
        x0, y0, x1, y1 = _tile_box(idx, columns, tile_size, gap)
        if x0 <= x <= x1 and y0 <= y <= y1:
            return idx
    return None
