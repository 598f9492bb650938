"""OKLCH 색상환 단면 미니 뷰 (고정 명도에서 Chroma × Hue)"""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from color_metrics.oklch import (
    PerceptualColor,
    in_gamut_mask,
    linear_to_srgb,
    oklab_to_linear_srgb,
    oklch_to_oklab,
)

MAX_WHEEL_CHROMA = 0.32


def generate_chroma_hue_slice(
    lightness: float,
    base: PerceptualColor | None = None,
    distinct: PerceptualColor | None = None,
    size: int = 320,
) -> Image.Image:
    """반지름 = Chroma, 각도 = Hue. sRGB로 표현 불가능한 영역은 투명하게 둔다."""
    canvas = Image.new("RGBA", (size, size), (250, 250, 250, 255))
    radius = size // 2 - 6
    cx = cy = size // 2

    y_grid, x_grid = np.ogrid[-radius:radius, -radius:radius]
    dist = np.sqrt(x_grid**2 + y_grid**2)
    chroma = np.clip(dist / radius, 0, 1) * MAX_WHEEL_CHROMA
    hue = np.degrees(np.arctan2(-y_grid, x_grid)) % 360.0

    lch = np.stack([np.full_like(chroma, lightness), chroma, np.broadcast_to(hue, chroma.shape)], axis=-1)
    linear = oklab_to_linear_srgb(oklch_to_oklab(lch))
    mask = (dist <= radius) & in_gamut_mask(linear)
    srgb = np.clip(linear_to_srgb(linear), 0.0, 1.0)

    rgba = np.zeros(chroma.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = np.round(srgb * 255).astype(np.uint8)
    rgba[..., 3] = np.where(mask, 255, 0).astype(np.uint8)
    wheel = Image.fromarray(rgba)
    canvas.paste(wheel, (cx - radius, cy - radius), wheel)

    draw = ImageDraw.Draw(canvas)
    draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), outline=(180, 180, 180))

    def _plot_point(color: PerceptualColor, outline: Tuple[int, int, int], label: str):
        ang = math.radians(color.h)
        r = min(color.c / MAX_WHEEL_CHROMA, 1.0) * radius
        px = int(cx + math.cos(ang) * r)
        py = int(cy - math.sin(ang) * r)
        draw.ellipse((px - 7, py - 7, px + 7, py + 7), outline=outline, width=3)
        draw.text((px + 10, py - 4), label, fill=(50, 50, 50))

    if base is not None:
        _plot_point(base, (30, 30, 30), "기준")
    if distinct is not None:
        _plot_point(distinct, (229, 57, 53), "정답")

    return canvas
