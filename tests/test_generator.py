"""색상 생성기(기준색/구별색/세트) 테스트"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

from color_metrics.generator import PaletteGenerator
from color_metrics.oklch import PerceptualColor, is_in_gamut, perceptual_distance, shortest_hue_difference, to_rgb
from config import DEFAULT_GENERATOR
from levels import VariationStrategy, target_distance, variation_strategy


def test_safe_base_color_is_in_gamut_and_in_base_range():
    gen = PaletteGenerator(rng=1)
    lo_l, hi_l = DEFAULT_GENERATOR.base_lightness
    lo_c, hi_c = DEFAULT_GENERATOR.base_chroma
    for _ in range(200):
        base = gen.safe_base_color()
        assert is_in_gamut(base)
        assert lo_l <= base.l <= hi_l
        assert lo_c <= base.c <= hi_c
        assert 0.0 <= base.h < 360.0


@pytest.mark.parametrize(
    "strategy, pinned",
    [
        (VariationStrategy.HUE_ONLY, (0, 1)),
        (VariationStrategy.HUE_AND_CHROMA, (0,)),
        (VariationStrategy.HUE_AND_LIGHTNESS, (1,)),
        (VariationStrategy.CHROMA_AND_LIGHTNESS, (2,)),
        (VariationStrategy.ALL_AXES, ()),
    ],
)
def test_direction_vector_pins_disallowed_axes(strategy, pinned):
    gen = PaletteGenerator(rng=5)
    for _ in range(50):
        direction = gen.direction_vector(strategy)
        for axis in pinned:
            assert direction[axis] == 0.0
        assert np.abs(direction).max() <= 1.0


def test_distinct_color_hits_target_for_random_levels_and_seeds():
    rng = np.random.default_rng(2024)
    hits = 0
    trials = 1000
    for _ in range(trials):
        level = int(rng.integers(1, 31))
        gen = PaletteGenerator(rng=int(rng.integers(0, 2**31)))
        base = gen.safe_base_color()
        target = target_distance(level)
        distinct = gen.distinct_color(base, target, variation_strategy(level))
        assert is_in_gamut(distinct)
        if abs(perceptual_distance(base, distinct) - target) <= 0.15 * target:
            hits += 1
    assert hits / trials >= 0.95


def test_hue_only_keeps_lightness():
    gen = PaletteGenerator(rng=9)
    for _ in range(50):
        base = gen.safe_base_color()
        distinct = gen.distinct_color(base, 6.0, VariationStrategy.HUE_ONLY)
        assert distinct.l == pytest.approx(base.l)


def test_chroma_and_lightness_keeps_hue():
    gen = PaletteGenerator(rng=10)
    for _ in range(50):
        base = gen.safe_base_color()
        distinct = gen.distinct_color(base, 4.0, VariationStrategy.CHROMA_AND_LIGHTNESS)
        assert shortest_hue_difference(distinct.h, base.h) == pytest.approx(0.0, abs=1e-9)


def test_distinct_color_accepts_strategy_tag():
    gen = PaletteGenerator(rng=4)
    base = gen.safe_base_color()
    distinct = gen.distinct_color(base, 5.0, "all_axes")
    assert is_in_gamut(distinct)


def test_distinct_color_rejects_bad_input():
    gen = PaletteGenerator(rng=4)
    base = gen.safe_base_color()
    with pytest.raises(ValueError):
        gen.distinct_color(base, 0.0, VariationStrategy.HUE_ONLY)
    with pytest.raises(ValueError):
        gen.distinct_color(base, 5.0, "diagonal")


def test_distinct_color_never_fails_for_unreachable_target():
    # 무채색에 가까운 기준색은 Hue만으로 큰 ΔE를 낼 수 없다
    gen = PaletteGenerator(rng=12)
    base = PerceptualColor(0.5, 0.02, 90.0)
    distinct = gen.distinct_color(base, 25.0, VariationStrategy.HUE_ONLY)
    assert is_in_gamut(distinct)
    assert perceptual_distance(base, distinct) > 0.0


def test_jittered_target_stays_within_band():
    gen = PaletteGenerator(rng=0)
    values = [gen.jittered_target(8.0) for _ in range(500)]
    assert min(values) >= 8.0 * 0.92 - 1e-9
    assert max(values) <= 8.0 * 1.08 + 1e-9
    assert len(set(values)) > 1
    assert gen.jittered_target(0.5) == DEFAULT_GENERATOR.min_target_distance


def test_build_challenge_set_puts_distinct_last():
    gen = PaletteGenerator(rng=2)
    base = gen.safe_base_color()
    distinct = gen.distinct_color(base, 8.0, VariationStrategy.ALL_AXES)
    colors = gen.build_challenge_set(9, base, distinct)
    assert len(colors) == 9
    assert colors[:8] == [to_rgb(base)] * 8
    assert colors[8] == to_rgb(distinct)
    with pytest.raises(ValueError):
        gen.build_challenge_set(1, base, distinct)


def test_same_seed_is_deterministic():
    a = PaletteGenerator(rng=42).generate_distinguish_colors(5.0, VariationStrategy.ALL_AXES)
    b = PaletteGenerator(rng=42).generate_distinguish_colors(5.0, VariationStrategy.ALL_AXES)
    assert a == b
    assert a.colors[-1] != a.colors[0]
