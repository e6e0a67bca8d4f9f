"""Deterministic colors for painting units reached by input/output slots."""

from __future__ import annotations

import math

from smlogic.utils.geometry import Point

INPUT_COLORS: tuple[tuple[int, int, int], ...] = (
    (10, 62, 226),  # 0A3EE2
    (208, 37, 37),  # D02525
    (117, 20, 237),  # 7514ED
    (207, 17, 210),  # CF11D2
    (76, 111, 227),  # 4C6FE3
    (240, 103, 103),  # F06767
    (174, 121, 240),  # AE79F0
    (238, 123, 240),  # EE7BF0
)

OUTPUT_COLORS: tuple[tuple[int, int, int], ...] = (
    (25, 231, 83),  # 19E753
    (160, 234, 0),  # A0EA00
    (44, 230, 230),  # 2CE6E6
    (226, 219, 19),  # E2DB13
    (104, 255, 136),  # 68FF88
    (203, 246, 111),  # CBF66F
    (126, 237, 237),  # 7EEDED
    (245, 240, 113),  # F5F071
)

# Per-channel amplitude of the position-dependent shade
_FLUCTUATION = 80


def color_to_string(r: int, g: int, b: int) -> str:
    r, g, b = (max(0, min(255, c)) for c in (r, g, b))
    return f"{r:02x}{g:02x}{b:02x}"


def _shade(base: tuple[int, int, int], point: Point) -> str:
    r, g, b = (
        channel + round(math.sin(coord / 10.0) * _FLUCTUATION)
        for channel, coord in zip(base, point)
    )
    return color_to_string(r, g, b)


def input_color(input_id: int, point: Point) -> str:
    return _shade(INPUT_COLORS[input_id % len(INPUT_COLORS)], point)


def output_color(output_id: int, point: Point) -> str:
    return _shade(OUTPUT_COLORS[output_id % len(OUTPUT_COLORS)], point)
