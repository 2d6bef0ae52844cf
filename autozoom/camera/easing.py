#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Easing curves used to shape interpolation progress between keyframes.

Two ease-in-out curves exist: the cubic curve drives the live preview and
the quadratic curve reproduces the legacy export look. A keyframe only
says "ease-in-out"; the ``EasingStyle`` chosen per call site decides which
of the two it means.
"""

from enum import Enum
from typing import Callable, Optional

from autozoom.models.keyframe import EASING_EASE_IN_OUT, EASING_LINEAR

EasingFunction = Callable[[float], float]


def linear(p: float) -> float:
    return p


def ease_in_out_cubic(p: float) -> float:
    if p < 0.5:
        return 4 * p * p * p
    return (p - 1) * (2 * p - 2) * (2 * p - 2) + 1


def ease_in_out_quad(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -1 + (4 - 2 * p) * p


class EasingStyle(str, Enum):
    CUBIC = 'cubic'
    QUAD = 'quad'


_EASE_IN_OUT_BY_STYLE = {
    EasingStyle.CUBIC: ease_in_out_cubic,
    EasingStyle.QUAD: ease_in_out_quad,
}


def resolve_easing(name: Optional[str], style: EasingStyle = EasingStyle.CUBIC) -> EasingFunction:
    """
    Map a keyframe easing name to a curve.

    Args:
        name: 'linear', 'ease-in-out' or None (use the style's curve)
        style: Which ease-in-out curve this call site uses

    Returns:
        The easing function
    """
    if name == EASING_LINEAR:
        return linear
    if name is None or name == EASING_EASE_IN_OUT:
        return _EASE_IN_OUT_BY_STYLE[EasingStyle(style)]
    raise ValueError(f"Unknown easing '{name}'")
