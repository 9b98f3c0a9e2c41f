"""Simple noise helpers used for resource placement."""

from __future__ import annotations

from random import Random


def threshold_mask(
    data: list[list[float]], threshold: float
) -> list[list[bool]]:
    """Return boolean grid where ``True`` indicates ``value >= threshold``."""

    return [[value >= threshold for value in row] for row in data]


def white_noise(
    width: int, height: int, seed: int | Random | None = None
) -> list[list[float]]:
    """Return ``height`` × ``width`` grid of random floats in ``[0, 1)``.

    ``seed`` may be an int or an existing ``Random`` to draw from.
    """

    rnd = seed if isinstance(seed, Random) else Random(seed)
    return [[rnd.random() for _ in range(width)] for _ in range(height)]


__all__ = ["white_noise", "threshold_mask"]
