"""Bounded random perturbation of hachure angle and gap.

Every function takes the random source explicitly. Production code uses a
numpy Generator; tests substitute anything with a ``random()`` method that
returns floats in [0, 1).
"""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    def random(self) -> float: ...


def default_random_source(seed: Optional[int] = None) -> RandomSource:
    return np.random.default_rng(seed)


def _clamp_noise(noise_fraction: float) -> float:
    # NaN fails the comparison and saturates
    return noise_fraction if noise_fraction < 1 else 1.0


def _plus_or_minus(rng: RandomSource) -> int:
    return -1 if rng.random() < 0.5 else 1


def perturb_angle(angle: float, noise_fraction: float, rng: RandomSource) -> float:
    """Return ``angle`` moved by at most ``45 * noise_fraction`` degrees.

    Draws twice from ``rng``: first the sign, then the magnitude.
    """
    bound = 90 * _clamp_noise(noise_fraction) / 2
    sign = _plus_or_minus(rng)
    return angle + sign * float(rng.random()) * bound


def perturb_gap(gap: float, noise_fraction: float, rng: RandomSource) -> float:
    """Return ``gap`` moved by at most ``gap * noise_fraction``.

    At full noise the result spans ``[0, 2 * gap]``.
    """
    bound = gap * _clamp_noise(noise_fraction)
    sign = _plus_or_minus(rng)
    return gap + sign * float(rng.random()) * bound
