"""
Orbital solar-system sampler.

Planets sit on circular orbits in the xz plane. Time is compressed so that
``seconds_per_year`` seconds of session time make one Earth orbit.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from cosmicparticles.generators.base import PointSet, make_rng, sample_unit_sphere
from cosmicparticles.generators.colorgrade import hex_to_rgb

SECONDS_PER_YEAR = 10.0
BODY_SHARE_DIVISOR = 16     # per_body = N // 16
TRAIL_SHARE = 0.3
TRAIL_ARC = math.pi / 2.0
BELT_INNER = 12.0
BELT_WIDTH = 2.0
BELT_THICKNESS = 0.5
BELT_COLOR = hex_to_rgb("#888888")


@dataclass(frozen=True)
class Body:
    name: str
    distance: float
    color: Tuple[float, float, float]
    size: float
    period: float  # Earth years; 0 for the sun


BODIES: Tuple[Body, ...] = (
    Body("sun", 0.0, hex_to_rgb("#FDB813"), 3.0, 0.0),
    Body("mercury", 5.0, hex_to_rgb("#8C7853"), 0.4, 0.24),
    Body("venus", 7.0, hex_to_rgb("#FFC649"), 0.9, 0.62),
    Body("earth", 9.0, hex_to_rgb("#4A90E2"), 1.0, 1.0),
    Body("mars", 11.0, hex_to_rgb("#E27B58"), 0.5, 1.88),
    Body("jupiter", 15.0, hex_to_rgb("#C88B3A"), 2.2, 11.86),
    Body("saturn", 19.0, hex_to_rgb("#FAD5A5"), 1.8, 29.46),
    Body("uranus", 23.0, hex_to_rgb("#4FD0E7"), 1.2, 84.01),
    Body("neptune", 27.0, hex_to_rgb("#4166F5"), 1.1, 164.79),
)


def orbital_angle(body: Body, elapsed: float, seconds_per_year: float = SECONDS_PER_YEAR) -> float:
    if body.period <= 0.0:
        return 0.0
    years = elapsed / seconds_per_year
    return 2.0 * math.pi * years / body.period


def _sun(body: Body, count: int, rng: np.random.Generator) -> PointSet:
    r = body.size * (0.8 + rng.random(count) * 0.4)
    pos = sample_unit_sphere(count, rng) * r[:, np.newaxis]
    glow = 1.2 + rng.random(count) * 0.3
    col = np.clip(np.asarray(body.color)[np.newaxis, :] * glow[:, np.newaxis], 0.0, 1.0)
    return PointSet(pos, col)


def _planet(body: Body, angle: float, count: int, rng: np.random.Generator) -> PointSet:
    center = np.array([body.distance * math.cos(angle), 0.0, body.distance * math.sin(angle)])
    r = body.size * (0.7 + rng.random(count) * 0.3)
    sphere = center + sample_unit_sphere(count, rng) * r[:, np.newaxis]
    sphere_col = np.tile(body.color, (count, 1))

    trail_n = int(math.floor(count * TRAIL_SHARE))
    trail_angle = angle - rng.random(trail_n) * TRAIL_ARC
    trail = np.stack([
        body.distance * np.cos(trail_angle),
        (rng.random(trail_n) - 0.5) * 0.2,
        body.distance * np.sin(trail_angle),
    ], axis=1)
    dim = 0.3 + rng.random(trail_n) * 0.3
    trail_col = np.asarray(body.color)[np.newaxis, :] * dim[:, np.newaxis]

    return PointSet(np.concatenate([sphere, trail]), np.concatenate([sphere_col, trail_col]))


def _belt(count: int, rng: np.random.Generator) -> PointSet:
    angle = rng.random(count) * 2.0 * math.pi
    dist = BELT_INNER + rng.random(count) * BELT_WIDTH
    pos = np.stack([
        dist * np.cos(angle),
        (rng.random(count) - 0.5) * BELT_THICKNESS,
        dist * np.sin(angle),
    ], axis=1)
    shade = 0.5 + rng.random(count) * 0.5
    col = np.asarray(BELT_COLOR)[np.newaxis, :] * shade[:, np.newaxis]
    return PointSet(pos, col)


def generate_solar_system(
    num_points: int,
    elapsed: float = 0.0,
    rng: Optional[np.random.Generator] = None,
    seconds_per_year: float = SECONDS_PER_YEAR,
) -> PointSet:
    """
    Sun, eight planets with motion trails, and an asteroid belt filling the
    remaining budget. Always returns exactly ``num_points`` points.
    """
    rng = make_rng(rng)
    if num_points <= 0:
        return PointSet.empty()

    per_body = num_points // BODY_SHARE_DIVISOR
    parts = []
    for body in BODIES:
        if body.period <= 0.0:
            parts.append(_sun(body, per_body * 3, rng))
        else:
            angle = orbital_angle(body, elapsed, seconds_per_year)
            parts.append(_planet(body, angle, per_body, rng))

    used = sum(len(p) for p in parts)
    parts.append(_belt(num_points - used, rng))
    return PointSet.concat(parts)
