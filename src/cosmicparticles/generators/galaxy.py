"""
Star-field sampler: a catalogue of bright named stars plus a faint
background shell.
"""

import math
from typing import Optional

import numpy as np

from cosmicparticles.generators.base import PointSet, make_rng
from cosmicparticles.generators.colorgrade import hex_to_rgb, hsl_to_rgb

# (name, right ascension [h], declination [deg], distance [ly], spectral type)
STAR_CATALOGUE = (
    ("Sun", 0.0, 0.0, 0.0, "G2"),
    ("Sirius", 6.75, -16.7, 8.6, "A1"),
    ("Canopus", 6.4, -52.7, 310.0, "F0"),
    ("Alpha Centauri", 14.66, -60.8, 4.37, "G2"),
    ("Arcturus", 14.26, 19.1, 37.0, "K0"),
    ("Vega", 18.6, 38.8, 25.0, "A0"),
    ("Capella", 5.27, 46.0, 42.0, "G3"),
    ("Rigel", 5.24, -8.2, 860.0, "B8"),
    ("Procyon", 7.65, 5.2, 11.4, "F5"),
    ("Betelgeuse", 5.92, 7.4, 640.0, "M1"),
    ("Achernar", 1.63, -57.2, 144.0, "B6"),
    ("Hadar", 14.06, -60.4, 390.0, "B1"),
    ("Altair", 19.85, 8.9, 16.7, "A7"),
    ("Acrux", 12.44, -63.1, 320.0, "B0"),
    ("Aldebaran", 4.6, 16.5, 65.0, "K5"),
    ("Antares", 16.49, -26.4, 600.0, "M1"),
    ("Spica", 13.42, -11.2, 250.0, "B1"),
    ("Pollux", 7.76, 28.0, 34.0, "K0"),
    ("Fomalhaut", 22.96, -29.6, 25.0, "A3"),
    ("Deneb", 20.69, 45.3, 2600.0, "A2"),
    ("Mimosa", 12.8, -59.7, 280.0, "B0"),
    ("Regulus", 10.14, 11.9, 79.0, "B7"),
    ("Adhara", 6.98, -28.9, 430.0, "B2"),
    ("Castor", 7.58, 31.9, 52.0, "A1"),
    ("Gacrux", 12.52, -57.1, 88.0, "M3"),
    ("Shaula", 17.56, -37.1, 700.0, "B1"),
)

SPECTRAL_COLORS = {
    "O": hex_to_rgb("#9bb0ff"),
    "B": hex_to_rgb("#aabfff"),
    "A": hex_to_rgb("#cad7ff"),
    "F": hex_to_rgb("#f8f7ff"),
    "G": hex_to_rgb("#fff4ea"),
    "K": hex_to_rgb("#ffd2a1"),
    "M": hex_to_rgb("#ffcc6f"),
}
DEFAULT_STAR_COLOR = (1.0, 1.0, 1.0)

BACKGROUND_INNER = 15.0
BACKGROUND_DEPTH = 15.0


def spectral_color(spectral_type: str):
    return SPECTRAL_COLORS.get(spectral_type[:1].upper(), DEFAULT_STAR_COLOR)


def compress_distance(light_years: float) -> float:
    """Log display distance, so far stars stay in view."""
    if light_years <= 0.0:
        return 0.0
    return math.log10(light_years + 1.0) * 5.0


def celestial_to_cartesian(ra_hours, dec_degrees, distance) -> np.ndarray:
    """RA/Dec/distance to xyz with z toward the celestial north pole."""
    phi = np.radians(np.asarray(ra_hours, dtype=np.float64) * 15.0)
    theta = np.radians(np.asarray(dec_degrees, dtype=np.float64))
    d = np.asarray(distance, dtype=np.float64)
    return np.stack([
        d * np.cos(theta) * np.cos(phi),
        d * np.cos(theta) * np.sin(phi),
        d * np.sin(theta),
    ], axis=-1)


def generate_galaxy(num_points: int, rng: Optional[np.random.Generator] = None) -> PointSet:
    rng = make_rng(rng)
    if num_points <= 0:
        return PointSet.empty()

    stars = STAR_CATALOGUE[:num_points]
    named_pos = celestial_to_cartesian(
        [s[1] for s in stars],
        [s[2] for s in stars],
        [compress_distance(s[3]) for s in stars],
    )
    named_col = np.array([spectral_color(s[4]) for s in stars], dtype=np.float32)

    remaining = num_points - len(stars)
    bg_pos = celestial_to_cartesian(
        rng.random(remaining) * 24.0,
        (rng.random(remaining) - 0.5) * 180.0,
        BACKGROUND_INNER + rng.random(remaining) * BACKGROUND_DEPTH,
    )
    bg_col = hsl_to_rgb(0.6 + rng.random(remaining) * 0.1, 0.2, rng.random(remaining) * 0.5)

    return PointSet(
        np.concatenate([named_pos, bg_pos.reshape(-1, 3)]),
        np.concatenate([named_col, bg_col.reshape(-1, 3)]),
    )
