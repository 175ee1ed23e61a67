"""
Voxel text sampler.

Each glyph is a 5x7 bitmap extruded over a few depth layers. Points are
spread evenly over the lit voxels with a small jitter and colored by a
blue-to-red gradient across the string.
"""

import math
from typing import Dict, Optional, Tuple

import numpy as np

from cosmicparticles.generators.base import PointSet, make_rng

DEFAULT_TEXT = "THIS NEXUS"

CELL = 1.2
LETTER_SPACING = 2.5
DEPTH_LAYERS = 3
VERTICAL_OFFSET = 4.0
JITTER = 0.3

GLYPHS: Dict[str, Tuple[str, ...]] = {
    "T": ("11111", "00100", "00100", "00100", "00100", "00100", "00100"),
    "H": ("10001", "10001", "10001", "11111", "10001", "10001", "10001"),
    "I": ("01110", "00100", "00100", "00100", "00100", "00100", "01110"),
    "S": ("01111", "10000", "10000", "01110", "00001", "00001", "11110"),
    "N": ("10001", "11001", "10101", "10011", "10001", "10001", "10001"),
    "E": ("11111", "10000", "10000", "11110", "10000", "10000", "11111"),
    "X": ("10001", "01010", "00100", "00100", "00100", "01010", "10001"),
    "U": ("10001", "10001", "10001", "10001", "10001", "10001", "01110"),
}
GLYPH_COLUMNS = 5


def text_voxels(text: str = DEFAULT_TEXT) -> Tuple[np.ndarray, np.ndarray]:
    """
    Voxel centers for ``text`` and the character index of each voxel.

    Characters without a glyph advance the cursor but render blank.
    """
    centers = []
    char_index = []
    x_offset = 0.0
    for i, ch in enumerate(text):
        rows = GLYPHS.get(ch)
        if rows is not None:
            for row, bits in enumerate(rows):
                for col, bit in enumerate(bits):
                    if bit != "1":
                        continue
                    for d in range(DEPTH_LAYERS):
                        centers.append((
                            x_offset + col * CELL,
                            (len(rows) - row - 1) * CELL - VERTICAL_OFFSET,
                            d * CELL - DEPTH_LAYERS * CELL / 2.0,
                        ))
                        char_index.append(i)
        x_offset += LETTER_SPACING + GLYPH_COLUMNS * CELL

    pts = np.array(centers, dtype=np.float64).reshape(-1, 3)
    pts[:, 0] -= x_offset / 2.0
    return pts, np.array(char_index, dtype=np.int64)


def _gradient(char_index: np.ndarray, length: int) -> np.ndarray:
    t = char_index / max(length, 1)
    return np.stack([t, 0.2 + np.sin(t * math.pi) * 0.3, 1.0 - t], axis=1)


def generate_text(num_points: int, rng: Optional[np.random.Generator] = None,
                  text: str = DEFAULT_TEXT) -> PointSet:
    rng = make_rng(rng)
    text = text.upper()
    voxels, char_index = text_voxels(text)
    if num_points <= 0 or len(voxels) == 0:
        return PointSet.empty()

    # ceil covers every slot; the last voxels lose the overflow
    per_voxel = math.ceil(num_points / len(voxels))
    idx = np.repeat(np.arange(len(voxels)), per_voxel)[:num_points]

    pos = voxels[idx] + (rng.random((len(idx), 3)) - 0.5) * JITTER
    return PointSet(pos, _gradient(char_index[idx], len(text)))
