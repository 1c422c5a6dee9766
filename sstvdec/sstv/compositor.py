"""Assemble decoded channel intensities into RGB pixels.

Channel ordering depends on the mode's color model. YUV modes produce
(Y, Cb, Cr) triples; :func:`ycbcr_to_rgb` turns those into true colour.
"""

from __future__ import annotations

import numpy as np

from .modes import ColorModel, SSTVMode

# Output (R, G, B) drawn from these channel indices
_CHANNEL_ORDER: dict[ColorModel, tuple[int, int, int]] = {
    ColorModel.GBR: (2, 0, 1),   # Martin, Scottie
    ColorModel.YUV: (0, 2, 1),   # Robot 72
    ColorModel.RGB: (0, 1, 2),
}


def composite(grid: np.ndarray, mode: SSTVMode) -> np.ndarray:
    """Map an intensity grid onto an RGB pixel grid.

    Args:
        grid: Shape (height, channel_count, width), uint8.
        mode: Mode the grid was decoded with.

    Returns:
        Shape (height, width, 3) uint8 array. Layouts without a known
        mapping are left black.
    """
    height, channels, width = grid.shape
    if (height, channels, width) != (mode.height, mode.channel_count, mode.width):
        raise ValueError(
            f"Grid shape {grid.shape} does not match {mode.name} geometry")

    rgb = np.zeros((height, width, 3), dtype=np.uint8)

    if channels == 2:
        if mode.has_alt_scan and mode.color_model == ColorModel.YUV:
            # Robot 36: chroma alternates per line, shared by each line pair
            lines = np.arange(height)
            odd = lines % 2
            next_chroma = np.minimum(lines + 1 - odd, height - 1)
            this_chroma = lines - odd
            rgb[..., 0] = grid[:, 0, :]
            rgb[..., 1] = grid[next_chroma, 1, :]
            rgb[..., 2] = grid[this_chroma, 1, :]

    elif channels == 3:
        order = _CHANNEL_ORDER.get(mode.color_model)
        if order is not None:
            rgb[...] = grid[:, list(order), :].transpose(0, 2, 1)

    return rgb


def ycbcr_to_rgb(ycbcr: np.ndarray) -> np.ndarray:
    """Convert (Y, Cb, Cr) pixels to RGB.

    Uses the ITU-R BT.601 full-range conversion used by JPEG, with Cb/Cr
    centred at 128.
    """
    data = ycbcr.astype(np.float64)
    y = data[..., 0]
    cb = data[..., 1] - 128.0
    cr = data[..., 2] - 128.0

    r = y + 1.402 * cr
    g = y - 0.344136 * cb - 0.714136 * cr
    b = y + 1.772 * cb

    rgb = np.stack([r, g, b], axis=-1)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
