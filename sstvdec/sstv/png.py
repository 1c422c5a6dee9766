"""Minimal PNG writer for decoded SSTV images.

Writes 8-bit truecolour, non-interlaced images with a single IDAT chunk and
no scanline filtering.
"""

from __future__ import annotations

import struct
import zlib
from pathlib import Path

import numpy as np

from sstvdec.logging import get_logger

from .crc import crc32

logger = get_logger('sstvdec.sstv.png')

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

BIT_DEPTH = 8
COLOR_TYPE_TRUECOLOR = 2
COMPRESSION_METHOD = 0
FILTER_METHOD = 0
INTERLACE_METHOD = 0

FILTER_NONE = 0


def write_chunk(tag: bytes, payload: bytes) -> bytes:
    """Serialise one chunk: length, tag, payload and CRC over tag + payload."""
    if len(tag) != 4:
        raise ValueError(f"PNG chunk tag must be 4 bytes, got {tag!r}")
    return (
        struct.pack('>I', len(payload))
        + tag
        + payload
        + struct.pack('>I', crc32(tag + payload))
    )


def encode_png(rgb: np.ndarray) -> bytes:
    """Encode an RGB pixel grid as PNG.

    Args:
        rgb: Shape (height, width, 3) uint8 array.

    Returns:
        Complete PNG file contents.
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError(f"Expected (height, width, 3) pixels, got shape {rgb.shape}")

    height, width, _ = rgb.shape
    pixels = np.ascontiguousarray(rgb, dtype=np.uint8)

    header = struct.pack(
        '>IIBBBBB', width, height, BIT_DEPTH, COLOR_TYPE_TRUECOLOR,
        COMPRESSION_METHOD, FILTER_METHOD, INTERLACE_METHOD)

    # Prefix every scanline with its filter type byte
    scanlines = np.empty((height, width * 3 + 1), dtype=np.uint8)
    scanlines[:, 0] = FILTER_NONE
    scanlines[:, 1:] = pixels.reshape(height, width * 3)

    return (
        PNG_SIGNATURE
        + write_chunk(b'IHDR', header)
        + write_chunk(b'IDAT', zlib.compress(scanlines.tobytes()))
        + write_chunk(b'IEND', b'')
    )


def write_png(path: str | Path, rgb: np.ndarray) -> int:
    """Encode ``rgb`` and write it to ``path``.

    Returns:
        Number of bytes written.
    """
    data = encode_png(rgb)
    Path(path).write_bytes(data)
    logger.info(f"PNG written: {path} ({len(data)} bytes)")
    return len(data)
