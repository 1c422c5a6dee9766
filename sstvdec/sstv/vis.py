"""Calibration header search and VIS code decoding.

The calibration header is a 300 ms 1900 Hz leader, a 10 ms 1200 Hz break,
a second 300 ms leader and a 30 ms 1200 Hz VIS start bit. It is followed by
seven data bits (LSB first), an even parity bit and a stop bit, each 30 ms:
1100 Hz for logic 1 and 1300 Hz for logic 0.
"""

from __future__ import annotations

import numpy as np

from sstvdec.logging import get_logger

from .constants import (
    FREQ_TOLERANCE,
    HEADER_HOP,
    HEADER_SIZE,
    HEADER_TONES,
    HEADER_WINDOW,
    VIS_BIT_COUNT,
    VIS_BIT_DURATION,
    VIS_BIT_THRESHOLD,
)
from .dsp import extract_windows, peak_frequencies, samples_for_duration
from .errors import HeaderNotFoundError, InvalidParityError, UnsupportedModeError
from .modes import SSTVMode, get_mode

logger = get_logger('sstvdec.sstv.vis')

# Number of search origins checked per batched FFT
HEADER_SEARCH_BLOCK = 512


def find_header(samples: np.ndarray, sample_rate: int) -> int:
    """Find the end of the calibration header.

    Slides a search origin across the buffer in 2 ms hops and checks that
    all four header tones sit within tolerance of their expected frequency.
    The first matching origin wins.

    Args:
        samples: Mono audio samples.
        sample_rate: Sample rate (Hz).

    Returns:
        Sample index just past the VIS start bit.

    Raises:
        HeaderNotFoundError: No origin matched.
    """
    header_size = samples_for_duration(HEADER_SIZE, sample_rate)
    window = samples_for_duration(HEADER_WINDOW, sample_rate)
    hop = samples_for_duration(HEADER_HOP, sample_rate)
    tones = [(samples_for_duration(offset, sample_rate), freq)
             for offset, freq in HEADER_TONES]

    last_origin = len(samples) - header_size
    if last_origin < 0 or hop <= 0 or window <= 0:
        raise HeaderNotFoundError()

    origins = np.arange(0, last_origin + 1, hop, dtype=np.int64)
    logger.debug(f"Searching {len(origins)} header origins")

    for block_start in range(0, len(origins), HEADER_SEARCH_BLOCK):
        candidates = origins[block_start:block_start + HEADER_SEARCH_BLOCK]

        # Narrow the candidates tone by tone; order is preserved
        for offset, expected in tones:
            windows = extract_windows(samples, candidates + offset, window)
            freqs = peak_frequencies(windows, sample_rate)
            candidates = candidates[np.abs(freqs - expected) < FREQ_TOLERANCE]
            if candidates.size == 0:
                break

        if candidates.size:
            origin = int(candidates[0])
            logger.info(f"Calibration header found at {origin / sample_rate:.3f}s")
            return origin + header_size

    raise HeaderNotFoundError()


def read_vis_bits(samples: np.ndarray, sample_rate: int, start: int) -> list[int]:
    """Classify the eight VIS bit windows following the header.

    Returns:
        Bits in transmission order (LSB first, parity last).

    Raises:
        HeaderNotFoundError: The audio ends before the VIS code does.
    """
    bit_size = samples_for_duration(VIS_BIT_DURATION, sample_rate)
    if start + VIS_BIT_COUNT * bit_size > len(samples):
        raise HeaderNotFoundError("Reached end of audio before the VIS code")

    starts = start + np.arange(VIS_BIT_COUNT) * bit_size
    freqs = peak_frequencies(extract_windows(samples, starts, bit_size), sample_rate)
    bits = [1 if freq <= VIS_BIT_THRESHOLD else 0 for freq in freqs]
    logger.debug(f"VIS bits: {bits} ({', '.join(f'{f:.0f}' for f in freqs)} Hz)")
    return bits


def decode_vis_bits(bits: list[int]) -> int:
    """Assemble a VIS code from its transmitted bits.

    Args:
        bits: Seven data bits LSB first, followed by the even parity bit.

    Returns:
        The numeric VIS code.

    Raises:
        InvalidParityError: The bits (parity included) have an odd sum.
    """
    if len(bits) != VIS_BIT_COUNT:
        raise ValueError(f"Expected {VIS_BIT_COUNT} VIS bits, got {len(bits)}")

    if sum(bits) % 2 != 0:
        raise InvalidParityError(bits)

    vis_code = 0
    for bit in reversed(bits[:-1]):
        vis_code = (vis_code << 1) | bit
    return vis_code


def lookup_mode(vis_code: int) -> SSTVMode:
    """Map a VIS code onto the mode catalog.

    Raises:
        UnsupportedModeError: The code is not in the catalog.
    """
    mode = get_mode(vis_code)
    if mode is None:
        raise UnsupportedModeError(vis_code)
    return mode


def decode_vis(samples: np.ndarray, sample_rate: int, start: int) -> SSTVMode:
    """Decode the VIS code at ``start`` and return the selected mode."""
    vis_code = decode_vis_bits(read_vis_bits(samples, sample_rate, start))
    mode = lookup_mode(vis_code)
    logger.info(f"Detected SSTV mode {mode.name} (VIS: {vis_code})")
    return mode
