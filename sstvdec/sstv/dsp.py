"""DSP utilities for SSTV decoding.

FFT peak frequency estimation with parabolic peak interpolation, window
extraction and frequency-to-pixel luminance mapping.
"""

from __future__ import annotations

import numpy as np

from .constants import (
    FREQ_PIXEL_HIGH,
    FREQ_PIXEL_LOW,
)


def peak_frequencies(windows: np.ndarray, sample_rate: int) -> np.ndarray:
    """Estimate the dominant frequency of many windows at once.

    Each row is Hann windowed and transformed with a real FFT. The strongest
    bin is refined with three-point parabolic interpolation on the magnitude
    spectrum; neighbours are clamped at the spectrum edges.

    Args:
        windows: Shape (M, N) - M audio windows of N samples each.
        sample_rate: Sample rate (Hz).

    Returns:
        Shape (M,) array of frequencies in Hz. An all-zero window yields 0.
    """
    windows = np.atleast_2d(np.asarray(windows, dtype=np.float64))
    rows, n = windows.shape
    if rows == 0 or n == 0:
        return np.zeros(rows, dtype=np.float64)

    spectrum = np.abs(np.fft.rfft(windows * np.hanning(n), axis=1))
    peak = np.argmax(spectrum, axis=1)

    last = spectrum.shape[1] - 1
    idx = np.arange(rows)
    y1 = spectrum[idx, np.maximum(peak - 1, 0)]
    y2 = spectrum[idx, peak]
    y3 = spectrum[idx, np.minimum(peak + 1, last)]

    denom = y1 - 2.0 * y2 + y3
    safe = np.where(denom != 0, denom, 1.0)
    shift = np.where(denom != 0, 0.5 * (y1 - y3) / safe, 0.0)

    bins = np.maximum(peak + shift, 0.0)
    return bins * sample_rate / n


def peak_frequency(samples: np.ndarray, sample_rate: int) -> float:
    """Estimate the dominant frequency of a single window.

    Args:
        samples: Audio samples (any numeric dtype).
        sample_rate: Sample rate (Hz).

    Returns:
        Peak frequency in Hz, or 0.0 for an empty or silent window.
    """
    samples = np.asarray(samples)
    if samples.size == 0:
        return 0.0
    return float(peak_frequencies(samples.reshape(1, -1), sample_rate)[0])


def extract_windows(samples: np.ndarray, starts: np.ndarray,
                    length: int) -> np.ndarray:
    """Gather fixed-length windows starting at each index in ``starts``.

    Callers guarantee ``starts + length <= len(samples)``.

    Returns:
        Shape (len(starts), length) array.
    """
    starts = np.asarray(starts, dtype=np.int64)
    return samples[starts[:, np.newaxis] + np.arange(length)]


def freq_to_pixel(frequency: float) -> int:
    """Convert SSTV audio frequency to pixel luminance value (0-255).

    Linear mapping: 1500 Hz = 0 (black), 2300 Hz = 255 (white).

    Args:
        frequency: Detected frequency (Hz).

    Returns:
        Pixel value clamped to 0-255.
    """
    normalized = (frequency - FREQ_PIXEL_LOW) / (FREQ_PIXEL_HIGH - FREQ_PIXEL_LOW)
    return max(0, min(255, int(normalized * 255 + 0.5)))


def freqs_to_pixels(frequencies: np.ndarray) -> np.ndarray:
    """Vectorised :func:`freq_to_pixel`."""
    normalized = (np.asarray(frequencies, dtype=np.float64) - FREQ_PIXEL_LOW) / (
        FREQ_PIXEL_HIGH - FREQ_PIXEL_LOW)
    return np.clip(normalized * 255 + 0.5, 0, 255).astype(np.uint8)


def samples_for_duration(duration_s: float, sample_rate: int) -> int:
    """Number of whole samples covering ``duration_s`` (truncated)."""
    return int(duration_s * sample_rate)
