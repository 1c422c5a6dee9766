"""WAV input for the SSTV decoder.

Produces a mono signed 16-bit sample buffer. Multichannel audio is reduced
to its first channel by taking every Nth sample.
"""

from __future__ import annotations

import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from sstvdec.logging import get_logger

from .errors import AudioLoadError

logger = get_logger('sstvdec.sstv.audio')


@dataclass(frozen=True)
class SampleBuffer:
    """Mono int16 samples and their sample rate."""
    samples: np.ndarray
    sample_rate: int

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate if self.sample_rate else 0.0


def pcm_to_int16(raw: bytes, sample_width: int) -> np.ndarray:
    """Convert little-endian PCM frames of any common width to int16."""
    if sample_width == 2:
        return np.frombuffer(raw, dtype='<i2').astype(np.int16)
    if sample_width == 1:
        # 8-bit WAV is unsigned
        return ((np.frombuffer(raw, dtype=np.uint8).astype(np.int16) - 128) << 8).astype(np.int16)
    if sample_width == 3:
        data = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3)
        # Keep the two most significant bytes
        return (data[:, 1].astype(np.uint16) | (data[:, 2].astype(np.uint16) << 8)).view(np.int16)
    if sample_width == 4:
        return (np.frombuffer(raw, dtype='<i4') >> 16).astype(np.int16)
    raise AudioLoadError(f"Unsupported sample width: {sample_width}")


def to_mono(samples: np.ndarray, channels: int) -> np.ndarray:
    """Keep every ``channels``-th sample (first channel of each frame)."""
    if channels > 1:
        return samples[::channels].copy()
    return samples


def load_wav(path: str | Path) -> SampleBuffer:
    """Read a PCM WAV file.

    Raises:
        AudioLoadError: The file is missing or not a readable WAV file.
    """
    path = Path(path)
    if not path.exists():
        raise AudioLoadError(f"Audio file not found: {path}")

    try:
        with wave.open(str(path), 'rb') as wf:
            n_channels = wf.getnchannels()
            sample_width = wf.getsampwidth()
            sample_rate = wf.getframerate()
            n_frames = wf.getnframes()

            logger.info(
                f"Decoding WAV: {n_channels}ch, {sample_width * 8}bit, "
                f"{sample_rate}Hz, {n_frames} frames"
            )

            raw = wf.readframes(n_frames)
    except (wave.Error, EOFError, OSError) as e:
        raise AudioLoadError(f"Error reading WAV file {path}: {e}") from e

    samples = to_mono(pcm_to_int16(raw, sample_width), n_channels)
    return SampleBuffer(samples=samples, sample_rate=sample_rate)
