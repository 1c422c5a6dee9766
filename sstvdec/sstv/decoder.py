"""SSTV decoding pipeline.

Ties header search, VIS decoding, image sampling, compositing and PNG
output together for a complete audio buffer.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from sstvdec.logging import get_logger

from .audio import SampleBuffer, load_wav
from .constants import VIS_BIT_DURATION, VIS_TOTAL_BITS
from .image_decoder import DecodeResult, ProgressCallback, SSTVImageDecoder
from .modes import SSTVMode
from .png import write_png
from .vis import decode_vis, find_header

logger = get_logger('sstvdec.sstv')


class SSTVDecoder:
    """Decode one SSTV transmission from a fully loaded sample buffer.

    Fatal problems (no header, bad parity, unknown mode) raise an
    :class:`~sstvdec.sstv.errors.SSTVError`. Running out of audio mid-image
    yields a truncated :class:`DecodeResult` instead.
    """

    def __init__(self, samples: np.ndarray, sample_rate: int,
                 progress_cb: ProgressCallback | None = None):
        self._samples = np.asarray(samples)
        self._sample_rate = sample_rate
        self._progress_cb = progress_cb

    @classmethod
    def from_buffer(cls, buffer: SampleBuffer,
                    progress_cb: ProgressCallback | None = None) -> SSTVDecoder:
        return cls(buffer.samples, buffer.sample_rate, progress_cb=progress_cb)

    @classmethod
    def from_file(cls, audio_path: str | Path,
                  progress_cb: ProgressCallback | None = None) -> SSTVDecoder:
        return cls.from_buffer(load_wav(audio_path), progress_cb=progress_cb)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def find_header(self) -> int:
        """Sample index just past the calibration header."""
        return find_header(self._samples, self._sample_rate)

    def decode_vis(self, header_end: int) -> SSTVMode:
        """Mode named by the VIS code starting at ``header_end``."""
        return decode_vis(self._samples, self._sample_rate, header_end)

    def image_start(self, header_end: int) -> int:
        """First sample after the VIS data, parity and stop bits."""
        return int(header_end + VIS_BIT_DURATION * VIS_TOTAL_BITS * self._sample_rate)

    def decode(self) -> DecodeResult:
        """Run the full pipeline up to the intensity grid."""
        header_end = self.find_header()
        mode = self.decode_vis(header_end)

        image_start = self.image_start(header_end)
        available = (len(self._samples) - image_start) / self._sample_rate
        logger.debug(f"{mode.name} image needs {mode.duration:.1f}s, {available:.1f}s available")

        image_decoder = SSTVImageDecoder(
            mode, self._samples, self._sample_rate, progress_cb=self._progress_cb)
        result = image_decoder.decode(image_start)

        logger.info(
            f"{mode.name}: {result.lines_decoded}/{mode.height} lines "
            f"({result.status.value})"
        )
        return result


def decode_file(audio_path: str | Path,
                progress_cb: ProgressCallback | None = None) -> DecodeResult:
    """Decode the SSTV image in a WAV file."""
    return SSTVDecoder.from_file(audio_path, progress_cb=progress_cb).decode()


def save_png(result: DecodeResult, path: str | Path,
             convert_ycbcr: bool = False) -> int:
    """Composite a decode result and write it as PNG.

    Returns:
        Number of bytes written.
    """
    return write_png(path, result.to_rgb(convert_ycbcr))
