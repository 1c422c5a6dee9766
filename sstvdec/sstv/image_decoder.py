"""SSTV scanline-by-scanline image decoder.

Walks the audio buffer line by line and channel by channel, re-locating the
sync pulse on every line so that sample clock drift between sender and
receiver never accumulates beyond a single line. Each pixel is sampled with
one spectral estimate centred on its expected position.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

import numpy as np

from sstvdec import config
from sstvdec.logging import get_logger

from .compositor import composite, ycbcr_to_rgb
from .constants import SYNC_THRESHOLD, SYNC_WINDOW_FACTOR
from .dsp import (
    extract_windows,
    freqs_to_pixels,
    peak_frequencies,
    samples_for_duration,
)
from .modes import ColorModel, SSTVMode

# Pillow is imported lazily to keep the module importable when Pillow
# is not installed (only DecodeResult.to_image() needs it).
try:
    from PIL import Image
except ImportError:
    Image = None  # type: ignore[assignment,misc]

logger = get_logger('sstvdec.sstv.image')

# Type alias for progress callback: (current_line, total_lines)
ProgressCallback = Callable[[int, int], None]

# Candidate positions evaluated per batched FFT while hunting for sync
SYNC_SEARCH_BLOCK = 128


class DecodeStatus(enum.Enum):
    """How an image decode ended."""
    COMPLETE = 'complete'
    TRUNCATED = 'truncated'  # Audio ran out part way through the image


@dataclass
class DecodeResult:
    """Outcome of a non-fatal image decode.

    Attributes:
        mode: Mode the image was decoded with.
        grid: Intensity grid, shape (height, channel_count, width), uint8.
            Lines past a truncation point stay zero.
        status: COMPLETE or TRUNCATED.
        lines_decoded: Number of fully decoded lines.
    """
    mode: SSTVMode
    grid: np.ndarray
    status: DecodeStatus
    lines_decoded: int

    @property
    def is_complete(self) -> bool:
        return self.status is DecodeStatus.COMPLETE

    @property
    def is_truncated(self) -> bool:
        return self.status is DecodeStatus.TRUNCATED

    def to_rgb(self, convert_ycbcr: bool = False) -> np.ndarray:
        """Composite the grid into an RGB array of shape (height, width, 3).

        Args:
            convert_ycbcr: For YUV modes, convert the composited
                (Y, Cb, Cr) triples to true RGB.
        """
        rgb = composite(self.grid, self.mode)
        if convert_ycbcr and self.mode.color_model == ColorModel.YUV:
            rgb = ycbcr_to_rgb(rgb)
        return rgb

    def to_image(self, convert_ycbcr: bool = False) -> Image.Image | None:
        """Return the decoded picture as a PIL Image, or None without Pillow."""
        if Image is None:
            return None
        return Image.fromarray(self.to_rgb(convert_ycbcr), 'RGB')


class SSTVImageDecoder:
    """Decode the image section of an SSTV transmission.

    Usage::

        decoder = SSTVImageDecoder(mode, samples, sample_rate)
        result = decoder.decode(image_start)
    """

    def __init__(self, mode: SSTVMode, samples: np.ndarray, sample_rate: int,
                 progress_cb: ProgressCallback | None = None,
                 sync_search_lines: float | None = None):
        self._mode = mode
        self._samples = np.asarray(samples)
        self._sample_rate = sample_rate
        self._progress_cb = progress_cb

        # Pre-calculate sample counts
        self._sync_window = int(mode.sync_pulse * SYNC_WINDOW_FACTOR * sample_rate)
        self._sync_samples = mode.sync_pulse * sample_rate
        self._line_samples = samples_for_duration(mode.line_time, sample_rate)

        if sync_search_lines is None:
            sync_search_lines = config.SYNC_SEARCH_LINES
        self._sync_search = max(1, int(self._line_samples * sync_search_lines))

        self._columns = np.arange(mode.width)

    @property
    def mode(self) -> SSTVMode:
        return self._mode

    def align_sync(self, start: int, start_of_sync: bool) -> int | None:
        """Locate the sync pulse at or after ``start``.

        Slides a window of 1.4 sync pulses forward one sample at a time until
        its peak frequency rises above the sync tone, which happens once the
        window centre passes the end of the pulse.

        Args:
            start: Sample index to search from.
            start_of_sync: Return the leading edge of the pulse rather than
                its end.

        Returns:
            Aligned sample index, or None when the audio runs out.
        """
        start = max(0, start)
        window = self._sync_window
        align_stop = len(self._samples) - window
        if align_stop <= start:
            return None

        search_stop = min(align_stop, start + self._sync_search)
        end_sync: float | None = None

        for block_start in range(start, search_stop, SYNC_SEARCH_BLOCK):
            positions = np.arange(block_start,
                                  min(block_start + SYNC_SEARCH_BLOCK, search_stop))
            windows = extract_windows(self._samples, positions, window)
            freqs = peak_frequencies(windows, self._sample_rate)
            hits = np.flatnonzero(freqs > SYNC_THRESHOLD)
            if hits.size:
                end_sync = int(positions[hits[0]]) + window / 2
                break

        if end_sync is None:
            # No pulse within reach; trust the nominal timing
            logger.debug(f"No sync pulse found after sample {start}")
            if start_of_sync:
                return start
            return int(start + self._sync_samples)

        if start_of_sync:
            return max(0, int(end_sync - self._sync_samples))
        return int(end_sync)

    def sample_channel(self, grid: np.ndarray, line: int, channel: int,
                       seq_start: int) -> bool:
        """Sample every pixel of one channel scan into ``grid``.

        Args:
            grid: Intensity grid to fill.
            line: Line index.
            channel: Channel index.
            seq_start: Aligned start of the line's sync pulse.

        Returns:
            False if the audio ended before the channel was complete; the
            pixels ahead of that point are still stored.
        """
        mode = self._mode
        rate = self._sample_rate

        pixel_time = mode.channel_pixel_time(channel)
        centre_window_time = pixel_time * mode.window_factor / 2
        pixel_window = int(centre_window_time * 2 * rate)

        offset = mode.channel_offsets[channel]
        starts = (seq_start + (offset + self._columns * pixel_time
                               - centre_window_time) * rate).astype(np.int64)
        starts = np.maximum(starts, 0)

        overflow = np.flatnonzero(starts + pixel_window >= len(self._samples))
        count = int(overflow[0]) if overflow.size else mode.width

        if count > 0:
            windows = extract_windows(self._samples, starts[:count], pixel_window)
            freqs = peak_frequencies(windows, rate)
            grid[line, channel, :count] = freqs_to_pixels(freqs)

        return count == mode.width

    def decode(self, image_start: int) -> DecodeResult:
        """Decode the image whose first line begins around ``image_start``.

        Args:
            image_start: Sample index just past the VIS stop bit.

        Returns:
            DecodeResult; TRUNCATED if the audio ran out first.
        """
        mode = self._mode
        rate = self._sample_rate
        grid = np.zeros((mode.height, mode.channel_count, mode.width), dtype=np.uint8)

        seq_start = image_start
        if mode.has_start_sync:
            # Start at the end of the initial sync pulse
            aligned = self.align_sync(image_start, start_of_sync=False)
            if aligned is None:
                logger.warning("Reached end of audio before image data")
                return DecodeResult(mode, grid, DecodeStatus.TRUNCATED, 0)
            seq_start = aligned

        realign_channel = mode.sync_channel if mode.sync_channel is not None else 0

        for line in range(mode.height):
            if line == 0 and mode.sync_channel:
                # Align seq_start to the beginning of the previous sync pulse
                sync_offset = mode.channel_offsets[mode.sync_channel]
                seq_start -= int((sync_offset + mode.scan_time) * rate)

            for chan in range(mode.channel_count):
                if chan == realign_channel:
                    if line > 0 or chan > 0:
                        # Set base offset to the next line
                        seq_start += self._line_samples

                    if mode.sync_channel is not None:
                        aligned = self.align_sync(seq_start, start_of_sync=True)
                        if aligned is None:
                            return self._truncated(grid, line)
                        seq_start = aligned

                if not self.sample_channel(grid, line, chan, seq_start):
                    return self._truncated(grid, line)

            logger.debug(f"Line {line + 1}/{mode.height} decoded (sync at {seq_start})")
            if self._progress_cb:
                self._progress_cb(line + 1, mode.height)

        return DecodeResult(mode, grid, DecodeStatus.COMPLETE, mode.height)

    def _truncated(self, grid: np.ndarray, line: int) -> DecodeResult:
        logger.warning(f"Reached end of audio whilst decoding ({line}/{self._mode.height} lines)")
        return DecodeResult(self._mode, grid, DecodeStatus.TRUNCATED, line)
