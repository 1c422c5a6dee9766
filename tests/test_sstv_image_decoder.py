"""Unit tests for sync tracking and image sampling."""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from sstvdec.sstv.image_decoder import DecodeStatus, SSTVImageDecoder
from sstvdec.sstv.modes import ALL_MODES, MARTIN_1, ROBOT_36, ROBOT_72, SCOTTIE_1

from sstv_synth import (
    SAMPLE_RATE,
    block_pattern,
    image_segments,
    interior_columns,
    render,
)

TOLERANCE = 25


def sync_audio(mode, before=0.050, after=0.050, after_freq=1500.0):
    """A single sync pulse between two stretches of picture tone."""
    return render([(1500.0, before), (1200.0, mode.sync_pulse), (after_freq, after)],
                  SAMPLE_RATE)


def image_audio(mode, lines):
    """Image section only (no header) carrying the first ``lines`` of the pattern."""
    pattern = block_pattern(mode)
    return pattern, render(image_segments(mode, pattern[:lines]), SAMPLE_RATE)


def assert_lines_match(grid, pattern, lines):
    cols = interior_columns(grid.shape[2])
    diff = np.abs(grid[:lines][..., cols].astype(int) - pattern[:lines][..., cols].astype(int))
    assert diff.max() <= TOLERANCE, f"worst pixel error {diff.max()}"


class TestAlignSync:
    """Tests for sync pulse relocation."""

    @pytest.mark.parametrize('after_freq', [1500.0, 1900.0, 2300.0])
    def test_finds_leading_edge(self, after_freq):
        """The returned cursor lands on the start of the sync pulse."""
        audio = sync_audio(MARTIN_1, after_freq=after_freq)
        decoder = SSTVImageDecoder(MARTIN_1, audio, SAMPLE_RATE)
        pulse_start = int(0.050 * SAMPLE_RATE)

        cursor = decoder.align_sync(pulse_start - 10, start_of_sync=True)
        assert abs(cursor - pulse_start) <= 30

    def test_finds_trailing_edge(self):
        """Without start_of_sync the cursor lands on the end of the pulse."""
        audio = sync_audio(SCOTTIE_1)
        decoder = SSTVImageDecoder(SCOTTIE_1, audio, SAMPLE_RATE)
        pulse_start = int(0.050 * SAMPLE_RATE)
        pulse_end = pulse_start + int(SCOTTIE_1.sync_pulse * SAMPLE_RATE)

        cursor = decoder.align_sync(pulse_start, start_of_sync=False)
        assert abs(cursor - pulse_end) <= 30

    def test_late_cursor_is_pulled_back(self):
        """Starting part way into the pulse still finds its leading edge."""
        audio = sync_audio(MARTIN_1)
        decoder = SSTVImageDecoder(MARTIN_1, audio, SAMPLE_RATE)
        pulse_start = int(0.050 * SAMPLE_RATE)

        cursor = decoder.align_sync(pulse_start + 40, start_of_sync=True)
        assert abs(cursor - pulse_start) <= 30

    def test_end_of_audio(self):
        """No room for a search window means end of audio."""
        audio = sync_audio(MARTIN_1)
        decoder = SSTVImageDecoder(MARTIN_1, audio, SAMPLE_RATE)
        assert decoder.align_sync(len(audio) - 10, start_of_sync=True) is None

    def test_no_pulse_keeps_nominal_position(self):
        """When nothing rises above the sync tone the nominal cursor stands."""
        audio = render([(1200.0, 1.0)], SAMPLE_RATE)
        decoder = SSTVImageDecoder(MARTIN_1, audio, SAMPLE_RATE)
        assert decoder.align_sync(1000, start_of_sync=True) == 1000

    def test_buffer_not_modified(self):
        """Alignment only reads the sample buffer."""
        audio = sync_audio(MARTIN_1)
        copy = audio.copy()
        SSTVImageDecoder(MARTIN_1, audio, SAMPLE_RATE).align_sync(0, start_of_sync=True)
        assert np.array_equal(audio, copy)

    def test_search_span_from_config(self):
        """The search span follows SYNC_SEARCH_LINES when not given."""
        with patch('sstvdec.config.SYNC_SEARCH_LINES', 0.5):
            decoder = SSTVImageDecoder(MARTIN_1, np.zeros(10, dtype=np.int16), SAMPLE_RATE)
        assert decoder._sync_search == int(int(MARTIN_1.line_time * SAMPLE_RATE) * 0.5)


class TestDecodeTruncated:
    """Tests for decoding image sections that end early."""

    def test_martin_1(self):
        """Lines before the cut decode; later lines stay zero."""
        pattern, audio = image_audio(MARTIN_1, 12)
        cut = int(10.5 * MARTIN_1.line_time * SAMPLE_RATE)
        result = SSTVImageDecoder(MARTIN_1, audio[:cut], SAMPLE_RATE).decode(0)

        assert result.status is DecodeStatus.TRUNCATED
        assert result.is_truncated and not result.is_complete
        assert result.lines_decoded == 10
        assert result.grid.shape == (256, 3, 320)
        assert_lines_match(result.grid, pattern, 10)
        assert not result.grid[11:].any()

    def test_scottie_1(self):
        """Scottie decodes after its pre-image sync pulse."""
        pattern, audio = image_audio(SCOTTIE_1, 10)
        cut = int((SCOTTIE_1.sync_pulse + 8.5 * SCOTTIE_1.line_time) * SAMPLE_RATE)
        result = SSTVImageDecoder(SCOTTIE_1, audio[:cut], SAMPLE_RATE).decode(0)

        assert result.is_truncated
        assert result.lines_decoded == 8
        assert_lines_match(result.grid, pattern, 8)
        assert not result.grid[9:].any()

    def test_robot_36(self):
        """Robot 36 luminance and half-length chroma both decode."""
        pattern, audio = image_audio(ROBOT_36, 12)
        cut = int(10.5 * ROBOT_36.line_time * SAMPLE_RATE)
        result = SSTVImageDecoder(ROBOT_36, audio[:cut], SAMPLE_RATE).decode(0)

        assert result.is_truncated
        assert result.lines_decoded == 10
        assert result.grid.shape == (240, 2, 320)
        assert_lines_match(result.grid, pattern, 10)
        assert not result.grid[11:].any()

    @pytest.mark.parametrize('mode', list(ALL_MODES.values()), ids=lambda m: m.name)
    def test_every_mode(self, mode):
        """Each mode samples all of its channels, half-length scans included."""
        pattern, audio = image_audio(mode, 10)
        start_sync = mode.sync_pulse if mode.has_start_sync else 0.0
        cut = int((start_sync + 8.5 * mode.line_time) * SAMPLE_RATE)
        result = SSTVImageDecoder(mode, audio[:cut], SAMPLE_RATE).decode(0)

        assert result.is_truncated
        assert result.lines_decoded == 8
        assert result.grid.shape == (mode.height, mode.channel_count, mode.width)
        assert_lines_match(result.grid, pattern, 8)
        assert result.grid[:8, -1].any()
        assert not result.grid[9:].any()

    def test_robot_72_third_channel(self):
        """Robot 72's second half-length chroma scan lands in channel 2."""
        mode = ROBOT_72
        pattern, audio = image_audio(mode, 3)
        cut = int(2.5 * mode.line_time * SAMPLE_RATE)
        result = SSTVImageDecoder(mode, audio[:cut], SAMPLE_RATE).decode(0)

        cols = interior_columns(mode.width)
        for chan in (1, 2):
            diff = np.abs(result.grid[:2, chan][:, cols].astype(int)
                          - pattern[:2, chan][:, cols].astype(int))
            assert diff.max() <= TOLERANCE, f"channel {chan} error {diff.max()}"
        # Channels 1 and 2 carry different levels, so they cannot be swapped
        assert not np.array_equal(pattern[0, 1], pattern[0, 2])

    def test_no_audio_for_start_sync(self):
        """Running out before Scottie's first sync yields an empty image."""
        audio = np.zeros(100, dtype=np.int16)
        result = SSTVImageDecoder(SCOTTIE_1, audio, SAMPLE_RATE).decode(0)
        assert result.is_truncated
        assert result.lines_decoded == 0
        assert not result.grid.any()

    def test_progress_callback(self):
        """The progress callback fires once per completed line."""
        _, audio = image_audio(MARTIN_1, 4)
        cut = int(3.5 * MARTIN_1.line_time * SAMPLE_RATE)
        progress = MagicMock()
        SSTVImageDecoder(MARTIN_1, audio[:cut], SAMPLE_RATE, progress_cb=progress).decode(0)

        assert progress.call_count == 3
        progress.assert_called_with(3, 256)


class TestSampleChannel:
    """Tests for single channel sampling."""

    def test_partial_channel(self):
        """Pixels ahead of the buffer end are kept, the rest stay zero."""
        _, audio = image_audio(MARTIN_1, 1)
        # Cut half way through the first (green) scan
        cut = int((MARTIN_1.channel_offsets[0] + MARTIN_1.scan_time / 2) * SAMPLE_RATE)
        decoder = SSTVImageDecoder(MARTIN_1, audio[:cut], SAMPLE_RATE)
        grid = np.zeros((256, 3, 320), dtype=np.uint8)

        assert decoder.sample_channel(grid, 0, 0, 0) is False
        filled = np.flatnonzero(grid[0, 0] != 0)
        assert filled.size > 0
        assert filled.max() < 170
        assert not grid[0, 0, 170:].any()
