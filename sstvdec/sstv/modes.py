"""SSTV mode specifications.

Frozen dataclass definitions for each supported SSTV mode, encoding
resolution, color model, line timing and sync characteristics. The catalog
is closed: seven modes keyed by their VIS code.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ColorModel(enum.Enum):
    """Color encoding models used by SSTV modes."""
    RGB = 'rgb'          # R, G, B channel order
    GBR = 'gbr'          # G, B, R channel order (Martin, Scottie)
    YUV = 'yuv'          # Luminance + chrominance (Robot modes)
    BW = 'bw'            # Monochrome


class ModeId(enum.IntEnum):
    """VIS codes of the supported modes."""
    ROBOT_36 = 8
    ROBOT_72 = 12
    MARTIN_2 = 40
    MARTIN_1 = 44
    SCOTTIE_2 = 56
    SCOTTIE_1 = 60
    SCOTTIE_DX = 76


@dataclass(frozen=True)
class SSTVMode:
    """Complete specification of an SSTV mode.

    All times are in seconds.

    Attributes:
        name: Human-readable mode name (e.g. 'Martin 1').
        vis_code: VIS code that identifies this mode.
        color_model: Color encoding model.
        width: Image width in pixels.
        height: Image height in lines.
        scan_time: Duration of one full-length channel scan.
        half_scan_time: Duration of a half-length chroma scan (Robot modes).
        sync_pulse: Horizontal sync pulse duration.
        sync_porch: Porch (gap) after the sync pulse.
        sep_pulse: Separator pulse between channels.
        sep_porch: Porch after a separator pulse.
        channel_count: Number of color channels sent per line.
        sync_channel: Channel preceded by the line sync pulse, or None.
        channel_time: Separator plus full scan.
        half_channel_time: Separator plus half scan.
        channel_offsets: Start of each channel's pixels relative to the
            beginning of the sync pulse.
        line_time: Total duration of one complete scanline.
        pixel_time: Duration of one pixel in a full-length scan.
        half_pixel_time: Duration of one pixel in a half-length scan.
        window_factor: Spectral analysis window width in pixel times.
        has_start_sync: A sync pulse precedes the first line.
        has_half_scan: Channels after the first are half length.
        has_alt_scan: Chroma alternates between lines and is shared by
            each line pair.
    """
    name: str
    vis_code: int
    color_model: ColorModel
    width: int
    height: int
    scan_time: float
    half_scan_time: float
    sync_pulse: float
    sync_porch: float
    sep_pulse: float
    sep_porch: float
    channel_count: int
    sync_channel: int | None
    channel_time: float
    half_channel_time: float
    channel_offsets: tuple[float, ...]
    line_time: float
    pixel_time: float
    half_pixel_time: float
    window_factor: float
    has_start_sync: bool = False
    has_half_scan: bool = False
    has_alt_scan: bool = False

    def channel_duration(self, channel: int) -> float:
        """On-air time of a channel (separator plus scan)."""
        if self.has_half_scan and channel > 0:
            return self.half_channel_time
        return self.channel_time

    def channel_pixel_time(self, channel: int) -> float:
        """Duration of a single pixel in the given channel."""
        if self.has_half_scan and channel > 0:
            return self.half_pixel_time
        return self.pixel_time

    @property
    def duration(self) -> float:
        """Nominal duration of the whole image transmission."""
        start = self.sync_pulse if self.has_start_sync else 0.0
        return start + self.height * self.line_time


# ---------------------------------------------------------------------------
# Martin family
# ---------------------------------------------------------------------------

def _martin(name: str, vis_code: int, scan_time: float,
            window_factor: float) -> SSTVMode:
    # sync, porch, G, sep, B, sep, R, sep
    sync_pulse = 0.004862
    sync_porch = 0.000572
    sep_pulse = 0.000572
    width = 320
    channel_time = sep_pulse + scan_time
    return SSTVMode(
        name=name,
        vis_code=vis_code,
        color_model=ColorModel.GBR,
        width=width,
        height=256,
        scan_time=scan_time,
        half_scan_time=0.0,
        sync_pulse=sync_pulse,
        sync_porch=sync_porch,
        sep_pulse=sep_pulse,
        sep_porch=0.0,
        channel_count=3,
        sync_channel=0,
        channel_time=channel_time,
        half_channel_time=0.0,
        channel_offsets=tuple(
            sync_pulse + sync_porch + channel_time * i for i in range(3)),
        line_time=sync_pulse + sync_porch + 3 * channel_time,
        pixel_time=scan_time / width,
        half_pixel_time=0.0,
        window_factor=window_factor,
    )


MARTIN_1 = _martin('Martin 1', ModeId.MARTIN_1, 0.146432, 2.34)
MARTIN_2 = _martin('Martin 2', ModeId.MARTIN_2, 0.073216, 4.68)

# ---------------------------------------------------------------------------
# Scottie family
# ---------------------------------------------------------------------------

def _scottie(name: str, vis_code: int, scan_time: float,
             window_factor: float) -> SSTVMode:
    # (start sync) sep, G, sep, B, sync, porch, R
    sync_pulse = 0.009000
    sync_porch = 0.001500
    sep_pulse = 0.001500
    width = 320
    channel_time = sep_pulse + scan_time
    return SSTVMode(
        name=name,
        vis_code=vis_code,
        color_model=ColorModel.GBR,
        width=width,
        height=256,
        scan_time=scan_time,
        half_scan_time=0.0,
        sync_pulse=sync_pulse,
        sync_porch=sync_porch,
        sep_pulse=sep_pulse,
        sep_porch=0.0,
        channel_count=3,
        sync_channel=2,
        channel_time=channel_time,
        half_channel_time=0.0,
        channel_offsets=(
            sync_pulse + sync_porch + channel_time,
            sync_pulse + sync_porch + channel_time * 2,
            sync_pulse + sync_porch,
        ),
        line_time=sync_pulse + 3 * channel_time,
        pixel_time=scan_time / width,
        half_pixel_time=0.0,
        window_factor=window_factor,
        has_start_sync=True,
    )


SCOTTIE_1 = _scottie('Scottie 1', ModeId.SCOTTIE_1, 0.138240, 2.48)
SCOTTIE_2 = _scottie('Scottie 2', ModeId.SCOTTIE_2, 0.088064, 3.82)
SCOTTIE_DX = _scottie('Scottie DX', ModeId.SCOTTIE_DX, 0.345600, 0.98)

# ---------------------------------------------------------------------------
# Robot family
# ---------------------------------------------------------------------------

_ROBOT_SYNC_PULSE = 0.009000
_ROBOT_SYNC_PORCH = 0.003000
_ROBOT_SEP_PULSE = 0.004500
_ROBOT_SEP_PORCH = 0.001500


def _robot_36() -> SSTVMode:
    # sync, porch, Y, sep, porch, Cr|Cb (alternating per line)
    scan_time = 0.088000
    half_scan_time = 0.044000
    width = 320
    channel_time = _ROBOT_SEP_PULSE + scan_time
    channel_offsets = (
        _ROBOT_SYNC_PULSE + _ROBOT_SYNC_PORCH,
        _ROBOT_SYNC_PULSE + _ROBOT_SYNC_PORCH + channel_time + _ROBOT_SEP_PORCH,
    )
    return SSTVMode(
        name='Robot 36',
        vis_code=ModeId.ROBOT_36,
        color_model=ColorModel.YUV,
        width=width,
        height=240,
        scan_time=scan_time,
        half_scan_time=half_scan_time,
        sync_pulse=_ROBOT_SYNC_PULSE,
        sync_porch=_ROBOT_SYNC_PORCH,
        sep_pulse=_ROBOT_SEP_PULSE,
        sep_porch=_ROBOT_SEP_PORCH,
        channel_count=2,
        sync_channel=0,
        channel_time=channel_time,
        half_channel_time=_ROBOT_SEP_PULSE + half_scan_time,
        channel_offsets=channel_offsets,
        line_time=channel_offsets[1] + half_scan_time,
        pixel_time=scan_time / width,
        half_pixel_time=half_scan_time / width,
        window_factor=7.70,
        has_half_scan=True,
        has_alt_scan=True,
    )


def _robot_72() -> SSTVMode:
    # sync, porch, Y, sep, porch, Cr, sep, porch, Cb
    scan_time = 0.138000
    half_scan_time = 0.069000
    width = 320
    channel_time = _ROBOT_SEP_PULSE + scan_time
    half_channel_time = _ROBOT_SEP_PULSE + half_scan_time
    first = _ROBOT_SYNC_PULSE + _ROBOT_SYNC_PORCH
    second = first + channel_time + _ROBOT_SEP_PORCH
    third = second + half_channel_time + _ROBOT_SEP_PORCH
    return SSTVMode(
        name='Robot 72',
        vis_code=ModeId.ROBOT_72,
        color_model=ColorModel.YUV,
        width=width,
        height=240,
        scan_time=scan_time,
        half_scan_time=half_scan_time,
        sync_pulse=_ROBOT_SYNC_PULSE,
        sync_porch=_ROBOT_SYNC_PORCH,
        sep_pulse=_ROBOT_SEP_PULSE,
        sep_porch=_ROBOT_SEP_PORCH,
        channel_count=3,
        sync_channel=0,
        channel_time=channel_time,
        half_channel_time=half_channel_time,
        channel_offsets=(first, second, third),
        line_time=third + half_scan_time,
        pixel_time=scan_time / width,
        half_pixel_time=half_scan_time / width,
        window_factor=4.88,
        has_half_scan=True,
    )


ROBOT_36 = _robot_36()
ROBOT_72 = _robot_72()


# ---------------------------------------------------------------------------
# Mode registry
# ---------------------------------------------------------------------------

ALL_MODES: dict[int, SSTVMode] = {
    m.vis_code: m for m in [
        ROBOT_36, ROBOT_72,
        MARTIN_1, MARTIN_2,
        SCOTTIE_1, SCOTTIE_2, SCOTTIE_DX,
    ]
}

MODE_BY_NAME: dict[str, SSTVMode] = {m.name: m for m in ALL_MODES.values()}


def get_mode(vis_code: int) -> SSTVMode | None:
    """Look up an SSTV mode by its VIS code."""
    return ALL_MODES.get(vis_code)


def get_mode_by_name(name: str) -> SSTVMode | None:
    """Look up an SSTV mode by name."""
    return MODE_BY_NAME.get(name)
