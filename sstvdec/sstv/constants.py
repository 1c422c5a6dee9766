"""SSTV protocol constants.

Calibration header layout, VIS bit timing, tone frequencies and detection
thresholds shared by the header locator and the image decoder.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# SSTV tone frequencies (Hz)
# ---------------------------------------------------------------------------
FREQ_VIS_BIT_1 = 1100     # VIS logic 1
FREQ_SYNC = 1200           # Horizontal sync pulse
FREQ_VIS_BIT_0 = 1300      # VIS logic 0
FREQ_BREAK = FREQ_SYNC     # Break tone in VIS header
FREQ_LEADER = 1900         # Leader / calibration tone
FREQ_BLACK = 1500          # Black level
FREQ_WHITE = 2300          # White level

# Pixel luminance mapping range
FREQ_PIXEL_LOW = FREQ_BLACK    # 0 luminance
FREQ_PIXEL_HIGH = FREQ_WHITE   # 255 luminance

# Frequency tolerance for header tone detection (Hz)
FREQ_TOLERANCE = 50

# VIS bits at or below this frequency read as logic 1
VIS_BIT_THRESHOLD = (FREQ_VIS_BIT_1 + FREQ_VIS_BIT_0) // 2

# Anything above this is no longer the sync tone
SYNC_THRESHOLD = (FREQ_SYNC + FREQ_BLACK) // 2

# ---------------------------------------------------------------------------
# Calibration header timing (seconds, relative to the search origin)
# ---------------------------------------------------------------------------
BREAK_OFFSET = 0.300
LEADER_OFFSET = 0.010 + BREAK_OFFSET
VIS_START_OFFSET = 0.300 + LEADER_OFFSET

# Leader + break + leader + VIS start bit
HEADER_SIZE = 0.030 + VIS_START_OFFSET

# Analysis window for each header tone check
HEADER_WINDOW = 0.010

# Search origin hop
HEADER_HOP = 0.002

# (offset, expected frequency) for each calibration tone
HEADER_TONES: tuple[tuple[float, int], ...] = (
    (0.0, FREQ_LEADER),
    (BREAK_OFFSET, FREQ_BREAK),
    (LEADER_OFFSET, FREQ_LEADER),
    (VIS_START_OFFSET, FREQ_BREAK),
)

# ---------------------------------------------------------------------------
# VIS timing (seconds)
# ---------------------------------------------------------------------------
VIS_BIT_DURATION = 0.030   # Each VIS data bit (30 ms)
VIS_BIT_COUNT = 8          # 7 data bits + even parity

# Data bits, parity and stop bit follow the header
VIS_TOTAL_BITS = 9

# Sync search window relative to the nominal sync pulse
SYNC_WINDOW_FACTOR = 1.4
