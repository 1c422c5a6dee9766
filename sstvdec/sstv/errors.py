"""Exceptions raised by the SSTV decoding pipeline.

Every fatal condition derives from :class:`SSTVError`. Running out of audio
part way through an image is not an error; see ``DecodeStatus.TRUNCATED``.
"""

from __future__ import annotations


class SSTVError(Exception):
    """Base class for fatal decoding failures."""


class AudioLoadError(SSTVError):
    """The input audio could not be opened or decoded."""


class HeaderNotFoundError(SSTVError):
    """No calibration header was found anywhere in the audio."""

    def __init__(self, message: str = "Couldn't find SSTV header in the given audio file"):
        super().__init__(message)


class InvalidParityError(SSTVError):
    """The VIS code failed its even parity check."""

    def __init__(self, bits: list[int] | None = None):
        self.bits = list(bits) if bits is not None else []
        super().__init__("Error decoding VIS header (invalid parity bit)")


class UnsupportedModeError(SSTVError):
    """The VIS code is valid but does not name a supported mode."""

    def __init__(self, vis_code: int):
        self.vis_code = vis_code
        super().__init__(f"SSTV mode is unsupported (VIS: {vis_code})")
