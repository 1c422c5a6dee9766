"""SSTV (Slow-Scan Television) decoder package.

Pure Python SSTV decoder using FFT peak estimation for calibration header
search, VIS code decoding and per-line sync tracked image sampling.
Supports Robot 36/72, Martin 1/2 and Scottie 1/2/DX, and writes the result
as PNG with a built-in encoder.
"""

from .audio import SampleBuffer, load_wav
from .compositor import composite, ycbcr_to_rgb
from .crc import crc32
from .decoder import SSTVDecoder, decode_file, save_png
from .errors import (
    AudioLoadError,
    HeaderNotFoundError,
    InvalidParityError,
    SSTVError,
    UnsupportedModeError,
)
from .image_decoder import DecodeResult, DecodeStatus, SSTVImageDecoder
from .modes import ALL_MODES, ColorModel, ModeId, SSTVMode, get_mode
from .png import encode_png, write_png

__all__ = [
    'ALL_MODES',
    'AudioLoadError',
    'ColorModel',
    'DecodeResult',
    'DecodeStatus',
    'HeaderNotFoundError',
    'InvalidParityError',
    'ModeId',
    'SSTVDecoder',
    'SSTVError',
    'SSTVImageDecoder',
    'SSTVMode',
    'SampleBuffer',
    'UnsupportedModeError',
    'composite',
    'crc32',
    'decode_file',
    'encode_png',
    'get_mode',
    'load_wav',
    'save_png',
    'write_png',
    'ycbcr_to_rgb',
]
