"""sstvdec - recover still images from SSTV audio recordings."""

__version__ = '0.1.0'
