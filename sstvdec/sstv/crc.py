"""CRC-32 as used by PNG chunks (reflected polynomial 0xEDB88320)."""

from __future__ import annotations

CRC32_POLYNOMIAL = 0xEDB88320


def _make_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = CRC32_POLYNOMIAL ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return tuple(table)


CRC32_TABLE = _make_table()


def crc32(data: bytes) -> int:
    """Compute the CRC-32 of ``data``.

    Initial value and final XOR are both 0xFFFFFFFF.

    >>> hex(crc32(b'123456789'))
    '0xcbf43926'
    """
    crc = 0xFFFFFFFF
    table = CRC32_TABLE
    for octet in data:
        crc = (crc >> 8) ^ table[(crc ^ octet) & 0xFF]
    return crc ^ 0xFFFFFFFF
