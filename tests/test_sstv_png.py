"""Unit tests for the CRC-32 and PNG encoder."""

import io
import struct
import zlib

import numpy as np
import pytest

from sstvdec.sstv.crc import CRC32_TABLE, crc32
from sstvdec.sstv.png import PNG_SIGNATURE, encode_png, write_chunk, write_png


def parse_chunks(data):
    """Split PNG bytes after the signature into (tag, payload, crc) tuples."""
    chunks = []
    pos = len(PNG_SIGNATURE)
    while pos < len(data):
        (length,) = struct.unpack('>I', data[pos:pos + 4])
        tag = data[pos + 4:pos + 8]
        payload = data[pos + 8:pos + 8 + length]
        (crc,) = struct.unpack('>I', data[pos + 8 + length:pos + 12 + length])
        chunks.append((tag, payload, crc))
        pos += 12 + length
    return chunks


@pytest.fixture
def gradient():
    """Small RGB image with distinct values in every channel."""
    height, width = 7, 11
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = np.arange(width)[None, :] * 20
    rgb[..., 1] = np.arange(height)[:, None] * 30
    rgb[..., 2] = 200
    return rgb


class TestCrc32:
    """Tests for CRC-32."""

    def test_check_value(self):
        """Standard check value for '123456789'."""
        assert crc32(b'123456789') == 0xCBF43926

    def test_empty(self):
        """No data gives zero."""
        assert crc32(b'') == 0

    def test_iend(self):
        """The CRC of a bare IEND chunk is the well known constant."""
        assert crc32(b'IEND') == 0xAE426082

    @pytest.mark.parametrize('data', [b'a', b'IHDR\x00\x00', bytes(range(256)) * 3])
    def test_matches_zlib(self, data):
        """Agrees with zlib's implementation."""
        assert crc32(data) == zlib.crc32(data)

    def test_table(self):
        """The lookup table has one 32-bit entry per byte value."""
        assert len(CRC32_TABLE) == 256
        assert CRC32_TABLE[0] == 0
        assert CRC32_TABLE[1] == 0x77073096
        assert all(0 <= v <= 0xFFFFFFFF for v in CRC32_TABLE)


class TestWriteChunk:
    """Tests for chunk serialisation."""

    def test_layout(self):
        """Length, tag, payload, CRC over tag and payload."""
        chunk = write_chunk(b'tEXt', b'hello')
        assert chunk[:4] == b'\x00\x00\x00\x05'
        assert chunk[4:8] == b'tEXt'
        assert chunk[8:13] == b'hello'
        assert struct.unpack('>I', chunk[13:])[0] == crc32(b'tEXthello')

    def test_bad_tag(self):
        """Tags are exactly four bytes."""
        with pytest.raises(ValueError):
            write_chunk(b'IDA', b'')


class TestEncodePng:
    """Tests for PNG encoding."""

    def test_structure(self, gradient):
        """Signature followed by IHDR, IDAT and IEND with valid CRCs."""
        data = encode_png(gradient)
        assert data.startswith(PNG_SIGNATURE)

        chunks = parse_chunks(data)
        assert [tag for tag, _, _ in chunks] == [b'IHDR', b'IDAT', b'IEND']
        for tag, payload, crc in chunks:
            assert crc == crc32(tag + payload)
        assert chunks[-1] == (b'IEND', b'', 0xAE426082)

    def test_header(self, gradient):
        """IHDR carries size, 8-bit depth and truecolour type."""
        _, ihdr, _ = parse_chunks(encode_png(gradient))[0]
        width, height, depth, color_type, comp, filt, interlace = struct.unpack(
            '>IIBBBBB', ihdr)
        assert (width, height) == (11, 7)
        assert (depth, color_type) == (8, 2)
        assert (comp, filt, interlace) == (0, 0, 0)

    def test_pixel_data(self, gradient):
        """IDAT inflates to unfiltered scanlines of the input pixels."""
        _, idat, _ = parse_chunks(encode_png(gradient))[1]
        raw = np.frombuffer(zlib.decompress(idat), dtype=np.uint8).reshape(7, 1 + 11 * 3)
        assert not raw[:, 0].any()
        assert np.array_equal(raw[:, 1:].reshape(7, 11, 3), gradient)

    def test_readable_by_pillow(self, gradient):
        """Pillow reads back the same pixels."""
        Image = pytest.importorskip('PIL.Image')
        image = Image.open(io.BytesIO(encode_png(gradient)))
        assert image.mode == 'RGB'
        assert image.size == (11, 7)
        assert np.array_equal(np.asarray(image), gradient)

    def test_bad_shape(self):
        """Only (height, width, 3) arrays are accepted."""
        with pytest.raises(ValueError):
            encode_png(np.zeros((4, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            encode_png(np.zeros((4, 4, 4), dtype=np.uint8))


def test_write_png(tmp_path, gradient):
    """write_png stores the encoded bytes and reports their length."""
    path = tmp_path / 'out.png'
    written = write_png(path, gradient)
    assert path.read_bytes() == encode_png(gradient)
    assert written == path.stat().st_size
