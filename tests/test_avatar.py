import struct
import zlib

import pytest

from ctf01d.avatar import generate_avatar, generate_gradient, generate_hash, render


def _decode_png(data):
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    pos = 8
    header = None
    idat = b""
    while pos < len(data):
        (length,) = struct.unpack(">I", data[pos:pos + 4])
        tag = data[pos + 4:pos + 8]
        body = data[pos + 8:pos + 8 + length]
        (crc,) = struct.unpack(">I", data[pos + 8 + length:pos + 12 + length])
        assert crc == zlib.crc32(tag + body) & 0xFFFFFFFF
        if tag == b"IHDR":
            header = struct.unpack(">IIBBBBB", body)
        elif tag == b"IDAT":
            idat += body
        pos += 12 + length
    width, height, depth, color_type = header[:4]
    assert depth == 8
    bpp = 4 if color_type == 6 else 3
    raw = zlib.decompress(idat)
    stride = 1 + width * bpp
    pixels = {}
    for y in range(height):
        row = raw[y * stride:(y + 1) * stride]
        assert row[0] == 0
        for x in range(width):
            px = tuple(row[1 + x * bpp:1 + (x + 1) * bpp])
            if bpp == 3:
                px = px + (255,)
            pixels[(x, y)] = px
    return width, height, pixels


def test_generate_hash_of_empty_string():
    assert generate_hash("") == "d41d8cd98f00b204e9800998ecf8427e"


def test_generate_hash_is_hex_of_fixed_length():
    digest = generate_hash("player")
    assert len(digest) == 32
    assert set(digest) <= set("0123456789abcdef")


def test_render_is_deterministic_and_varied():
    results = [render("neo", x, y) for x in range(0, 64, 8) for y in range(0, 64, 8)]
    assert results == [render("neo", x, y) for x in range(0, 64, 8) for y in range(0, 64, 8)]
    assert True in results and False in results


def test_gradient_starts_from_hash_colour_and_steps_by_twenty():
    gradient = generate_gradient("trinity", 6)
    assert len(gradient) == 6
    digest = generate_hash("trinity")
    base = tuple(int(digest[i:i + 2], 16) % 255 for i in (0, 2, 4))
    assert gradient[0][:3] == base
    for i, colour in enumerate(gradient):
        assert colour[3] == 255
        for c in range(3):
            assert colour[c] == (gradient[0][c] + 20 * i) % 255


def test_gradient_of_zero_steps_is_empty():
    assert generate_gradient("morpheus", 0) == []


def test_avatar_dimensions_and_symmetry():
    width, height, pixels = _decode_png(generate_avatar("neo", 64, 48, 8, 5))
    assert (width, height) == (64, 48)
    for y in range(height):
        for x in range(width // 2):
            assert pixels[(x, y)] == pixels[(width - 1 - x, y)]


def test_avatar_blocks_follow_render_and_gradient():
    username = "cipher"
    gradient = set(generate_gradient(username, 4))
    _, _, pixels = _decode_png(generate_avatar(username, 64, 64, 8, 4))
    for x in range(0, 32, 8):
        for y in range(0, 64, 8):
            painted = pixels[(x, y)][3] == 255
            assert painted == render(username, x, y)
            if painted:
                assert pixels[(x, y)] in gradient
            else:
                assert pixels[(x, y)] == (0, 0, 0, 0)


def test_avatar_is_deterministic():
    first = generate_avatar("oracle", 32, 32, 4, 3)
    assert first == generate_avatar("oracle", 32, 32, 4, 3)
    width, height, pixels = _decode_png(first)
    assert (width, height) == (32, 32)
    _, _, other = _decode_png(generate_avatar("dozer", 32, 32, 4, 3))
    assert pixels != other


@pytest.mark.parametrize(
    "args",
    [("neo", 0, 10, 2, 3), ("neo", 10, -1, 2, 3), ("neo", 10, 10, 0, 3), ("neo", 10, 10, 2, 0)],
)
def test_avatar_rejects_bad_arguments(args):
    with pytest.raises(ValueError):
        generate_avatar(*args)