"""Deterministic identicon-style avatars rendered as PNG images."""

from __future__ import annotations

import hashlib
import struct
import zlib

Color = tuple[int, int, int, int]

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_TRANSPARENT: Color = (0, 0, 0, 0)


def generate_hash(text: str) -> str:
    """Return the hex MD5 digest of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def render(username: str, x: int, y: int) -> bool:
    """Decide whether the block at ``(x, y)`` is painted for ``username``."""
    digest = generate_hash(f"{username}{x}{y}")
    return int(digest[:8], 16) % 4 > 1


def generate_gradient(username: str, steps: int) -> list[Color]:
    """Build ``steps`` opaque colours starting from a colour derived from the name."""
    if steps < 0:
        raise ValueError("steps must not be negative")
    digest = generate_hash(username)
    base = tuple(int(digest[i:i + 2], 16) for i in (0, 2, 4))
    return [
        tuple((channel + i * 20) % 255 for channel in base) + (255,)
        for i in range(steps)
    ]


class _Canvas:
    """A fixed-size RGBA pixel buffer, initially fully transparent."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height * 4)

    def set(self, x: int, y: int, color: Color) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            offset = (y * self.width + x) * 4
            self._pixels[offset:offset + 4] = bytes(color)

    def is_opaque(self) -> bool:
        return all(alpha == 255 for alpha in self._pixels[3::4])

    def rows(self, with_alpha: bool):
        stride = self.width * 4
        for y in range(self.height):
            row = self._pixels[y * stride:(y + 1) * stride]
            if with_alpha:
                yield bytes(row)
            else:
                yield bytes(b for i, b in enumerate(row) if i % 4 != 3)

    def to_png(self) -> bytes:
        with_alpha = not self.is_opaque()
        color_type = 6 if with_alpha else 2
        header = struct.pack(">IIBBBBB", self.width, self.height, 8, color_type, 0, 0, 0)
        raw = b"".join(b"\x00" + row for row in self.rows(with_alpha))
        return b"".join(
            (
                _PNG_SIGNATURE,
                _chunk(b"IHDR", header),
                _chunk(b"IDAT", zlib.compress(raw)),
                _chunk(b"IEND", b""),
            )
        )


def _chunk(tag: bytes, data: bytes) -> bytes:
    return (
        struct.pack(">I", len(data))
        + tag
        + data
        + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)
    )


def generate_avatar(username: str, x_max: int, y_max: int, block_size: int, steps: int) -> bytes:
    """Render a horizontally mirrored block avatar for ``username`` as PNG bytes."""
    if x_max <= 0 or y_max <= 0:
        raise ValueError("image size must be positive")
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    gradient = generate_gradient(username, steps)
    if not gradient:
        raise ValueError("steps must be positive")

    canvas = _Canvas(x_max, y_max)
    for x in range(0, x_max // 2, block_size):
        for y in range(0, y_max, block_size):
            color = gradient[(x + y) // block_size % len(gradient)]
            if not render(username, x, y):
                continue
            for i in range(block_size):
                for j in range(block_size):
                    canvas.set(x + i, y + j, color)
                    canvas.set(x_max - x - i - 1, y + j, color)
    return canvas.to_png()