"""Заголовок контейнера PELX.

Принципы:
- SRP: только структура данных и её побайтовая раскладка, без проверок.
- Неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Dict

MAGIC = b"PELX\x00"
HEADER_SIZE = 26

# magic(5) header_size(4) palette_offset(4) width(2) height(2)
# palette_channels(1) true_channels(1) palette_count(2) reserved(5)
HEADER_STRUCT = struct.Struct(">5sIIHHBBH5s")

TAG_VOID = 0x00
TAG_TRUE = 0x01
TAG_PALETTE = 0x02

SUPPORTED_CHANNELS = (3, 4)


@dataclass(frozen=True)
class PelxHeader:
    """Неизменяемый заголовок фиксированной длины (26 байт).

    Fields:
        magic: Сигнатура формата, `PELX\\0`.
        header_size: Смещение начала тела.
        palette_offset: Смещение блока имён палитр (не используется).
        width: Ширина, px.
        height: Высота, px.
        palette_channel_count: Каналы цвета палитры (3 или 4).
        true_channel_count: Каналы true-color пикселя (3 или 4).
        palette_count: Число палитр.
        reserved: 5 зарезервированных байт.
    """
    magic: bytes = MAGIC
    header_size: int = HEADER_SIZE
    palette_offset: int = HEADER_SIZE
    width: int = 0
    height: int = 0
    palette_channel_count: int = 4
    true_channel_count: int = 4
    palette_count: int = 1
    reserved: bytes = field(default=b"\x00" * 5)

    @classmethod
    def unpack(cls, data: bytes) -> "PelxHeader":
        (
            magic,
            header_size,
            palette_offset,
            width,
            height,
            palette_channels,
            true_channels,
            palette_count,
            reserved,
        ) = HEADER_STRUCT.unpack(data)
        return cls(
            magic=magic,
            header_size=header_size,
            palette_offset=palette_offset,
            width=width,
            height=height,
            palette_channel_count=palette_channels,
            true_channel_count=true_channels,
            palette_count=palette_count,
            reserved=reserved,
        )

    def pack(self) -> bytes:
        """Упаковывает поля в 26 байт big-endian. `struct.error`, если поле не помещается."""
        return HEADER_STRUCT.pack(
            self.magic,
            self.header_size,
            self.palette_offset,
            self.width,
            self.height,
            self.palette_channel_count,
            self.true_channel_count,
            self.palette_count,
            self.reserved,
        )

    def describe(self) -> Dict[str, object]:
        return {
            "Magic": self.magic.rstrip(b"\x00").decode("ascii", errors="replace"),
            "Header Size": self.header_size,
            "Palette Offset": self.palette_offset,
            "Image Dimensions": f"{self.width} × {self.height}",
            "Palette Channels": self.palette_channel_count,
            "True Channels": self.true_channel_count,
            "Palette Count": self.palette_count,
        }
