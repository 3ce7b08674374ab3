"""Развёртка потока тегов PELX в плоский буфер RGB/RGBA.

Принципы:
- Один проход слева направо; размер выхода известен заранее.
- Альфа согласуется по числу каналов источника и выхода (3 <-> 4).
- При ошибке буфер не возвращается: вызывающему освобождать нечего.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from pelx.config import DEFAULT_CONFIG, CodecConfig
from pelx.errors import (
    ChannelError,
    FormatError,
    PaletteCountMismatchError,
    PaletteIndexError,
    PelxMemoryError,
    TruncatedStreamError,
)
from pelx.models.container_model import PelxContainer
from pelx.models.header_model import (
    HEADER_SIZE,
    MAGIC,
    SUPPORTED_CHANNELS,
    TAG_PALETTE,
    TAG_TRUE,
    TAG_VOID,
    PelxHeader,
)
from pelx.models.palette_model import PaletteEntry
from pelx.models.pixel_buffer import PixelBuffer
from pelx.services.validation_service import ValidationService

logger = logging.getLogger(__name__)

OPAQUE = 0xFF


def check_output_channels(channels: int) -> None:
    if channels not in SUPPORTED_CHANNELS:
        raise ChannelError(channels)


class PixelService:
    def __init__(
        self,
        config: CodecConfig = DEFAULT_CONFIG,
        log: Optional[logging.Logger] = None,
        validator: Optional[ValidationService] = None,
    ) -> None:
        self._config = config
        self._log = log or logger
        self._validator = validator or ValidationService()

    def expand(
        self,
        container: PelxContainer,
        palette: Sequence[PaletteEntry],
        output_channels: int,
    ) -> PixelBuffer:
        """Разворачивает тело контейнера с заданной палитрой.

        Raises:
            ChannelError: если `output_channels` не 3 и не 4.
            HeaderInvalidError: если заголовок не проходит проверку.
            PaletteCountMismatchError: только при `strict_palette_count`.
            FormatError, PelxIOError, PelxMemoryError: см. `expand_stream`.
        """
        check_output_channels(output_channels)
        header = container.header
        self._validator.validate(header)

        if self._config.strict_palette_count and len(palette) != header.palette_count:
            raise PaletteCountMismatchError(header.palette_count, len(palette))

        return self.expand_stream(
            container.body,
            width=header.width,
            height=header.height,
            true_channels=header.true_channel_count,
            palette_channels=header.palette_channel_count,
            palette=palette,
            output_channels=output_channels,
        )

    def expand_stream(
        self,
        body: bytes,
        width: int,
        height: int,
        true_channels: int,
        palette_channels: int,
        palette: Sequence[PaletteEntry],
        output_channels: int,
    ) -> PixelBuffer:
        """Разворачивает поток тегов в буфер ровно `width * height * output_channels` байт.

        Поток обязан заполнить буфер точно: недобор и лишние байты отклоняются.

        Raises:
            ChannelError: если `output_channels` не 3 и не 4.
            TruncatedStreamError: полезная нагрузка тега обрезана.
            PaletteIndexError: индекс >= `len(palette)`.
            FormatError: неизвестный тег или размер потока не совпал с ожидаемым.
            PelxMemoryError: не удалось выделить выходной буфер.
        """
        check_output_channels(output_channels)
        expected = width * height * output_channels
        try:
            out = bytearray(expected)
        except MemoryError as exc:
            raise PelxMemoryError(f"Не удалось выделить {expected} байт под пиксели") from exc

        palette_len = len(palette)
        src_size = len(body)
        src_pos = 0
        out_pos = 0
        with_alpha = output_channels == 4

        while out_pos < expected and src_pos < src_size:
            tag = body[src_pos]
            src_pos += 1

            if tag == TAG_VOID:
                # bytearray уже заполнен нулями
                out_pos += output_channels

            elif tag == TAG_TRUE:
                if src_pos + true_channels > src_size:
                    raise TruncatedStreamError(
                        f"Обрезанный true-color пиксель на смещении {src_pos - 1}"
                    )
                out[out_pos:out_pos + 3] = body[src_pos:src_pos + 3]
                out_pos += 3
                if with_alpha:
                    out[out_pos] = body[src_pos + 3] if true_channels == 4 else OPAQUE
                    out_pos += 1
                # 4-й байт источника потребляется и при RGB-выходе
                src_pos += true_channels

            elif tag == TAG_PALETTE:
                if src_pos + 1 > src_size:
                    raise TruncatedStreamError(
                        f"Обрезанная ссылка на палитру на смещении {src_pos - 1}"
                    )
                index = body[src_pos]
                src_pos += 1
                if index >= palette_len:
                    raise PaletteIndexError(index, palette_len)
                entry = palette[index]
                out[out_pos] = entry.r
                out[out_pos + 1] = entry.g
                out[out_pos + 2] = entry.b
                out_pos += 3
                if with_alpha:
                    out[out_pos] = entry.a if palette_channels == 4 else OPAQUE
                    out_pos += 1

            else:
                raise FormatError(f"Неизвестный тег 0x{tag:02X} на смещении {src_pos - 1}")

        if out_pos != expected or src_pos != src_size:
            self._log.warning(
                "Mismatch: expected %d bytes, but wrote %d (consumed %d of %d input bytes)",
                expected,
                out_pos,
                src_pos,
                src_size,
            )
            raise FormatError(
                f"Размер потока не совпал: записано {out_pos} из {expected} байт, "
                f"прочитано {src_pos} из {src_size}"
            )

        data = np.frombuffer(out, dtype=np.uint8)
        return PixelBuffer(data=data, width=width, height=height, channels=output_channels)


class PixelStreamBuilder:
    """Собирает тело PELX из тегов.

    Пример:
        body = PixelStreamBuilder(true_channels=4).palette(0).true(0x11, 0x22, 0x33, 0x44).build()
    """

    def __init__(self, true_channels: int = 4) -> None:
        if true_channels not in SUPPORTED_CHANNELS:
            raise ValueError(f"Число каналов true-color должно быть 3 или 4: {true_channels}")
        self._true_channels = true_channels
        self._chunks: List[bytes] = []
        self._pixels = 0

    @property
    def pixel_count(self) -> int:
        return self._pixels

    def void(self, count: int = 1) -> "PixelStreamBuilder":
        self._chunks.append(bytes([TAG_VOID]) * count)
        self._pixels += count
        return self

    def true(self, r: int, g: int, b: int, a: int = OPAQUE) -> "PixelStreamBuilder":
        values = (r, g, b, a)[: self._true_channels]
        self._chunks.append(bytes([TAG_TRUE, *values]))
        self._pixels += 1
        return self

    def palette(self, index: int) -> "PixelStreamBuilder":
        self._chunks.append(bytes([TAG_PALETTE, index]))
        self._pixels += 1
        return self

    def build(self) -> bytes:
        return b"".join(self._chunks)


def new_container(
    width: int,
    height: int,
    body: bytes,
    palette_count: int = 1,
    true_channels: int = 4,
    palette_channels: int = 4,
) -> PelxContainer:
    """Контейнер со стандартным 26-байтным заголовком."""
    header = PelxHeader(
        magic=MAGIC,
        header_size=HEADER_SIZE,
        palette_offset=HEADER_SIZE,
        width=width,
        height=height,
        palette_channel_count=palette_channels,
        true_channel_count=true_channels,
        palette_count=palette_count,
    )
    return PelxContainer(header=header, body=bytes(body))
