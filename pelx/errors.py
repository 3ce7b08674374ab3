"""Коды результата и иерархия исключений PELX.

Принципы:
- Каждое исключение несёт `code` из `ResultCode`, числовые значения совпадают
  с исходным перечислением формата.
- Ошибка всегда прерывает операцию; ресурс вместе с ошибкой не возвращается.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ResultCode(IntEnum):
    SUCCESS = 0
    IO_ERROR = 1
    MEMORY_ALLOCATION_FAILED = 2
    INVALID_PNG_CHANNELS = 3
    # Зарезервирован: проверяется только при `CodecConfig.strict_palette_count`
    MISMATCHED_PALETTES = 4
    INVALID_DATA_FORMAT = 5
    HEADER_MISMATCHED_MAGIC_NUMBER = 6
    HEADER_INVALID_SIZE = 7
    HEADER_INVALID_PALETTE_COUNT = 8
    HEADER_INVALID_TRUE_CHANNELS = 9
    HEADER_INVALID_PALETTE_CHANNELS = 10


class PelxError(Exception):
    """Базовая ошибка кодека."""

    code: ResultCode = ResultCode.IO_ERROR

    def __init__(self, message: str, code: Optional[ResultCode] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class PelxIOError(PelxError):
    code = ResultCode.IO_ERROR


class TruncatedStreamError(PelxIOError):
    """Полезная нагрузка тега выходит за конец тела."""


class PaletteIndexError(PelxIOError):
    """Индекс палитры >= длины переданной палитры."""

    def __init__(self, index: int, palette_len: int) -> None:
        super().__init__(f"Индекс палитры {index} вне диапазона (палитра из {palette_len} цветов)")
        self.index = index
        self.palette_len = palette_len


class PelxMemoryError(PelxError):
    code = ResultCode.MEMORY_ALLOCATION_FAILED


class FormatError(PelxError):
    code = ResultCode.INVALID_DATA_FORMAT


class HeaderInvalidError(PelxError):
    """Нарушен инвариант заголовка; `code` указывает конкретное поле."""

    def __init__(self, code: ResultCode) -> None:
        super().__init__(_HEADER_MESSAGES.get(code, code.name), code)


class ChannelError(PelxError):
    code = ResultCode.INVALID_PNG_CHANNELS

    def __init__(self, channels: int) -> None:
        super().__init__(f"Недопустимое число выходных каналов: {channels} (ожидается 3 или 4)")
        self.channels = channels


class PaletteCountMismatchError(PelxError):
    code = ResultCode.MISMATCHED_PALETTES

    def __init__(self, declared: int, supplied: int) -> None:
        super().__init__(f"В заголовке объявлено палитр: {declared}, передано: {supplied}")
        self.declared = declared
        self.supplied = supplied


_HEADER_MESSAGES = {
    ResultCode.HEADER_MISMATCHED_MAGIC_NUMBER: "Сигнатура заголовка не равна 'PELX\\0'",
    ResultCode.HEADER_INVALID_SIZE: "Ширина или высота изображения равна 0",
    ResultCode.HEADER_INVALID_TRUE_CHANNELS: "Число каналов true-color должно быть 3 или 4",
    ResultCode.HEADER_INVALID_PALETTE_CHANNELS: "Число каналов палитры должно быть 3 или 4",
    ResultCode.HEADER_INVALID_PALETTE_COUNT: "Число палитр в заголовке равно 0",
}
