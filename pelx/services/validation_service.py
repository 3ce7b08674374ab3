"""Проверка инвариантов заголовка PELX.

Принципы:
- Чистый предикат: без ввода-вывода и побочных эффектов.
- Возвращается только первое нарушение, в фиксированном порядке проверок.
"""
from __future__ import annotations

from typing import Optional

from pelx.errors import HeaderInvalidError, ResultCode
from pelx.models.header_model import MAGIC, SUPPORTED_CHANNELS, PelxHeader


class ValidationService:
    def find_violation(self, header: PelxHeader) -> Optional[ResultCode]:
        """Возвращает код первого нарушенного инварианта или `None`.

        Порядок: сигнатура, размеры, каналы true-color, каналы палитры, число палитр.
        """
        if header.magic != MAGIC:
            return ResultCode.HEADER_MISMATCHED_MAGIC_NUMBER
        if header.width == 0 or header.height == 0:
            return ResultCode.HEADER_INVALID_SIZE
        if header.true_channel_count not in SUPPORTED_CHANNELS:
            return ResultCode.HEADER_INVALID_TRUE_CHANNELS
        if header.palette_channel_count not in SUPPORTED_CHANNELS:
            return ResultCode.HEADER_INVALID_PALETTE_CHANNELS
        if header.palette_count == 0:
            return ResultCode.HEADER_INVALID_PALETTE_COUNT
        return None

    def validate(self, header: PelxHeader) -> None:
        """Raises:
            HeaderInvalidError: с кодом первого нарушения.
        """
        code = self.find_violation(header)
        if code is not None:
            raise HeaderInvalidError(code)


_default = ValidationService()


def find_header_violation(header: PelxHeader) -> Optional[ResultCode]:
    return _default.find_violation(header)


def validate_header(header: PelxHeader) -> None:
    _default.validate(header)
