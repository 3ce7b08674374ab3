"""Настройки кодека PELX."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class CodecConfig:
    """Неизменяемые настройки декодирования.

    Fields:
        strict_palette_count: Сверять длину переданной палитры с `palette_count` заголовка.
        legacy_body_size: Обрезать тело до 16-битного размера, как в исходном формате.
        default_output_channels: Число выходных каналов, если оно не указано явно.
    """
    strict_palette_count: bool = False
    legacy_body_size: bool = False
    default_output_channels: int = 4

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CodecConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Неизвестные параметры конфигурации: {', '.join(unknown)}")
        return cls(**dict(values))


DEFAULT_CONFIG = CodecConfig()
