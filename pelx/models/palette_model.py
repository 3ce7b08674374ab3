"""Цвета и палитры, передаваемые декодеру."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Sequence, Union

ColorValue = Union[str, Sequence[int]]


class PaletteEntry(NamedTuple):
    """Цвет палитры; альфа используется только при 4 каналах палитры."""
    r: int
    g: int
    b: int
    a: int = 0xFF

    @classmethod
    def parse(cls, color: ColorValue) -> "PaletteEntry":
        """Разбирает `#RRGGBB`, `#RRGGBBAA` или `[r, g, b(, a)]`.

        Raises:
            ValueError: если формат цвета неизвестен или компонент вне 0..255.
        """
        if isinstance(color, str):
            text = color.strip().lstrip("#")
            if len(text) not in (6, 8):
                raise ValueError(f"Ожидается #RRGGBB или #RRGGBBAA: {color!r}")
            try:
                values = list(bytes.fromhex(text))
            except ValueError as exc:
                raise ValueError(f"Некорректный HEX цвет: {color!r}") from exc
            # fromhex пропускает пробелы между парами
            if len(values) != len(text) // 2:
                raise ValueError(f"Некорректный HEX цвет: {color!r}")
        else:
            values = [int(v) for v in color]
            if len(values) not in (3, 4):
                raise ValueError(f"Цвет должен содержать 3 или 4 компонента: {color!r}")
            if any(not 0 <= v <= 255 for v in values):
                raise ValueError(f"Компоненты цвета должны быть в диапазоне 0..255: {color!r}")
        return cls(*values)

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"


@dataclass(frozen=True)
class Palette:
    """Именованный набор цветов."""
    name: str
    entries: List[PaletteEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PaletteEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> PaletteEntry:
        return self.entries[index]
