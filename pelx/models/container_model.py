"""Контейнер PELX в памяти: заголовок и сырое тело."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pelx.models.header_model import PelxHeader


@dataclass
class PelxContainer:
    """Заголовок плюс неразобранный поток пикселей.

    Контейнер владеет телом. `release()` освобождает тело и помечает контейнер
    освобождённым; повторный вызов ничего не делает. Поддерживает `with`.

    Fields:
        header: Заголовок.
        body: Сырые байты потока тегов.
        path: Файл, из которого прочитан контейнер, если есть.
    """
    header: PelxHeader
    body: bytes = b""
    path: Optional[Path] = None
    released: bool = False

    @property
    def body_size(self) -> int:
        return len(self.body)

    def release(self) -> None:
        if self.released:
            return
        self.body = b""
        self.released = True

    def __enter__(self) -> "PelxContainer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
