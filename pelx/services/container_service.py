"""Чтение и запись контейнера PELX (заголовок + сырое тело).

Принципы:
- SRP: сервис знает только побайтовую раскладку файла; поток тегов не разбирает.
- Запись не перепроверяет заголовок: проверка нужна тем, кто рендерит итоговое изображение.
"""
from __future__ import annotations

import logging
import os
import struct
from pathlib import Path
from typing import Optional

from pelx.config import DEFAULT_CONFIG, CodecConfig
from pelx.errors import FormatError, PelxIOError, PelxMemoryError
from pelx.models.container_model import PelxContainer
from pelx.models.header_model import HEADER_SIZE, PelxHeader

logger = logging.getLogger(__name__)

# Ширина поля размера тела в исходном формате
LEGACY_BODY_SIZE_MASK = 0xFFFF
FIXED_FIELD_SIZE = 5


class ContainerService:
    def __init__(self, config: CodecConfig = DEFAULT_CONFIG, log: Optional[logging.Logger] = None) -> None:
        self._config = config
        self._log = log or logger

    def decode(self, file_path: str | Path) -> PelxContainer:
        """Читает контейнер с диска.

        Args:
            file_path: Путь до файла `.pelx`.

        Returns:
            `PelxContainer` с разобранным заголовком и сырым телом от `header_size` до конца файла.

        Raises:
            PelxIOError: если файл не открывается или чтение/позиционирование падает.
            FormatError: при коротком заголовке, `header_size` за концом файла или коротком теле.
            PelxMemoryError: если не удалось выделить память под тело.
        """
        path = Path(file_path)
        try:
            fp = open(path, "rb")
        except OSError as exc:
            raise PelxIOError(f"Не удалось открыть файл: {path}") from exc

        with fp:
            try:
                raw_header = fp.read(HEADER_SIZE)
                if len(raw_header) != HEADER_SIZE:
                    raise FormatError(f"Неполный заголовок PELX: {len(raw_header)} из {HEADER_SIZE} байт")
                header = PelxHeader.unpack(raw_header)

                file_size = fp.seek(0, os.SEEK_END)
                if header.header_size > file_size:
                    raise FormatError(
                        f"Смещение тела {header.header_size} за концом файла ({file_size} байт)"
                    )
                body_size = file_size - header.header_size

                fp.seek(header.header_size, os.SEEK_SET)
                try:
                    body = fp.read(body_size)
                except MemoryError as exc:
                    raise PelxMemoryError(f"Не удалось выделить {body_size} байт под тело") from exc
            except OSError as exc:
                raise PelxIOError(f"Ошибка чтения файла: {path}") from exc

        if len(body) != body_size:
            raise FormatError(f"Короткое тело: прочитано {len(body)} из {body_size} байт")

        if self._config.legacy_body_size:
            legacy_size = body_size & LEGACY_BODY_SIZE_MASK
            if legacy_size != body_size:
                self._log.warning(
                    "Тело %s обрезано до 16-битного размера: %d -> %d байт", path, body_size, legacy_size
                )
                body = body[:legacy_size]

        self._log.debug("Прочитан %s: %dx%d, тело %d байт", path, header.width, header.height, len(body))
        return PelxContainer(header=header, body=body, path=path)

    def encode(self, file_path: str | Path, container: PelxContainer) -> None:
        """Пишет 26 байт заголовка и тело как есть.

        Raises:
            FormatError: если поле заголовка не помещается в свою ширину
                или `magic`/`reserved` не ровно 5 байт.
            PelxIOError: если файл не открывается или запись неполная.
        """
        path = Path(file_path)
        try:
            raw_header = container.header.pack()
        except struct.error as exc:
            raise FormatError(f"Поля заголовка не помещаются в формат: {exc}") from exc
        for name in ("magic", "reserved"):
            value = getattr(container.header, name)
            if len(value) != FIXED_FIELD_SIZE:
                raise FormatError(f"Поле {name} должно занимать {FIXED_FIELD_SIZE} байт, получено {len(value)}")

        try:
            with open(path, "wb") as fp:
                for chunk in (raw_header, container.body):
                    written = fp.write(chunk)
                    if written != len(chunk):
                        raise PelxIOError(f"Неполная запись: {written} из {len(chunk)} байт в {path}")
        except OSError as exc:
            raise PelxIOError(f"Ошибка записи файла: {path}") from exc

        self._log.debug("Записан %s: тело %d байт", path, container.body_size)
