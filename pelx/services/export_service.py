"""Выходная стадия: запись развёрнутых пикселей в PNG через Pillow.

Принципы:
- `write_raster` повторяет интерфейс внешнего энкодера: возвращает `bool`, не бросает.
- Составные операции (`decode_png`, `encode_png`) переводят `False` в `PelxIOError`.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from pelx.config import DEFAULT_CONFIG, CodecConfig
from pelx.errors import PelxIOError
from pelx.models.container_model import PelxContainer
from pelx.models.palette_model import PaletteEntry
from pelx.models.pixel_buffer import PixelBuffer
from pelx.services.container_service import ContainerService
from pelx.services.pixel_service import PixelService, check_output_channels
from pelx.services.validation_service import ValidationService

logger = logging.getLogger(__name__)

_MODES = {3: "RGB", 4: "RGBA"}


def write_raster(
    file_path: str | Path,
    width: int,
    height: int,
    channels: int,
    pixels: bytes,
    row_stride: int,
) -> bool:
    """Сохраняет плоский буфер как PNG. Возвращает `False` при любой ошибке записи."""
    mode = _MODES.get(channels)
    if mode is None:
        logger.error("Неподдерживаемое число каналов для PNG: %s", channels)
        return False
    try:
        image = Image.frombuffer(mode, (width, height), bytes(pixels), "raw", mode, row_stride, 1)
        image.save(Path(file_path), format="PNG")
    except (OSError, ValueError) as exc:
        logger.error("Не удалось записать %s: %s", file_path, exc)
        return False
    return True


class ExportService:
    def __init__(
        self,
        config: CodecConfig = DEFAULT_CONFIG,
        log: Optional[logging.Logger] = None,
        container_service: Optional[ContainerService] = None,
        pixel_service: Optional[PixelService] = None,
        writer=write_raster,
    ) -> None:
        self._log = log or logger
        self._validator = ValidationService()
        self._containers = container_service or ContainerService(config, log=self._log)
        self._pixels = pixel_service or PixelService(config, log=self._log, validator=self._validator)
        self._writer = writer

    def decode_png(
        self,
        file_path: str | Path,
        palette: Sequence[PaletteEntry],
        output_channels: int,
    ) -> PixelBuffer:
        """Читает `.pelx` и разворачивает его; контейнер освобождается в любом случае."""
        check_output_channels(output_channels)
        with self._containers.decode(file_path) as container:
            return self._pixels.expand(container, palette, output_channels)

    def encode_png(
        self,
        file_path: str | Path,
        container: PelxContainer,
        palette: Sequence[PaletteEntry],
        output_channels: int,
    ) -> None:
        """Проверяет заголовок, разворачивает тело и пишет PNG.

        Raises:
            ChannelError, HeaderInvalidError: до выделения буфера.
            PelxIOError: если выходная стадия вернула `False`.
        """
        check_output_channels(output_channels)
        with self._pixels.expand(container, palette, output_channels) as buffer:
            ok = self._writer(
                file_path,
                buffer.width,
                buffer.height,
                buffer.channels,
                buffer.tobytes(),
                buffer.row_stride,
            )
        if not ok:
            raise PelxIOError(f"Не удалось записать PNG: {file_path}")
        self._log.info("Записан %s (%dx%d, %s)", file_path, buffer.width, buffer.height, buffer.mode)
