"""Контроллер CLI: связывает команды с сервисами.

SOLID:
- SRP: класс управляет только вызовами сервисов и выводом результата.
- DIP: сервисы создаются из `CodecConfig` и могут быть подменены.
Clean Code:
- Обработчики компактны; вся логика формата вынесена в сервисы.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from pelx.config import DEFAULT_CONFIG, CodecConfig
from pelx.errors import PelxError
from pelx.services.container_service import ContainerService
from pelx.services.export_service import ExportService
from pelx.services.palette_service import PaletteService
from pelx.services.validation_service import ValidationService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


@dataclass
class AppController:
    """Обработчики команд `info`, `validate`, `render`.

    Каждый обработчик возвращает код выхода; `PelxError` печатается в `err`.
    """
    config: CodecConfig = DEFAULT_CONFIG
    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)

    _validator: ValidationService = field(init=False)
    _containers: ContainerService = field(init=False)
    _export: ExportService = field(init=False)
    _palettes: PaletteService = field(init=False)

    def __post_init__(self) -> None:
        self._validator = ValidationService()
        self._containers = ContainerService(self.config)
        self._export = ExportService(self.config, container_service=self._containers)
        self._palettes = PaletteService()

    # ---- Handlers ----
    def handle_info(self, file_path: Path) -> int:
        try:
            with self._containers.decode(file_path) as container:
                for key, value in container.header.describe().items():
                    print(f"{key}: {value}", file=self.out)
                print(f"Body Size: {container.body_size} bytes", file=self.out)
        except PelxError as exc:
            return self._report(exc)
        return EXIT_OK

    def handle_validate(self, file_path: Path) -> int:
        try:
            with self._containers.decode(file_path) as container:
                violation = self._validator.find_violation(container.header)
        except PelxError as exc:
            return self._report(exc)
        if violation is not None:
            print(f"{file_path}: invalid ({violation.name})", file=self.out)
            return EXIT_INVALID
        print(f"{file_path}: ok", file=self.out)
        return EXIT_OK

    def handle_render(
        self,
        file_path: Path,
        palettes_path: Path,
        names: Optional[List[str]] = None,
        channels: Optional[int] = None,
        out_dir: Optional[Path] = None,
    ) -> int:
        channels = channels or self.config.default_output_channels
        out_dir = out_dir or file_path.parent
        try:
            palettes = self._palettes.select(self._palettes.load_palettes(palettes_path), names)
            out_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError, KeyError) as exc:
            print(f"error: {exc}", file=self.err)
            return EXIT_ERROR

        try:
            with self._containers.decode(file_path) as container:
                for palette in palettes:
                    target = out_dir / f"{palette.name}_{file_path.stem}.png"
                    self._export.encode_png(target, container, palette, channels)
                    print(target, file=self.out)
        except PelxError as exc:
            return self._report(exc)
        return EXIT_OK

    # ---- Helpers ----
    def _report(self, exc: PelxError) -> int:
        logger.debug("Команда завершилась ошибкой", exc_info=exc)
        print(f"error: {exc} (code={exc.code.name})", file=self.err)
        return EXIT_ERROR
