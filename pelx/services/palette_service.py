"""Загрузка именованных палитр из JSON.

Формат файла:
    {"overworld": ["#EA9E22FF", "#B53120"], "poison": [[157, 93, 0], [6, 0, 7, 255]]}
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pelx.models.palette_model import Palette, PaletteEntry


class PaletteService:
    def load_palettes(self, file_path: str | Path) -> Dict[str, Palette]:
        """Читает файл палитр.

        Raises:
            FileNotFoundError: если файл не существует.
            ValueError: если JSON некорректен или цвет не разбирается.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл палитр не найден: {path}")
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Файл палитр не является JSON: {path}") from exc
        return self.parse_palettes(raw)

    def parse_palettes(self, raw: Any) -> Dict[str, Palette]:
        if not isinstance(raw, dict) or not raw:
            raise ValueError("Ожидается непустой объект {имя: [цвета]}")
        palettes: Dict[str, Palette] = {}
        for name, colors in raw.items():
            if not isinstance(colors, list) or not colors:
                raise ValueError(f"Палитра {name!r} должна быть непустым списком цветов")
            entries: List[PaletteEntry] = []
            for color in colors:
                try:
                    entries.append(PaletteEntry.parse(color))
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"Палитра {name!r}: {exc}") from exc
            palettes[name] = Palette(name=name, entries=entries)
        return palettes

    def select(self, palettes: Dict[str, Palette], names: Optional[Iterable[str]] = None) -> List[Palette]:
        """Палитры в порядке `names`; все палитры файла, если `names` пуст."""
        names = list(names or [])
        if not names:
            return list(palettes.values())
        missing = [n for n in names if n not in palettes]
        if missing:
            raise KeyError(f"Палитры не найдены: {', '.join(missing)}")
        return [palettes[n] for n in names]
