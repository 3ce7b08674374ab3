from pathlib import Path
from typing import Callable

import pytest

from pelx.models.header_model import PelxHeader
from pelx.models.palette_model import Palette, PaletteEntry
from pelx.services.pixel_service import PixelStreamBuilder, new_container


@pytest.fixture
def make_header() -> Callable[..., PelxHeader]:
    def _make(**overrides) -> PelxHeader:
        values = dict(width=2, height=1, palette_channel_count=4, true_channel_count=4, palette_count=2)
        values.update(overrides)
        return PelxHeader(**values)

    return _make


@pytest.fixture
def overworld() -> Palette:
    return Palette(
        name="overworld",
        entries=[PaletteEntry(0xEA, 0x9E, 0x22, 0xFF), PaletteEntry(0xB5, 0x31, 0x20, 0xFF)],
    )


@pytest.fixture
def sample_container():
    """2x1: палитра[0], затем true-color 11 22 33 44."""
    body = PixelStreamBuilder(true_channels=4).palette(0).true(0x11, 0x22, 0x33, 0x44).build()
    return new_container(2, 1, body, palette_count=2)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
