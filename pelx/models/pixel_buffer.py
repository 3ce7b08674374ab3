"""Развёрнутый буфер пикселей RGB/RGBA."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class PixelBuffer:
    """Плоский буфер `width * height * channels` байт.

    Fields:
        data: Одномерный массив `uint8`.
        width: Ширина, px.
        height: Высота, px.
        channels: 3 (RGB) или 4 (RGBA).
    """
    data: np.ndarray
    width: int
    height: int
    channels: int
    released: bool = False

    @property
    def row_stride(self) -> int:
        return self.width * self.channels

    @property
    def mode(self) -> str:
        return "RGBA" if self.channels == 4 else "RGB"

    def __len__(self) -> int:
        return int(self.data.size)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def as_image_array(self) -> np.ndarray:
        """Представление (height, width, channels) без копирования."""
        return self.data.reshape(self.height, self.width, self.channels)

    def release(self) -> None:
        if self.released:
            return
        self.data = np.zeros(0, dtype=np.uint8)
        self.released = True

    def __enter__(self) -> "PixelBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
