"""
Pixel buffers for atlas building.

A PixelImage is a tightly packed, row-major grid of pixels in one of a small
set of GPU texture formats. Images are immutable: conversion always produces
a new image, so the builder can hold references to caller-owned sources
without copying them.

Format conversion table:
    identity                          -> same image
    rgba8 <-> rgba8-srgb <-> bgra8...  -> reinterpret (R/B swizzle across RGBA/BGRA)
    r8unorm -> 4-channel               -> grey expanded, opaque alpha (Pillow)
    4-channel -> r8unorm               -> ITU-R 601-2 luma (Pillow)
    anything involving r32float        -> unsupported (None)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class PixelFormat(str, Enum):
    """Texture formats, named after their wgpu identifiers."""
    R8_UNORM = "r8unorm"
    R32_FLOAT = "r32float"
    RGBA8_UNORM = "rgba8unorm"
    RGBA8_UNORM_SRGB = "rgba8unorm-srgb"
    BGRA8_UNORM = "bgra8unorm"
    BGRA8_UNORM_SRGB = "bgra8unorm-srgb"

    @property
    def pixel_size(self) -> int:
        """Bytes per pixel."""
        if self is PixelFormat.R8_UNORM:
            return 1
        return 4

    @property
    def is_four_channel(self) -> bool:
        return self in _FOUR_CHANNEL

    @property
    def is_bgra(self) -> bool:
        return self in (PixelFormat.BGRA8_UNORM, PixelFormat.BGRA8_UNORM_SRGB)


_FOUR_CHANNEL = frozenset({
    PixelFormat.RGBA8_UNORM,
    PixelFormat.RGBA8_UNORM_SRGB,
    PixelFormat.BGRA8_UNORM,
    PixelFormat.BGRA8_UNORM_SRGB,
})


@dataclass(frozen=True)
class PixelImage:
    """
    An immutable pixel buffer.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        format: Pixel format (determines bytes per pixel)
        data: Raw pixel bytes, row-major, no row padding
    """
    width: int
    height: int
    format: PixelFormat
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, 'format', PixelFormat(self.format))
        object.__setattr__(self, 'data', bytes(self.data))
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Image dimensions must be non-negative, got {self.width}x{self.height}")
        expected = self.width * self.height * self.format.pixel_size
        if len(self.data) != expected:
            raise ValueError(
                f"Expected {expected} bytes for a {self.width}x{self.height} "
                f"{self.format.value} image, got {len(self.data)}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def new(
        cls,
        size: Sequence[int],
        format: PixelFormat,
        fill: Optional[Sequence[int]] = None
    ) -> "PixelImage":
        """
        Create an image of the given size.

        Args:
            size: (width, height) in pixels
            format: Pixel format
            fill: Optional pixel value repeated over the whole image (one int per byte).
                  Zero-filled when omitted.
        """
        width, height = size
        format = PixelFormat(format)
        if fill is None:
            return cls(width, height, format, bytes(width * height * format.pixel_size))
        pixel = bytes(fill)
        if len(pixel) != format.pixel_size:
            raise ValueError(f"Fill value must be {format.pixel_size} bytes for {format.value}")
        return cls(width, height, format, pixel * (width * height))

    @classmethod
    def default(cls) -> "PixelImage":
        """A 1x1 opaque white sRGB image."""
        return cls.new((1, 1), PixelFormat.RGBA8_UNORM_SRGB, fill=(255, 255, 255, 255))

    @classmethod
    def transparent(cls) -> "PixelImage":
        """A 1x1 fully transparent sRGB image."""
        return cls.new((1, 1), PixelFormat.RGBA8_UNORM_SRGB)

    @classmethod
    def from_pil(cls, image: Image.Image, format: Optional[PixelFormat] = None) -> "PixelImage":
        """
        Build a PixelImage from a Pillow image.

        'L' images become r8unorm and 'F' images r32float; every other mode is
        converted to RGBA and becomes rgba8unorm-srgb. If a format is given the
        result is converted to it.

        Raises:
            ValueError: If the image cannot be converted to the requested format
        """
        if image.mode == 'L':
            pixels = cls(image.width, image.height, PixelFormat.R8_UNORM, image.tobytes())
        elif image.mode == 'F':
            pixels = cls(image.width, image.height, PixelFormat.R32_FLOAT, image.tobytes())
        else:
            if image.mode != 'RGBA':
                image = image.convert('RGBA')
            pixels = cls(image.width, image.height, PixelFormat.RGBA8_UNORM_SRGB, image.tobytes())

        if format is None:
            return pixels
        converted = pixels.convert(format)
        if converted is None:
            raise ValueError(f"Cannot convert {image.mode} image to {PixelFormat(format).value}")
        return converted

    @classmethod
    def open(cls, path: Union[str, Path], format: Optional[PixelFormat] = None) -> "PixelImage":
        """Load an image file with Pillow."""
        with Image.open(path) as image:
            image.load()
            return cls.from_pil(image, format)

    def to_array(self) -> np.ndarray:
        """Read-only view of the pixels shaped (height, width, pixel_size)."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, self.format.pixel_size
        )

    def to_pil(self) -> Image.Image:
        """Convert to a Pillow image. BGRA data is swizzled to RGBA."""
        if self.format is PixelFormat.R8_UNORM:
            return Image.frombytes('L', self.size, self.data)
        if self.format is PixelFormat.R32_FLOAT:
            return Image.frombytes('F', self.size, self.data)
        if self.format.is_bgra:
            return Image.frombytes('RGBA', self.size, self.data, 'raw', 'BGRA')
        return Image.frombytes('RGBA', self.size, self.data)

    def save(self, path: Union[str, Path], **kwargs) -> None:
        """Save with Pillow; the file format is inferred from the extension."""
        self.to_pil().save(path, **kwargs)

    def convert(self, format: PixelFormat) -> Optional["PixelImage"]:
        """
        Convert to another pixel format.

        Returns:
            A new image in the target format, this image if the format already
            matches, or None if the conversion is not supported.
        """
        format = PixelFormat(format)
        if format is self.format:
            return self

        if self.format.is_four_channel and format.is_four_channel:
            pixels = self.to_array()
            if self.format.is_bgra != format.is_bgra:
                pixels = pixels[..., [2, 1, 0, 3]]
            return PixelImage(self.width, self.height, format, pixels.tobytes())

        if self.format is PixelFormat.R8_UNORM and format.is_four_channel:
            return PixelImage.from_pil(self.to_pil().convert('RGBA'), format)

        if self.format.is_four_channel and format is PixelFormat.R8_UNORM:
            return PixelImage.from_pil(self.to_pil().convert('L'), format)

        logger.debug(f"No conversion from {self.format.value} to {format.value}")
        return None
