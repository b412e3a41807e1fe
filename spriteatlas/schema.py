"""
Atlas value models: settings, rectangles, layouts and source lookups.

All coordinates are in pixels. Sizes and positions are (x, y) tuples of
non-negative integers; lists are accepted and coerced to tuples.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .image import PixelFormat

# Type aliases for better readability
UVec2 = Tuple[int, int]


def _check_uvec2(value: Any) -> UVec2:
    x, y = value
    if x < 0 or y < 0:
        raise ValueError(f"Components must be non-negative, got ({x}, {y})")
    return int(x), int(y)


class URect(BaseModel):
    """Axis-aligned pixel rectangle, min inclusive, max exclusive."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    min: UVec2 = Field(..., description="Top-left corner (inclusive).")
    max: UVec2 = Field(..., description="Bottom-right corner (exclusive).")

    @field_validator('min', 'max', mode='after')
    @classmethod
    def validate_corner(cls, v):
        return _check_uvec2(v)

    @classmethod
    def new(cls, x0: int, y0: int, x1: int, y1: int) -> URect:
        return cls(min=(x0, y0), max=(x1, y1))

    @property
    def width(self) -> int:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> int:
        return self.max[1] - self.min[1]

    @property
    def size(self) -> UVec2:
        return self.width, self.height


class TextureAtlasSettings(BaseModel):
    """
    Configuration for building a texture atlas.

    min_size + 2 * margin <= max_size is assumed but not validated here;
    the builder reports a violation as NotEnoughSpaceError.
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    min_size: UVec2 = Field((256, 256), description="Initial and minimum atlas size.")
    max_size: UVec2 = Field((2048, 2048), description="Maximum atlas size.")
    margin: UVec2 = Field((0, 0), description="Pixels added on all four outer edges of the atlas.")
    padding: UVec2 = Field((0, 0), description="Pixels reserved between adjacent textures.")
    convert_format: Optional[PixelFormat] = Field(
        None,
        description="Forced atlas format. When None, all textures must share one format."
    )

    @field_validator('min_size', 'max_size', 'margin', 'padding', mode='after')
    @classmethod
    def validate_sizes(cls, v):
        return _check_uvec2(v)


class TextureAtlasLayout(BaseModel):
    """
    Geometry of a texture atlas: its size and one rect per texture.

    Rect indices follow insertion order.
    """
    model_config = ConfigDict(extra='forbid')

    size: UVec2 = Field(..., description="Atlas [width, height] in pixels.")
    textures: List[URect] = Field(default_factory=list, description="Texture rects by index.")

    @field_validator('size', mode='after')
    @classmethod
    def validate_size(cls, v):
        return _check_uvec2(v)

    @classmethod
    def new_empty(cls, size: Sequence[int]) -> TextureAtlasLayout:
        return cls(size=tuple(size))

    @classmethod
    def from_grid(
        cls,
        tile_size: Sequence[int],
        columns: int,
        rows: int,
        padding: Optional[Sequence[int]] = None,
        offset: Optional[Sequence[int]] = None,
    ) -> TextureAtlasLayout:
        """
        Build a layout of uniformly sized cells in a grid.

        Cells are indexed row by row. Cell (c, r) starts at
        (tile_size + padding) * (c, r) + offset. The layout size covers the
        cells and the padding between them, not the offset.

        Args:
            tile_size: (width, height) of each cell
            columns: Number of cells per row
            rows: Number of rows
            padding: Gap between cells, default (0, 0)
            offset: Position of the first cell, default (0, 0)
        """
        tile_w, tile_h = tile_size
        pad_x, pad_y = padding or (0, 0)
        off_x, off_y = offset or (0, 0)

        textures = []
        for row in range(rows):
            for column in range(columns):
                x = (tile_w + pad_x) * column + off_x
                y = (tile_h + pad_y) * row + off_y
                textures.append(URect.new(x, y, x + tile_w, y + tile_h))

        width = tile_w * columns + pad_x * max(columns - 1, 0)
        height = tile_h * rows + pad_y * max(rows - 1, 0)
        return cls(size=(width, height), textures=textures)

    def add_texture(self, rect: URect) -> int:
        """Append a rect and return its index."""
        self.textures.append(rect)
        return len(self.textures) - 1

    def __len__(self) -> int:
        return len(self.textures)

    def is_empty(self) -> bool:
        return not self.textures


class TextureAtlasSources(BaseModel):
    """Maps caller-supplied texture ids to their index in a TextureAtlasLayout."""
    model_config = ConfigDict(extra='forbid')

    texture_ids: Dict[Any, int] = Field(default_factory=dict)

    def texture_index(self, texture_id: Any) -> Optional[int]:
        return self.texture_ids.get(texture_id)

    def texture_rect(self, layout: TextureAtlasLayout, texture_id: Any) -> Optional[URect]:
        index = self.texture_index(texture_id)
        if index is None:
            return None
        return layout.textures[index]

    def uv_rect(
        self,
        layout: TextureAtlasLayout,
        texture_id: Any
    ) -> Optional[Tuple[float, float, float, float]]:
        """Rect of a texture normalized to the atlas size, as (u1, v1, u2, v2).

        Raises:
            ValueError: If the layout has a zero width or height
        """
        rect = self.texture_rect(layout, texture_id)
        if rect is None:
            return None
        width, height = layout.size
        if width == 0 or height == 0:
            raise ValueError(f"Cannot compute UVs for a zero-size layout {layout.size}")
        return (
            rect.min[0] / width,
            rect.min[1] / height,
            rect.max[0] / width,
            rect.max[1] / height,
        )
