"""
Texture atlas builder.

Packs many individually sized textures into one atlas image:

1. Resolve the atlas format (forced, or the single format all textures share).
2. Search for an atlas size: start at min_size and double until the packer
   places every texture (each grown by padding), trying the ceiling
   max_size + padding - 2 * margin exactly once as the last attempt.
3. Trim the trailing padding, add the margin on all four edges.
4. Copy (converting where needed) each texture into a zero-filled atlas.

Texture indices in the resulting layout follow insertion order, not packing
order.
"""

import logging
import warnings
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import NotEnoughSpaceError, WrongFormatError
from ..image import PixelFormat, PixelImage
from ..schema import TextureAtlasLayout, TextureAtlasSettings, TextureAtlasSources, URect
from .packer import PackedLocation, Placement, pack_rects

logger = logging.getLogger(__name__)

Packer = Callable[[Sequence[Tuple[Any, int, int]], Tuple[int, int]], Optional[Placement]]


class TextureAtlasBuilder:
    """
    Builds a texture atlas from many individual textures.

    Examples:
        >>> builder = TextureAtlasBuilder()
        >>> builder.max_size((512, 512)).padding((1, 1))
        >>> builder.add_texture("hero", hero).add_texture("coin", coin)
        >>> layout, sources, atlas = builder.build()
        >>> layout.textures[sources.texture_index("coin")]

    Textures are held by reference until build() returns. PixelImage is
    immutable, so sources are never modified.
    """

    def __init__(
        self,
        settings: Optional[TextureAtlasSettings] = None,
        packer: Packer = pack_rects
    ):
        """
        Args:
            settings: Initial settings (defaults to TextureAtlasSettings())
            packer: Rectangle packer, called as packer(rects, bin_size)
        """
        self._settings = settings or TextureAtlasSettings()
        self._packer = packer
        self._textures: List[Tuple[Optional[Any], PixelImage]] = []

    @property
    def current_settings(self) -> TextureAtlasSettings:
        return self._settings

    def _update(self, **changes) -> "TextureAtlasBuilder":
        self._settings = TextureAtlasSettings(**{**dict(self._settings), **changes})
        return self

    def min_size(self, size: Sequence[int]) -> "TextureAtlasBuilder":
        """Set the minimum atlas size in pixels."""
        return self._update(min_size=tuple(size))

    def max_size(self, size: Sequence[int]) -> "TextureAtlasBuilder":
        """Set the maximum atlas size in pixels."""
        return self._update(max_size=tuple(size))

    def margin(self, margin: Sequence[int]) -> "TextureAtlasBuilder":
        """
        Set the margin added around the entire atlas.

        This does not affect the padding between texture rects.
        """
        return self._update(margin=tuple(margin))

    def padding(self, padding: Sequence[int]) -> "TextureAtlasBuilder":
        """
        Set the padding between texture rects.

        This does not affect the margin between texture rects and the edge.
        """
        return self._update(padding=tuple(padding))

    def convert_format(self, format: Optional[PixelFormat]) -> "TextureAtlasBuilder":
        """
        Force the atlas to convert all textures to the given format.

        With None (the default) build() fails unless all textures share a format.
        """
        return self._update(convert_format=format)

    def settings(self, settings: TextureAtlasSettings) -> "TextureAtlasBuilder":
        """Replace all settings at once."""
        self._settings = settings
        return self

    def add_texture(self, image_id: Optional[Any], texture: PixelImage) -> "TextureAtlasBuilder":
        """
        Add a texture to be copied into the atlas.

        Args:
            image_id: Optional hashable id to look up the texture index later
            texture: Source image, must stay unchanged until build() returns

        The insertion order is the index of the texture in the finished layout.
        """
        self._textures.append((image_id, texture))
        return self

    def _unified_format(self) -> PixelFormat:
        if self._settings.convert_format is not None:
            return self._settings.convert_format

        if not self._textures:
            logger.warning("Creating an atlas of no textures without a conversion format specified")
            raise WrongFormatError()

        format = self._textures[0][1].format
        for _, texture in self._textures[1:]:
            if texture.format is not format:
                logger.warning(
                    f"Loading textures of different formats '{texture.format.value}' and "
                    f"'{format.value}' without a conversion format specified"
                )
                raise WrongFormatError(
                    f"added a texture with the wrong format in an atlas "
                    f"({texture.format.value} != {format.value})"
                )
        return format

    def _search_size(self) -> Tuple[Tuple[int, int], Placement]:
        """
        Find the smallest atlas size (doubling from min_size) the packer can fill.

        Returns:
            (final atlas size including margin, placement by texture index)
        """
        s = self._settings
        # The margin is added onto min_size, so both must fit within max_size
        if any(s.min_size[i] + 2 * s.margin[i] > s.max_size[i] for i in range(2)):
            logger.warning(f"Minimum atlas size {s.min_size} plus margin {s.margin} exceeds maximum size {s.max_size}")
            raise NotEnoughSpaceError()

        # Trailing padding gets trimmed, margin gets added on all four sides
        max_width = max(s.max_size[0] + s.padding[0] - 2 * s.margin[0], 0)
        max_height = max(s.max_size[1] + s.padding[1] - 2 * s.margin[1], 0)

        rects = [
            (index, texture.width + s.padding[0], texture.height + s.padding[1])
            for index, (_, texture) in enumerate(self._textures)
        ]

        width, height = s.min_size
        while width <= max_width and height <= max_height:
            last_attempt = width == max_width and height == max_height
            placement = self._packer(rects, (width, height))
            logger.debug(f"Packing {len(rects)} textures into {width}x{height}: "
                         f"{'ok' if placement is not None else 'not enough space'}")

            if placement is not None:
                if self._textures:
                    width = max(width - s.padding[0], s.min_size[0])
                    height = max(height - s.padding[1], s.min_size[1])
                return (width + 2 * s.margin[0], height + 2 * s.margin[1]), placement

            if last_attempt:
                break
            # A zero dimension would never grow by doubling alone
            width = min(max(width * 2, 1), max_width)
            height = min(max(height * 2, 1), max_height)

        logger.warning(f"Could not pack {len(rects)} textures into an atlas up to {s.max_size}")
        raise NotEnoughSpaceError()

    @staticmethod
    def _copy_texture_to_atlas(
        atlas: np.ndarray,
        texture: PixelImage,
        rect: URect
    ) -> None:
        # atlas is (height, width * pixel_size); copy row slices at the rect offset
        pixel_size = texture.format.pixel_size
        x0, y0 = rect.min
        rows = texture.to_array().reshape(texture.height, texture.width * pixel_size)
        atlas[y0:y0 + rect.height, x0 * pixel_size:(x0 + rect.width) * pixel_size] = rows

    def _copy_converted_texture(
        self,
        atlas: np.ndarray,
        texture: PixelImage,
        rect: URect,
        format: PixelFormat
    ) -> None:
        if texture.format is format:
            self._copy_texture_to_atlas(atlas, texture, rect)
            return

        converted = texture.convert(format)
        if converted is None:
            # Region stays blank; one bad texture does not fail the atlas
            logger.error(
                f"Error converting texture from '{texture.format.value}' to "
                f"'{format.value}', ignoring"
            )
            return
        logger.debug(f"Converting texture from '{texture.format.value}' to '{format.value}'")
        self._copy_texture_to_atlas(atlas, converted, rect)

    def build(self) -> Tuple[TextureAtlasLayout, TextureAtlasSources, PixelImage]:
        """
        Build the atlas.

        Assigns indices to the textures in insertion order and copies every
        texture into a new atlas image.

        Returns:
            Tuple of:
            - layout: atlas size and one rect per texture
            - sources: texture id -> index for textures added with an id
            - atlas: the combined image

        Raises:
            WrongFormatError: Textures have mixed formats (or there are none)
                and no conversion format is set
            NotEnoughSpaceError: The textures do not fit within max_size
        """
        format = self._unified_format()
        (width, height), placement = self._search_size()

        margin_x, margin_y = self._settings.margin
        pad_x, pad_y = self._settings.padding
        atlas = np.zeros((height, width * format.pixel_size), dtype=np.uint8)

        layout = TextureAtlasLayout.new_empty((width, height))
        texture_ids = {}
        # Iterate in insertion order so indices match add_texture calls
        for index, (image_id, texture) in enumerate(self._textures):
            location: PackedLocation = placement[index]
            x0 = margin_x + location.x
            y0 = margin_y + location.y
            rect = URect.new(x0, y0, x0 + location.width - pad_x, y0 + location.height - pad_y)
            layout.add_texture(rect)
            if image_id is not None:
                texture_ids[image_id] = index
            self._copy_converted_texture(atlas, texture, rect, format)

        logger.info(f"Packed {len(self._textures)} textures into {width}x{height} atlas ({format.value})")
        return (
            layout,
            TextureAtlasSources(texture_ids=texture_ids),
            PixelImage(width, height, format, atlas.tobytes()),
        )

    def finish(self) -> Tuple[TextureAtlasLayout, TextureAtlasSources, PixelImage]:
        """Deprecated alias of build()."""
        warnings.warn(
            "TextureAtlasBuilder.finish() is deprecated, use TextureAtlasBuilder.build() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.build()
