"""
SpriteAtlas Advanced Example

Shows format conversion, the shelf packer, error handling and grid layouts.
"""

from spriteatlas import (
    NotEnoughSpaceError,
    PixelFormat,
    PixelImage,
    TextureAtlasBuilder,
    TextureAtlasLayout,
    TextureAtlasSettings,
    WrongFormatError,
)
from spriteatlas.packing import pack_rects_shelf

mask = PixelImage.new((8, 8), PixelFormat.R8_UNORM, fill=(128,))
icon = PixelImage.new((8, 8), PixelFormat.BGRA8_UNORM, fill=(0, 0, 255, 255))

# Mixed formats need a conversion format
try:
    TextureAtlasBuilder().add_texture(None, mask).add_texture(None, icon).build()
except WrongFormatError as e:
    print(f"Expected failure: {e}")

settings = TextureAtlasSettings(min_size=(16, 16), max_size=(64, 64), convert_format=PixelFormat.RGBA8_UNORM)
layout, sources, atlas = (
    TextureAtlasBuilder(settings, packer=pack_rects_shelf)
    .add_texture("mask", mask)
    .add_texture("icon", icon)
    .build()
)
print(f"Converted atlas: {layout.size}, uv of icon = {sources.uv_rect(layout, 'icon')}")

# Too small for a 100x100 sprite
try:
    TextureAtlasBuilder().max_size((64, 64)).min_size((32, 32)).add_texture(
        None, PixelImage.new((100, 100), PixelFormat.RGBA8_UNORM)
    ).build()
except NotEnoughSpaceError as e:
    print(f"Expected failure: {e}")

sheet = TextureAtlasLayout.from_grid((16, 16), columns=4, rows=2, padding=(1, 1))
print(f"Grid layout {sheet.size} with {len(sheet)} cells")
