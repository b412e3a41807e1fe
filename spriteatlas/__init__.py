"""
SpriteAtlas - Pack many small sprites into one texture atlas

Computes where each sprite goes within the atlas (respecting size bounds,
padding between sprites and an outer margin) and assembles the combined
pixel buffer, so a renderer can draw all sprites from one texture.
"""

from spriteatlas.errors import NotEnoughSpaceError, TextureAtlasBuilderError, WrongFormatError
from spriteatlas.image import PixelFormat, PixelImage
from spriteatlas.packing import TextureAtlasBuilder
from spriteatlas.schema import TextureAtlasLayout, TextureAtlasSettings, TextureAtlasSources, URect

__version__ = "0.1.0"
__all__ = [
    "TextureAtlasBuilder",
    "TextureAtlasSettings",
    "TextureAtlasLayout",
    "TextureAtlasSources",
    "URect",
    "PixelFormat",
    "PixelImage",
    "TextureAtlasBuilderError",
    "NotEnoughSpaceError",
    "WrongFormatError",
]
