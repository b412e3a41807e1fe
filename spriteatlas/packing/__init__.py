"""
Atlas packing.

Rectangle packers and the TextureAtlasBuilder that drives them.
"""
from .packer import PackedLocation, GuillotinePacker, ShelfPacker, pack_rects, pack_rects_shelf
from .builder import TextureAtlasBuilder

__all__ = [
    'PackedLocation',
    'GuillotinePacker',
    'ShelfPacker',
    'pack_rects',
    'pack_rects_shelf',
    'TextureAtlasBuilder',
]
