"""
SpriteAtlas Quick Start Example

This example packs a few generated sprites into one atlas.
"""

from spriteatlas import PixelFormat, PixelImage, TextureAtlasBuilder

red = PixelImage.new((16, 16), PixelFormat.RGBA8_UNORM_SRGB, fill=(255, 0, 0, 255))
green = PixelImage.new((32, 8), PixelFormat.RGBA8_UNORM_SRGB, fill=(0, 255, 0, 255))
blue = PixelImage.new((8, 24), PixelFormat.RGBA8_UNORM_SRGB, fill=(0, 0, 255, 255))

builder = TextureAtlasBuilder()
builder.min_size((32, 32)).max_size((256, 256)).padding((2, 2)).margin((1, 1))
builder.add_texture("red", red).add_texture("green", green).add_texture("blue", blue)

layout, sources, atlas = builder.build()

print(f"Atlas size: {layout.size[0]}x{layout.size[1]}")
for name in ("red", "green", "blue"):
    print(f"  {name}: {sources.texture_rect(layout, name)}")

atlas.save("atlas.png")
print("✅ Saved to atlas.png")
