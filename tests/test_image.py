"""
Tests for PixelImage construction, Pillow interop and format conversion
"""
import pytest
from PIL import Image

from spriteatlas import PixelFormat, PixelImage


class TestPixelImage:
    """Test construction and views"""

    def test_new_is_zero_filled(self):
        image = PixelImage.new((3, 2), PixelFormat.RGBA8_UNORM)
        assert image.size == (3, 2)
        assert image.data == bytes(3 * 2 * 4)

    def test_new_with_fill(self):
        image = PixelImage.new((2, 1), PixelFormat.R8_UNORM, fill=(7,))
        assert image.data == bytes([7, 7])

    def test_fill_must_match_pixel_size(self):
        with pytest.raises(ValueError):
            PixelImage.new((1, 1), PixelFormat.RGBA8_UNORM, fill=(1, 2, 3))

    def test_data_length_checked(self):
        """Data must hold exactly width * height * pixel_size bytes"""
        with pytest.raises(ValueError):
            PixelImage(2, 2, PixelFormat.RGBA8_UNORM, bytes(15))

    def test_default_and_transparent(self):
        assert PixelImage.default().data == bytes([255, 255, 255, 255])
        assert PixelImage.transparent().data == bytes(4)
        assert PixelImage.default().format is PixelFormat.RGBA8_UNORM_SRGB

    def test_format_from_string(self):
        image = PixelImage(1, 1, "bgra8unorm", bytes(4))
        assert image.format is PixelFormat.BGRA8_UNORM

    def test_array_view_is_read_only(self):
        image = PixelImage.new((3, 2), PixelFormat.RGBA8_UNORM)
        pixels = image.to_array()
        assert pixels.shape == (2, 3, 4)
        assert not pixels.flags.writeable

    def test_pixel_sizes(self):
        assert PixelFormat.R8_UNORM.pixel_size == 1
        assert PixelFormat.R32_FLOAT.pixel_size == 4
        assert PixelFormat.BGRA8_UNORM_SRGB.pixel_size == 4


class TestPillowInterop:
    """Test conversion to and from Pillow images"""

    def test_from_rgb_adds_alpha(self):
        image = PixelImage.from_pil(Image.new('RGB', (2, 2), (10, 20, 30)))
        assert image.format is PixelFormat.RGBA8_UNORM_SRGB
        assert image.data[:4] == bytes([10, 20, 30, 255])

    def test_from_greyscale(self):
        image = PixelImage.from_pil(Image.new('L', (2, 1), 99))
        assert image.format is PixelFormat.R8_UNORM
        assert image.data == bytes([99, 99])

    def test_from_pil_with_format(self):
        image = PixelImage.from_pil(Image.new('RGBA', (1, 1), (1, 2, 3, 4)), PixelFormat.BGRA8_UNORM)
        assert image.data == bytes([3, 2, 1, 4])

    def test_bgra_to_pil(self):
        image = PixelImage.new((1, 1), PixelFormat.BGRA8_UNORM, fill=(255, 0, 0, 255))
        assert image.to_pil().getpixel((0, 0)) == (0, 0, 255, 255)

    def test_save_and_open(self, tmp_path):
        path = tmp_path / "sprite.png"
        original = PixelImage.new((4, 3), PixelFormat.RGBA8_UNORM_SRGB, fill=(1, 2, 3, 4))
        original.save(path)

        loaded = PixelImage.open(path)
        assert loaded == original


class TestConvert:
    """Test pixel format conversion"""

    def test_same_format_returns_self(self):
        image = PixelImage.default()
        assert image.convert(PixelFormat.RGBA8_UNORM_SRGB) is image

    def test_srgb_reinterpreted(self):
        image = PixelImage.new((1, 1), PixelFormat.RGBA8_UNORM, fill=(1, 2, 3, 4))
        converted = image.convert(PixelFormat.RGBA8_UNORM_SRGB)
        assert converted.format is PixelFormat.RGBA8_UNORM_SRGB
        assert converted.data == image.data

    def test_rgba_to_bgra_swizzles(self):
        image = PixelImage.new((2, 1), PixelFormat.RGBA8_UNORM, fill=(1, 2, 3, 4))
        converted = image.convert(PixelFormat.BGRA8_UNORM_SRGB)
        assert converted.data == bytes([3, 2, 1, 4] * 2)
        assert image.data == bytes([1, 2, 3, 4] * 2)

    def test_greyscale_to_rgba(self):
        image = PixelImage.new((1, 1), PixelFormat.R8_UNORM, fill=(128,))
        converted = image.convert(PixelFormat.RGBA8_UNORM)
        assert converted.data == bytes([128, 128, 128, 255])

    def test_rgba_to_greyscale(self):
        image = PixelImage.new((1, 1), PixelFormat.RGBA8_UNORM, fill=(100, 100, 100, 255))
        converted = image.convert(PixelFormat.R8_UNORM)
        assert converted.format is PixelFormat.R8_UNORM
        assert converted.data == bytes([100])

    @pytest.mark.parametrize("source,target", [
        (PixelFormat.R32_FLOAT, PixelFormat.RGBA8_UNORM),
        (PixelFormat.RGBA8_UNORM, PixelFormat.R32_FLOAT),
        (PixelFormat.R8_UNORM, PixelFormat.R32_FLOAT),
    ])
    def test_unsupported_conversion(self, source, target):
        assert PixelImage.new((1, 1), source).convert(target) is None
