"""Custom exceptions for texture atlas building"""


class TextureAtlasBuilderError(Exception):
    """Base exception for atlas building errors"""
    pass


class NotEnoughSpaceError(TextureAtlasBuilderError):
    """Textures could not be packed within the maximum atlas size"""

    def __init__(self, message: str = "could not pack textures into an atlas within the given bounds"):
        super().__init__(message)


class WrongFormatError(TextureAtlasBuilderError):
    """Textures have mismatched formats and no conversion format was set"""

    def __init__(self, message: str = "added a texture with the wrong format in an atlas"):
        super().__init__(message)
