"""Error types raised for inputs the transfer cannot work with.

Every error derives from ``InvalidInputError`` so callers can catch the whole
family, while the subclass names the precondition that failed.
"""


class InvalidInputError(ValueError):
    """Base class for all rejected inputs."""


class ImageReadError(InvalidInputError):
    """An image file is missing or cannot be decoded."""


class ImageWriteError(InvalidInputError):
    """An image could not be encoded or written."""


class ChannelCountError(InvalidInputError):
    """An image has fewer than three channels."""


class SampleDepthError(InvalidInputError):
    """An image uses a sample type other than unsigned integers."""


class UnknownColorspaceError(InvalidInputError):
    """A colorspace identifier is not in the catalog."""
