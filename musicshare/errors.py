"""Exceptions raised by the share image pipeline."""


class CompositionError(Exception):
    """Rendering could not produce an image at all."""


class SurfaceCreationFailed(CompositionError):
    """The drawing canvas could not be allocated."""


class SourceDecodeFailed(CompositionError):
    """The artwork could not be read or decoded."""


class CatalogLookupError(Exception):
    """The catalog lookup failed or returned no usable record."""
