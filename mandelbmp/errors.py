class RenderError(Exception):
    """Base class for failures that abort a render."""


class ConfigurationError(RenderError, ValueError):
    """Colour ranges, dimensions or other settings are unusable."""


class NumericConversionError(RenderError, OverflowError):
    """A value does not fit the 32-bit fields of the bitmap header."""


class RenderOrderError(RenderError, RuntimeError):
    """A render stage was requested before the stage it depends on."""
