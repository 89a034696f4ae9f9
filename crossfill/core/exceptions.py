"""Custom exception hierarchy for dictionary lookup and slot extraction."""


class CrossfillError(Exception):
    """Base exception for crossfill failures."""


class DictionaryLoadError(CrossfillError):
    """Raised when the dictionary file cannot be read in strict mode."""


class DictionaryCapacityError(CrossfillError):
    """Raised when the dictionary holds more words than identifiers allow."""


class ConfigurationError(CrossfillError):
    """Raised when neither the requested nor the default configuration is usable."""


class GridFormatError(CrossfillError):
    """Raised when a grid file is truncated or has invalid dimensions."""
