from __future__ import annotations


class FileTypeError(Exception):
    """Base class for everything the prediction pipeline raises on purpose."""


class NotFoundError(FileTypeError, FileNotFoundError):
    """Input path, model file or configuration file does not exist."""


class InvalidInputError(FileTypeError, ValueError):
    """Wrong kind of path, empty source or a probability vector of the wrong size."""


class ConfigError(FileTypeError, RuntimeError):
    """Configuration document is unparsable or misses a required field."""


class InferenceError(FileTypeError, RuntimeError):
    """The inference engine failed to run."""
