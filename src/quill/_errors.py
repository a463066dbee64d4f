"""Quill error hierarchy.

All quill-specific errors inherit from QuillError for easy catching.
"""


class QuillError(Exception):
    """Base error for all quill operations."""


class ConfigError(QuillError):
    """Invalid or unreadable configuration."""


class DocumentError(QuillError):
    """The canonical document could not be read or written."""


class StyleError(QuillError):
    """The compiled stylesheet could not be read for serving."""
