"""Shared type definitions for quill."""

from typing import Literal

# Which watched file changed
type ChangeCategory = Literal["document", "style_source", "style_output"]
