"""Style layer — SCSS compilation with keep-last-good semantics."""

from quill.style.compiler import StyleCompiler

__all__ = ["StyleCompiler"]
