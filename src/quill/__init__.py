"""Quill — edit an HTML page in the browser, save it back to disk.

Serves one HTML document with its body editable in place, writes edits
back to the document file, recompiles the SCSS stylesheet on change, and
tells open tabs to swap the stylesheet or reload.

Quick start::

    import quill

    quill.dev("my-page/")          # serve my-page/index.html on :8080

"""

__version__ = "0.1.0"
__all__ = [
    "QuillConfig",
    "__version__",
    "compile_style",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import quill`` fast; Chirp and libsass load on first use.
    """
    if name == "QuillConfig":
        from quill.config import QuillConfig

        return QuillConfig

    if name == "dev":
        from quill.app import dev

        return dev

    if name == "compile_style":
        from quill.app import compile_style

        return compile_style

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
