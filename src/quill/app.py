"""Quill application — the live-editing server.

Wires the document renderer, stylesheet, server-push channel, and file
watcher into a single Chirp app.  ``dev()`` is the primary entry point;
``compile_style()`` runs the style pipeline once without serving.

Routes:

    GET  /                  editable page (document + agent, all marked)
    POST / or any path      persist an edit (markers stripped)
    GET  /index.css         compiled stylesheet, byte-for-byte
    GET  /__quill/events    SSE stream of ``style`` / ``reload`` tokens
    GET  /__quill/stats     event log summary (JSON)
"""

import asyncio
import json
import sys
import time
import uuid
from pathlib import Path
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from quill._errors import StyleError
from quill.config import QuillConfig
from quill.config_loader import load_config
from quill.document.page import render_page, save_document
from quill.reactive.agent import EVENTS_ENDPOINT

if TYPE_CHECKING:
    from chirp import App, Request
    from chirp.http.response import Response

    from quill.observability.collector import StackCollector
    from quill.reactive.broadcaster import Broadcaster
    from quill.reactive.dispatcher import ChangeDispatcher
    from quill.reactive.watcher import FileWatcher

STATS_ENDPOINT = "/__quill/stats"


def _create_chirp_app(config: QuillConfig, *, debug: bool = False) -> App:
    """Create a bare Chirp App bound to the configured host and port."""
    from chirp import App, AppConfig

    app_config = AppConfig(
        template_dir=config.root,
        debug=debug,
        host=config.host,
        port=config.port,
    )
    return App(config=app_config)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def page_response(config: QuillConfig) -> Response:
    """Render the editable page.

    Raises:
        DocumentError: If the canonical document cannot be read.

    """
    from chirp.http.response import Response

    return Response(
        body=render_page(config),
        status=200,
        content_type="text/html; charset=utf-8",
    )


def stylesheet_response(config: QuillConfig) -> Response:
    """Serve the compiled CSS exactly as it sits on disk.

    Raises:
        StyleError: If the compiled output is missing or unreadable.

    """
    from chirp.http.response import Response

    path = config.style_output_path
    try:
        css = path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read stylesheet {path}: {exc}"
        raise StyleError(msg) from exc

    return Response(body=css, status=200, content_type="text/css")


async def save_response(
    config: QuillConfig,
    request: Request,
    collector: StackCollector | None = None,
) -> Response:
    """Persist the submitted body markup and answer with an empty body.

    No broadcast happens here; the watcher sees the write and reloads
    connected browsers from there.
    """
    from chirp.http.response import Response

    raw = await request.body()
    markup = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else str(raw)
    text = save_document(config, markup)

    if collector is not None:
        collector.record_save(str(config.document_path), size=len(text))

    return Response(body="", status=200, content_type="text/plain")


# ---------------------------------------------------------------------------
# Route wiring
# ---------------------------------------------------------------------------


def _wire_document_routes(
    app: App, config: QuillConfig, collector: StackCollector | None
) -> None:
    """Register ``/`` for GET (render) and POST (save)."""

    async def document_handler(request: Request) -> Any:
        if request.method == "POST":
            return await save_response(config, request, collector)
        return page_response(config)

    document_handler.__name__ = "quill_document"
    app.route("/", methods=["GET", "POST"], name="quill:document")(document_handler)


def _wire_save_fallback(
    app: App, config: QuillConfig, collector: StackCollector | None
) -> None:
    """Accept POST on every other path as a save of the same document.

    Saving is gated on the method alone.  Registered after the static
    routes so it never shadows them.
    """

    async def save_handler(request: Request, path: str) -> Any:
        return await save_response(config, request, collector)

    save_handler.__name__ = "quill_save"
    app.route("/{path:path}", methods=["POST"], name="quill:save")(save_handler)


def _wire_stylesheet_route(app: App, config: QuillConfig) -> None:
    """Register the compiled stylesheet at ``config.stylesheet_href``.

    Query strings (the agent's cache-buster) are not part of the route
    path, so ``/index.css?t=...`` lands here too.
    """

    async def stylesheet_handler(request: Request) -> Any:
        return stylesheet_response(config)

    stylesheet_handler.__name__ = "quill_stylesheet"
    app.route(config.stylesheet_href, name="quill:stylesheet")(stylesheet_handler)


async def stream_events(broadcaster: Broadcaster) -> AsyncIterator[Any]:
    """One client's event stream.

    The client is in the broadcaster's set for exactly as long as the
    stream is open; closing it (disconnect or shutdown) unsubscribes.
    """
    from quill.reactive.broadcaster import SSEConnection

    conn = SSEConnection(client_id=str(uuid.uuid4()))
    broadcaster.subscribe(conn)
    try:
        async for event in broadcaster.client_generator(conn):
            yield event
    finally:
        broadcaster.unsubscribe(conn)


def _wire_events_endpoint(app: App, broadcaster: Broadcaster) -> None:
    """Register the SSE endpoint browsers subscribe to."""
    from chirp import EventStream

    async def events_handler(request: Request) -> Any:
        return EventStream(stream_events(broadcaster))

    events_handler.__name__ = "quill_events"
    app.route(EVENTS_ENDPOINT, name="quill:events")(events_handler)


def _wire_stats_endpoint(app: App, collector: StackCollector) -> None:
    """Register the JSON stats endpoint."""
    from chirp.http.response import Response

    async def stats_handler(request: Request) -> Any:
        payload = json.dumps({"event_log": collector.log.stats()}, indent=2)
        return Response(body=payload, status=200, content_type="application/json")

    stats_handler.__name__ = "quill_stats"
    app.route(STATS_ENDPOINT, name="quill:stats")(stats_handler)


def create_app(
    config: QuillConfig,
    broadcaster: Broadcaster,
    collector: StackCollector,
    *,
    debug: bool = False,
) -> App:
    """Create the Chirp app with every route registered.

    The file watcher is not attached here; see ``_start_watcher``.
    """
    app = _create_chirp_app(config, debug=debug)
    _wire_document_routes(app, config, collector)
    _wire_stylesheet_route(app, config)
    _wire_events_endpoint(app, broadcaster)
    _wire_stats_endpoint(app, collector)
    _wire_save_fallback(app, config, collector)
    return app


def _start_watcher(
    config: QuillConfig, dispatcher: ChangeDispatcher, app: App
) -> FileWatcher:
    """Wire the FileWatcher to the dispatcher via Chirp lifecycle hooks.

    Flow:
        on_startup  → start watcher thread, spawn ``_consume_events`` task
        file change → dispatcher.handle_change()
        on_shutdown → cancel consumer task, stop watcher thread

    """
    from quill.reactive.watcher import FileWatcher

    watcher = FileWatcher(config)
    _task: asyncio.Task[None] | None = None

    @app.on_startup
    async def _start_event_consumer() -> None:
        nonlocal _task

        async def _consume_events() -> None:
            async for event in watcher.changes():
                try:
                    await dispatcher.handle_change(event)
                except Exception as exc:
                    print(f"  Dispatch error: {event.path.name}: {exc}", file=sys.stderr)

        watcher.start()
        _task = asyncio.create_task(_consume_events())

    @app.on_shutdown
    async def _stop_event_consumer() -> None:
        if _task is not None and not _task.done():
            _task.cancel()
        watcher.stop()

    return watcher


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start the live-editing server.

    Compiles the stylesheet once, then serves the editable page while
    watching the document and stylesheet files for changes.

    Args:
        root: Project directory holding the document and stylesheet.
        **kwargs: Override QuillConfig fields.

    """
    from quill.banner import print_banner
    from quill.observability import EventLog, StackCollector
    from quill.reactive.broadcaster import Broadcaster
    from quill.reactive.dispatcher import ChangeDispatcher
    from quill.style.compiler import StyleCompiler

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    collector = StackCollector(EventLog())
    broadcaster = Broadcaster()
    compiler = StyleCompiler(config, collector)
    style_ok = compiler.compile()

    app = create_app(config, broadcaster, collector, debug=True)
    dispatcher = ChangeDispatcher(compiler, broadcaster, collector)
    _start_watcher(config, dispatcher, app)

    warnings: list[str] = []
    if not style_ok:
        warnings.append(f"{config.style_source} did not compile; serving previous CSS")
    if not config.document_path.is_file():
        warnings.append(f"{config.document} not found; page requests will fail")

    print_banner(
        config,
        mode="dev",
        load_ms=(time.perf_counter() - t0) * 1000,
        warnings=warnings,
    )

    app.run(host=config.host, port=config.port, lifecycle_collector=collector)


def compile_style(root: str | Path = ".", **kwargs: object) -> bool:
    """Run the style pipeline once.  Returns True if CSS was written."""
    from quill.banner import print_banner
    from quill.style.compiler import StyleCompiler

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()
    ok = StyleCompiler(config).compile()

    print_banner(config, mode="compile", load_ms=(time.perf_counter() - t0) * 1000)
    return ok
