"""Tests for quill.app — route wiring and request handling."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from quill._errors import DocumentError, StyleError
from quill.app import (
    STATS_ENDPOINT,
    _start_watcher,
    create_app,
    page_response,
    save_response,
    stream_events,
    stylesheet_response,
)
from quill.config import QuillConfig
from quill.observability import DocumentSaved, EventLog, StackCollector
from quill.reactive.agent import EVENTS_ENDPOINT
from quill.reactive.broadcaster import Broadcaster

from .conftest import COMPILED_CSS, FakeRequest


def _body_text(response: object) -> str:
    body = response.body  # type: ignore[attr-defined]
    return body.decode("utf-8") if isinstance(body, bytes) else str(body)


@pytest.fixture
def collector() -> StackCollector:
    return StackCollector(EventLog())


class TestCreateApp:
    """create_app — every endpoint registered on the Chirp app."""

    def test_routes_registered(self, config: QuillConfig, collector: StackCollector) -> None:
        app = create_app(config, Broadcaster(), collector)
        route_names = [r.name for r in app._pending_routes if hasattr(r, "name")]
        for name in (
            "quill:document",
            "quill:stylesheet",
            "quill:events",
            "quill:stats",
            "quill:save",
        ):
            assert name in route_names

    def test_host_and_port_from_config(self, project: Path, collector: StackCollector) -> None:
        config = QuillConfig(root=project, host="0.0.0.0", port=9000)
        app = create_app(config, Broadcaster(), collector)
        assert app.config.host == "0.0.0.0"
        assert app.config.port == 9000

    def test_endpoint_constants(self) -> None:
        assert EVENTS_ENDPOINT == "/__quill/events"
        assert STATS_ENDPOINT == "/__quill/stats"


class TestPageResponse:
    """GET / — editable page."""

    def test_html_response(self, config: QuillConfig) -> None:
        response = page_response(config)
        assert response.status == 200
        assert response.content_type.startswith("text/html")
        assert '<p contenteditable="true">hello</p>' in _body_text(response)

    def test_missing_document_fails(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentError):
            page_response(QuillConfig(root=tmp_path))


class TestStylesheetResponse:
    """GET /index.css — compiled CSS, byte-identical."""

    def test_css_response(self, config: QuillConfig) -> None:
        response = stylesheet_response(config)
        assert response.status == 200
        assert response.content_type == "text/css"
        assert response.body == COMPILED_CSS.encode("utf-8")

    def test_bytes_served_verbatim(self, config: QuillConfig) -> None:
        raw = "/* ünïcode */\r\nbody{color:red}\n".encode()
        config.style_output_path.write_bytes(raw)
        assert stylesheet_response(config).body == raw

    def test_missing_css_fails(self, config: QuillConfig) -> None:
        config.style_output_path.unlink()
        with pytest.raises(StyleError, match="Cannot read stylesheet"):
            stylesheet_response(config)


class TestSaveResponse:
    """POST / — persist an edit."""

    @pytest.mark.asyncio
    async def test_persists_unmarked(self, config: QuillConfig) -> None:
        request = FakeRequest("POST", b'<p contenteditable="true">edited</p>')
        response = await save_response(config, request)  # type: ignore[arg-type]

        assert response.status == 200
        assert _body_text(response) == ""
        assert config.document_path.read_text(encoding="utf-8") == "<p>edited</p>"

    @pytest.mark.asyncio
    async def test_records_save(self, config: QuillConfig, collector: StackCollector) -> None:
        request = FakeRequest("POST", b"  <p>x</p>  ")
        await save_response(config, request, collector)  # type: ignore[arg-type]

        (event,) = collector.log.query(event_type=DocumentSaved)
        assert event.size == len("<p>x</p>")
        assert event.path == str(config.document_path)

    @pytest.mark.asyncio
    async def test_utf8_body(self, config: QuillConfig) -> None:
        request = FakeRequest("POST", "<p>café</p>".encode())
        await save_response(config, request)  # type: ignore[arg-type]
        assert config.document_path.read_text(encoding="utf-8") == "<p>café</p>"

    @pytest.mark.asyncio
    async def test_does_not_broadcast(self, config: QuillConfig) -> None:
        from quill.reactive.broadcaster import SSEConnection

        broadcaster = Broadcaster()
        conn = SSEConnection(client_id="c1")
        broadcaster.subscribe(conn)

        await save_response(config, FakeRequest("POST", b"<p>x</p>"))  # type: ignore[arg-type]
        assert conn.queue.empty()


class TestEndToEnd:
    """Requests routed through Chirp's test client."""

    @pytest.mark.asyncio
    async def test_get_page(self, config: QuillConfig, collector: StackCollector) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert '<p contenteditable="true">hello</p>' in _body_text(response)

    @pytest.mark.asyncio
    async def test_get_stylesheet(self, config: QuillConfig, collector: StackCollector) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.get("/index.css")
            assert response.status == 200
            assert _body_text(response) == COMPILED_CSS

    @pytest.mark.asyncio
    async def test_get_stylesheet_with_cache_buster(
        self, config: QuillConfig, collector: StackCollector
    ) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.get("/index.css?t=1700000000000")
            assert response.status == 200
            assert _body_text(response) == COMPILED_CSS

    @pytest.mark.asyncio
    async def test_post_root_saves(self, config: QuillConfig, collector: StackCollector) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.post("/", body=b'<p contenteditable="true">posted</p>')
            assert response.status == 200
            assert _body_text(response) == ""

        assert config.document_path.read_text(encoding="utf-8") == "<p>posted</p>"
        assert len(collector.log.query(event_type=DocumentSaved)) == 1

    @pytest.mark.asyncio
    async def test_post_any_path_saves(
        self, config: QuillConfig, collector: StackCollector
    ) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.post("/notes/draft", body=b"<p>elsewhere</p>")
            assert response.status == 200

        assert config.document_path.read_text(encoding="utf-8") == "<p>elsewhere</p>"

    @pytest.mark.asyncio
    async def test_get_unknown_path_not_served(
        self, config: QuillConfig, collector: StackCollector
    ) -> None:
        from chirp.testing.client import TestClient

        app = create_app(config, Broadcaster(), collector)
        async with TestClient(app) as client:
            response = await client.get("/nope")
            assert response.status in (404, 405)

        assert config.document_path.read_text(encoding="utf-8") == "<p>hello</p>"


class TestStartWatcher:
    """_start_watcher — lifecycle hooks wire watcher → dispatcher."""

    def test_registers_startup_and_shutdown_hooks(
        self, config: QuillConfig, collector: StackCollector
    ) -> None:
        app = create_app(config, Broadcaster(), collector)
        hooks_before = len(app._startup_hooks)
        shutdown_before = len(app._shutdown_hooks)

        watcher = _start_watcher(config, MagicMock(), app)

        assert len(app._startup_hooks) == hooks_before + 1
        assert len(app._shutdown_hooks) == shutdown_before + 1
        assert watcher.is_running is False


class TestEventStream:
    """stream_events — one SSE client for the lifetime of the stream."""

    @pytest.mark.asyncio
    async def test_subscribes_on_open(self) -> None:
        broadcaster = Broadcaster()
        stream = stream_events(broadcaster)
        pending = asyncio.ensure_future(anext(stream))
        await asyncio.sleep(0)

        assert broadcaster.client_count == 1

        await broadcaster.broadcast("style")
        event = await asyncio.wait_for(pending, timeout=1.0)
        assert event.data == "style"

        await stream.aclose()

    @pytest.mark.asyncio
    async def test_unsubscribes_on_close(self) -> None:
        broadcaster = Broadcaster()
        stream = stream_events(broadcaster)
        pending = asyncio.ensure_future(anext(stream))
        await asyncio.sleep(0)
        await broadcaster.broadcast("reload")
        await asyncio.wait_for(pending, timeout=1.0)

        await stream.aclose()
        assert broadcaster.client_count == 0

    @pytest.mark.asyncio
    async def test_each_stream_is_its_own_client(self) -> None:
        broadcaster = Broadcaster()
        first = stream_events(broadcaster)
        second = stream_events(broadcaster)
        tasks = [asyncio.ensure_future(anext(s)) for s in (first, second)]
        await asyncio.sleep(0)

        assert broadcaster.client_count == 2
        assert await broadcaster.broadcast("reload") == 2

        await asyncio.gather(*tasks)
        await first.aclose()
        assert broadcaster.client_count == 1
        await second.aclose()
        assert broadcaster.client_count == 0
