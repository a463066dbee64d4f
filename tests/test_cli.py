"""Tests for quill._cli — argument parsing and command dispatch."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from quill._cli import _build_parser, main


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_dev_default_args(self) -> None:
        args = _build_parser().parse_args(["dev"])
        assert args.command == "dev"
        assert args.root == "."
        assert args.host is None
        assert args.port is None

    def test_dev_with_host_and_port(self) -> None:
        args = _build_parser().parse_args(["dev", "page/", "--host", "0.0.0.0", "--port", "9000"])
        assert args.root == "page/"
        assert args.host == "0.0.0.0"
        assert args.port == 9000

    def test_compile_default_root(self) -> None:
        args = _build_parser().parse_args(["compile"])
        assert args.command == "compile"
        assert args.root == "."

    def test_no_command(self) -> None:
        assert _build_parser().parse_args([]).command is None


class TestMain:
    """main — dispatch to quill.app."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 0
        assert "quill" in capsys.readouterr().out

    def test_dev_dispatch(self) -> None:
        with patch("quill.app.dev") as dev:
            main(["dev", "page/", "--port", "9000"])
        dev.assert_called_once_with(root="page/", host=None, port=9000)

    def test_compile_success_exit_code(self) -> None:
        with patch("quill.app.compile_style", return_value=True), pytest.raises(SystemExit) as exc:
            main(["compile", "page/"])
        assert exc.value.code == 0

    def test_compile_failure_exit_code(self) -> None:
        with patch("quill.app.compile_style", return_value=False), pytest.raises(SystemExit) as exc:
            main(["compile"])
        assert exc.value.code == 1
