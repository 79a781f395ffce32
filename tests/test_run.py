from __future__ import annotations

import logging
from typing import Any, List, Optional

import pytest
from rich.logging import RichHandler

from fastread import run
from fastread.config import ReaderConfig
from fastread.input import InputEvent, Quit
from fastread.ui.base import FontCache


class _QuitAfterFirstFrame:
    def __init__(self, cfg: ReaderConfig) -> None:
        self.cfg = cfg
        self.fonts = FontCache(lambda name, size: (name, size))
        self.drawn: List[str] = []
        self.closed = False

    def __enter__(self) -> "_QuitAfterFirstFrame":
        return self

    def __exit__(self, *args: Any) -> None:
        self.fonts.close()
        self.closed = True

    def wait_event(self, timeout: float) -> Optional[InputEvent]:
        return Quit() if self.drawn else None

    def clear(self, color) -> None:
        pass

    def draw_centered(self, font: Any, text: str) -> None:
        self.drawn.append(text)

    def present(self) -> None:
        pass


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def frontends(monkeypatch) -> List[_QuitAfterFirstFrame]:
    made: List[_QuitAfterFirstFrame] = []

    def factory(cfg: ReaderConfig) -> _QuitAfterFirstFrame:
        made.append(_QuitAfterFirstFrame(cfg))
        return made[-1]

    monkeypatch.setattr(run, "_make_frontend", factory)
    return made


def test_normal_quit_exits_zero(tmp_path, frontends) -> None:
    book = tmp_path / "book.txt"
    book.write_text("Hello, world!", encoding="utf-8")
    code = run.main([str(book), "--log-file", str(tmp_path / "run.log")])
    assert code == 0
    assert frontends[0].drawn == ["Hello"]
    assert frontends[0].closed is True


def test_missing_text_file_exits_one_and_logs(tmp_path, frontends) -> None:
    log_file = tmp_path / "run.log"
    code = run.main([str(tmp_path / "missing.txt"), "--log-file", str(log_file)])
    assert code == 1
    assert frontends == []
    assert log_file.exists()
    assert "Startup failed" in log_file.read_text(encoding="utf-8")


def test_invalid_utf8_text_still_starts(tmp_path, frontends) -> None:
    book = tmp_path / "latin1.txt"
    book.write_bytes(b"caf\xe9 au lait")
    assert run.main([str(book), "--log-file", str(tmp_path / "run.log")]) == 0
    assert frontends[0].drawn == ["caf"]


@pytest.mark.parametrize(
    "argv",
    [
        ["--wpm", "0"],
        ["--set", "words_per_minute=-3"],
        ["--set", "font_size"],
        ["--set", "display.font_size=40"],
    ],
)
def test_bad_configuration_exits_one(tmp_path, frontends, argv: List[str], capsys) -> None:
    code = run.main([str(tmp_path / "book.txt"), *argv])
    assert code == 1
    assert frontends == []
    assert "fastread:" in capsys.readouterr().err


def test_bad_arguments_exit_two(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main(["--backend", "sdl"])
    assert excinfo.value.code == 2


def test_terminal_backend_logs_to_file_by_default(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    run.configure_logging(ReaderConfig(backend="terminal"), None, verbose=False)
    handlers = logging.getLogger().handlers
    assert any(isinstance(h, logging.FileHandler) for h in handlers)
    assert (tmp_path / "fastread.log").exists()


def test_window_backend_logs_through_rich(tmp_path) -> None:
    run.configure_logging(ReaderConfig(), None, verbose=True)
    root = logging.getLogger()
    assert any(isinstance(h, RichHandler) for h in root.handlers)
    assert root.level == logging.DEBUG
