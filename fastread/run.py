from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich.logging import RichHandler

from .app import ReaderApp
from .config import BACKENDS, ReaderConfig, build_config
from .errors import ReaderError
from .text import TokenSource

_logger = logging.getLogger("fastread")


def parse_args(argv: Any = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show a text one word at a time at a fixed reading speed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fastread.run book.txt
  python -m fastread.run book.txt --wpm 300 --backend terminal
  python -m fastread.run --cfg reader.yaml --set font_size=48,high_quality=false
""",
    )
    parser.add_argument("text", nargs="?", default=None, help="UTF-8 text file to read.")
    parser.add_argument(
        "--cfg",
        action="append",
        default=[],
        help="YAML config file; repeat to merge several (later files win).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        default=None,
        help="Comma-separated key=value overrides, e.g. words_per_minute=300,font_size=48.",
    )
    parser.add_argument("--wpm", type=int, default=None, help="Reading speed in words per minute.")
    parser.add_argument("--font", default=None, help="Font name, resolved as <fonts_dir>/<name>.ttf.")
    parser.add_argument("--font-size", type=int, default=None)
    parser.add_argument("--fonts-dir", default=None)
    parser.add_argument("--backend", choices=list(BACKENDS), default=None)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file (the terminal backend defaults to fastread.log).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level.")
    return parser.parse_args(argv)


def configure_logging(cfg: ReaderConfig, log_file: Optional[Path], verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = []
    if log_file is None and cfg.backend == "terminal":
        log_file = Path("fastread.log")
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handlers.append(file_handler)
    else:
        handlers.append(RichHandler(show_path=False, rich_tracebacks=True))
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)


def _make_frontend(cfg: ReaderConfig) -> Any:
    if cfg.backend == "terminal":
        from .ui.terminal import TerminalFrontend

        return TerminalFrontend(cfg)
    from .ui.window import WindowFrontend

    return WindowFrontend(cfg)


def main(argv: Any = None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_config(
            args.cfg,
            args.overrides,
            text_path=args.text,
            words_per_minute=args.wpm,
            font_name=args.font,
            font_size=args.font_size,
            fonts_dir=args.fonts_dir,
            backend=args.backend,
        )
    except (ReaderError, OSError) as exc:
        print(f"fastread: {exc}", file=sys.stderr)
        return 1

    configure_logging(cfg, args.log_file, args.verbose)

    try:
        tokens = TokenSource.load(cfg.text_path)
        with _make_frontend(cfg) as frontend:
            app = ReaderApp(cfg, tokens, frontend, frontend, frontend.fonts)
            app.start()
            app.run()
    except (ReaderError, OSError) as exc:
        _logger.error("Startup failed: %s", exc)
        return 1
    if app.render_failures:
        _logger.warning("%d repaint(s) failed", app.render_failures)
    return 0


if __name__ == "__main__":
    sys.exit(main())
