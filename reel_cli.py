# reel_cli.py
"""
Console slideshow over a listing.

Usage
-----
    reelview --path r/pics
    reelview --path r/earthporn/top --interval 5 --auto 1 --prefs ~/.reelview.json

Commands (one per line on stdin)
--------------------------------
    n | <enter>   next item
    p             previous item
    <number>      jump to item (1-based)
    t             toggle auto-advance
    i <seconds>   set auto-advance interval
    r             retry after a failed page
    q             quit
"""

from __future__ import annotations

import argparse
import sys
import threading

from reelview.core.log import configure_logging
from reelview.inputs.settings import SettingsLoader
from reelview.render.console import render_screen
from reelview.viewer.loop import ViewerLoop
from reelview.viewer.state_machine import (
    Advance,
    Message,
    Retreat,
    Retry,
    SetIndex,
    SetInterval,
    ToggleAutoAdvance,
    ViewerStateMachine,
)

QUIT = "quit"


def parse_command(line: str) -> Message | str | None:
    """
    Map one input line to a viewer message, QUIT, or None (unrecognized).
    """
    text = line.strip().lower()
    if text in ("", "n", "next"):
        return Advance()
    if text in ("p", "prev"):
        return Retreat()
    if text in ("t", "toggle"):
        return ToggleAutoAdvance()
    if text in ("r", "retry"):
        return Retry()
    if text in ("q", "quit", "exit"):
        return QUIT
    if text.startswith("i "):
        return SetInterval(text[2:].strip())
    if text.isdigit():
        return SetIndex(int(text) - 1)
    return None


def _print_screen(machine: ViewerStateMachine) -> None:
    print(render_screen(machine.state, machine.current_item), flush=True)
    print("-" * 40, flush=True)


def _read_commands(loop: ViewerLoop) -> None:
    for line in sys.stdin:
        cmd = parse_command(line)
        if cmd == QUIT:
            break
        if cmd is None:
            print(f"unknown command: {line.strip()!r}", file=sys.stderr)
            continue
        loop.send(cmd)  # type: ignore[arg-type]
    loop.stop()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Listing slideshow")
    p.add_argument("--config", type=str, default=None, help="JSON settings file")
    p.add_argument("--path", type=str, default=None, help='Listing path, e.g. "r/pics"')
    p.add_argument("--origin", type=str, default=None)
    p.add_argument("--interval", type=int, default=None, help="Auto-advance interval (seconds)")
    p.add_argument("--auto", type=int, choices=(0, 1), default=None, help="Enable auto-advance")
    p.add_argument("--prefs", type=str, default=None, help="JSON preference file")
    p.add_argument("--log-file", type=str, default=None)
    p.add_argument("--verbose", "-v", action="count", default=0)

    args = p.parse_args(argv)

    level = "WARNING" if args.verbose == 0 else ("INFO" if args.verbose == 1 else "DEBUG")
    configure_logging(level, args.log_file)

    loader = SettingsLoader()
    try:
        settings = loader.load(args.config)
        settings = loader.with_overrides(
            settings,
            path=args.path,
            origin=args.origin,
            interval_s=args.interval,
            auto_advance=None if args.auto is None else bool(args.auto),
            prefs_path=args.prefs,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    loop = ViewerLoop(settings, on_change=_print_screen)
    threading.Thread(target=_read_commands, args=(loop,), name="reelview-stdin", daemon=True).start()
    try:
        loop.run()
    except KeyboardInterrupt:
        loop.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
