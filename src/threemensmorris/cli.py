from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .board import ADJACENCY, SLOTS, WIN_LINES
from .config import GameConfig
from .engine import Game, Phase
from .errors import ConfigError
from .gamelog import open_event_log
from .win import line_product

COMMANDS = ("place", "select", "move", "reset")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tmm", description="Three Men's Morris")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_play = sub.add_parser("play", help="Open the game window (pygame)")
    p_play.add_argument("--speed", type=float, default=None, help="Token slide speed in px/s (default: 400)")
    p_play.add_argument("--fps", type=int, default=None, help="Frame rate cap (default: 60)")
    p_play.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Event log path (default: $TMM_LOG_FILE, $TMM_LOG_DIR/game.log or ./game.log)",
    )

    p_sim = sub.add_parser(
        "simulate",
        help="Play a scripted game headlessly, e.g. \"place 0; place 1; select 4; move 1\"",
    )
    p_sim.add_argument("--moves", help="Semicolon-separated commands: place S, select S, move S, reset")
    p_sim.add_argument("--stdin", action="store_true", help="Read one command per line from stdin")
    p_sim.add_argument("--log-file", type=Path, default=None, help="Also append events to this file")

    sub.add_parser("board", help="Show slot primes, adjacency and winning-line products")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pygame"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", None) or getattr(getattr(mod, "version", None), "ver", "?")
            print(f"{pkg}={ver}")


def parse_command(raw: str) -> Tuple[str, Optional[int]]:
    """Parse ``place 3`` style commands. Raises ValueError on bad input."""
    parts = raw.split()
    if not parts or parts[0].lower() not in COMMANDS:
        raise ValueError(f"Unknown command: {raw!r}")
    name = parts[0].lower()
    if name == "reset":
        if len(parts) != 1:
            raise ValueError(f"reset takes no argument: {raw!r}")
        return name, None
    if len(parts) != 2 or not parts[1].isdigit() or not 0 <= int(parts[1]) < len(SLOTS):
        raise ValueError(f"{name} needs one slot 0..8: {raw!r}")
    return name, int(parts[1])


def run_script(game: Game, commands: Iterable[Tuple[str, Optional[int]]]) -> Game:
    """Apply parsed commands; slides complete before the next command.

    A reset after a win goes back to a fresh placement phase.
    """
    for name, slot in commands:
        if name == "reset":
            accepted = game.reset()
            # no title screen to click through headlessly
            if game.phase == Phase.START:
                game.begin()
        elif name == "place":
            accepted = game.place(slot)
        elif name == "select":
            accepted = game.select_slot(slot)
        else:
            accepted = game.move_selected(slot)
            while game.in_transit:
                game.update(1.0)
        logging.debug("%s %s -> %s board=%s", name, "" if slot is None else slot,
                      "ok" if accepted else "ignored", game.view().board)
    return game


def _cmd_simulate(ns: argparse.Namespace) -> int:
    if ns.stdin:
        raw_cmds: List[str] = [line.strip() for line in sys.stdin]
    else:
        raw_cmds = [c.strip() for c in (ns.moves or "").split(";")]
    raw_cmds = [c for c in raw_cmds if c]
    try:
        commands = [parse_command(c) for c in raw_cmds]
    except ValueError as e:
        logging.error("%s", e)
        return 2
    with open_event_log(ns.log_file) as events:
        game = Game(event_log=events)
        game.begin()
        run_script(game, commands)
    view = game.view()
    logging.info(
        "phase=%s turn=%s winner=%s board=%s",
        view.phase.value,
        view.turn.name,
        view.winner.name if view.winner else "-",
        view.board,
    )
    return 0


def _cmd_board() -> int:
    print("slot prime neighbours")
    for s in SLOTS:
        print(f"{s.index:>4} {s.prime:>5} {' '.join(str(n) for n in sorted(ADJACENCY[s.index]))}")
    print("line  product")
    for line in WIN_LINES:
        print(f"{''.join(map(str, line)):>4} {line_product(line):>8}")
    return 0


def _cmd_play(ns: argparse.Namespace) -> int:
    try:
        cfg = GameConfig.from_env().with_overrides(speed=ns.speed, fps=ns.fps, log_file=ns.log_file)
    except ConfigError as e:
        logging.error("%s", e)
        return 2
    from . import app

    with open_event_log(cfg.log_file) as events:
        return app.run(cfg, events)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("threemensmorris"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "simulate":
        return _cmd_simulate(ns)
    if ns.cmd == "board":
        return _cmd_board()
    if ns.cmd == "play":
        return _cmd_play(ns)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
