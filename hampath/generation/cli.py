"""Command-line interface for generating and playing levels."""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from hampath.core.logging import ConsoleRunLogger, NullRunLogger
from hampath.engine.config import SessionConfig
from hampath.engine.render import render_ascii
from hampath.engine.session import GameState, PuzzleSession
from hampath.generation.config import DEFAULT_POLICY, GeneratorConfig
from hampath.generation.generator import GenerationReport, LevelGenerator

PLAY_HELP = "commands: '<x> <y>' rotate, r reset, p pause, . next level, , previous level, q quit"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Optional argument list (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Generate Hamiltonian path rotation puzzles, or play one in the terminal."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--level", type=int, default=3, help="Level number (grid size grows with it)")
        p.add_argument("--seed", type=int, default=None, help="Seed for reproducible levels")
        p.add_argument(
            "--blocked-fraction",
            type=float,
            default=0.5,
            help="Share of non-solution edges to block",
        )
        p.add_argument(
            "--prefer-idle",
            action="store_true",
            help="Block edges no pointer currently uses before live ones",
        )
        p.add_argument(
            "--all-shuffle-passes",
            type=int,
            default=12,
            help="Full-board scramble passes before blocking",
        )

    generate = sub.add_parser("generate", help="Print a freshly generated level")
    add_common(generate)
    generate.add_argument("--count", type=int, default=1, help="Number of levels to print")
    generate.add_argument("--verbose", action="store_true", help="Log generation metrics")

    play = sub.add_parser("play", help="Play a level, reading commands from stdin")
    add_common(play)

    args = parser.parse_args(argv)
    if not DEFAULT_POLICY.min_level <= args.level <= DEFAULT_POLICY.max_level:
        parser.error(
            f"--level must be between {DEFAULT_POLICY.min_level} and {DEFAULT_POLICY.max_level}"
        )
    try:
        args.config = GeneratorConfig(
            seed=args.seed,
            blocked_fraction=args.blocked_fraction,
            prefer_idle_edges=args.prefer_idle,
            all_shuffle_passes=args.all_shuffle_passes,
        )
    except ValueError as exc:
        parser.error(str(exc))
    return args


def format_report(report: GenerationReport) -> str:
    size_x, size_y = report.extents
    lines = [
        f"level {report.level}: {size_x}x{size_y}",
        f"  shuffle rotations: {report.shuffle_rotations}",
        f"  join: {report.join.passes} passes, {report.join.rotations} rotations",
        f"  scramble rotations: {report.all_shuffle_rotations}",
        f"  rejoin: {report.rejoin.passes} passes, {report.rejoin.rotations} rotations",
        f"  blocked edges: {report.blocked_edges}",
        f"  converged: {report.converged}",
        f"  path blocked: {report.path_is_blocked}",
    ]
    return "\n".join(lines)


def format_status(session: PuzzleSession) -> str:
    graph = session.graph
    return (
        f"level {session.level} | {session.state.value} | "
        f"blocked={graph.path_is_blocked} win={graph.path_is_win}"
    )


def run_generate(args: argparse.Namespace) -> None:
    logger = ConsoleRunLogger() if args.verbose else NullRunLogger()
    logger.set_tags({"command": args.command, "seed": args.seed, "count": args.count})
    generator = LevelGenerator(args.config, logger=logger)
    for _ in range(args.count):
        level = generator.create(args.level)
        print(render_ascii(level.graph))
        print(format_report(level.report))
        print()
    logger.close()


def run_play(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> None:
    generator = LevelGenerator(args.config)
    session = PuzzleSession(generator, SessionConfig(initial_level=args.level))

    def show() -> None:
        print(render_ascii(session.graph), file=stdout)
        print(format_status(session), file=stdout)

    print(PLAY_HELP, file=stdout)
    show()
    for raw in stdin:
        line = raw.strip()
        if not line:
            continue
        if line == "q":
            break
        if line == "r":
            session.reset()
        elif line == "p":
            session.toggle_pause()
        elif line == ".":
            session.next_level()
        elif line == ",":
            session.previous_level()
        else:
            parts = line.split()
            if len(parts) != 2 or not all(p.lstrip("-").isdigit() for p in parts):
                print(f"[warn] unrecognised command {line!r}; {PLAY_HELP}", file=stdout)
                continue
            was_won = session.state is GameState.WON
            if not session.rotate(int(parts[0]), int(parts[1])) and not was_won:
                print("[info] that cell cannot be rotated", file=stdout)
        show()
        if session.state is GameState.WON:
            print("solved! a command that does not rotate starts a new board", file=stdout)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the hampath CLI.

    Args:
        argv: Optional argument list (defaults to sys.argv)
    """
    args = parse_args(argv)
    if args.command == "generate":
        run_generate(args)
    else:
        run_play(args, sys.stdin, sys.stdout)


__all__ = ["main", "parse_args", "format_report", "run_play"]


if __name__ == "__main__":
    main()
