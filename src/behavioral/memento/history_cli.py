from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, List, Optional, TextIO

from behavioral.memento.history_manager import HistoryManager, HistoryPolicy, NoHistoryError
from behavioral.memento.text_editor_memento import EditingSession, TextEditor

__all__ = [
    "build_parser",
    "run_commands",
    "main",
]

logger = logging.getLogger(__name__)


# ==========================
# Module: history_cli
# Purpose: Line-oriented driver for an EditingSession over a TextEditor.
#          One command per line: set/insert/delete/move edit the buffer,
#          undo/redo/show/history/clear inspect or navigate, quit stops.
# ==========================


class CommandError(ValueError):
    """
    Raised when an input line cannot be interpreted.
    """


def _parse_int(arg: str, name: str) -> int:
    try:
        return int(arg)
    except ValueError as exc:
        raise CommandError(f"{name} expects an integer, got {arg!r}") from exc


def _render_history(session: EditingSession) -> List[str]:
    history = session.history
    lines = []
    for idx, memento in enumerate(history.snapshots()):
        marker = "*" if idx == history.position else " "
        lines.append(f"{marker} {idx}: {memento.text!r}")
    return lines


def _execute(session: EditingSession, editor: TextEditor, name: str, arg: str) -> List[str]:
    """
    Runs one command against the session.

    :return: Lines to print.
    :raises CommandError: On an unknown command or a bad argument.
    :raises NoHistoryError: On undo/redo with nothing to move to.
    """
    if name == "set":
        session.edit(lambda ed: ed.set_text(arg))
        return []
    if name == "insert":
        session.edit(lambda ed: ed.insert(arg))
        return []
    if name == "delete":
        count = _parse_int(arg, "delete")
        if count < 0:
            raise CommandError(f"delete expects a non-negative count, got {count}")
        session.edit(lambda ed: ed.delete(count))
        return []
    if name == "move":
        pos = _parse_int(arg, "move")
        session.edit(lambda ed: ed.move_cursor(pos))
        return []
    if name == "undo":
        session.undo()
        return [editor.text]
    if name == "redo":
        session.redo()
        return [editor.text]
    if name == "show":
        return [editor.text]
    if name == "history":
        return _render_history(session)
    if name == "clear":
        session.reset()
        return []
    raise CommandError(f"unknown command {name!r}")


def run_commands(lines: Iterable[str], session: EditingSession, out: TextIO) -> int:
    """
    Feeds input lines to the session until exhausted or `quit`.

    Failures of a single line are reported and the loop continues.

    :param lines: Raw input lines.
    :param session: Session whose originator is a TextEditor.
    :param out: Stream receiving command output.
    :return: Number of commands executed successfully.
    """
    editor = session.originator
    if not isinstance(editor, TextEditor):
        raise TypeError("run_commands requires a session over a TextEditor")

    executed = 0
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        name, _, arg = line.lstrip().partition(" ")
        name = name.strip().lower()
        if name == "quit":
            break
        try:
            output = _execute(session, editor, name, arg)
        except NoHistoryError as exc:
            out.write(f"{exc}\n")
            continue
        except CommandError as exc:
            logger.info("Rejected input line %r: %s", line, exc)
            out.write(f"error: {exc}\n")
            continue
        for text in output:
            out.write(f"{text}\n")
        executed += 1
    return executed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memento-history",
        description="Edit a text buffer line by line with undo/redo history.",
    )
    parser.add_argument("--script", type=argparse.FileType("r"), default=None,
                        help="read commands from FILE instead of stdin")
    parser.add_argument("--text", default="", help="initial buffer contents")
    parser.add_argument("--max-entries", type=int, default=None,
                        help="keep at most N snapshots (default: unbounded)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging verbosity (default: WARNING)")
    return parser


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    out = out or sys.stdout

    try:
        policy = HistoryPolicy(max_entries=args.max_entries)
    except ValueError as exc:
        parser.error(str(exc))

    session = EditingSession(TextEditor(args.text), HistoryManager(policy))
    source = args.script or sys.stdin
    try:
        executed = run_commands(source, session, out)
    finally:
        if args.script is not None:
            args.script.close()
    logger.info("Executed %d command(s)", executed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
