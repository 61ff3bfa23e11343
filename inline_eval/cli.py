"""
Command-line interface for inline evaluation.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .commands import get_command, list_commands
from .config import PRINTERS, OverlayConfig
from .editor import MemoryEditor, Viewport
from .evaluator import PythonEvaluator
from .manager import AnnotationManager


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Evaluate code and show the result inline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluate line 12 of a script, running lines 1-11 first
  inline-eval eval script.py --line 12

  # Narrow display, plain styling
  inline-eval eval script.py --line 3 --width 40 --no-font-lock

  # List available commands
  inline-eval list-commands
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    eval_parser = subparsers.add_parser("eval", help="Evaluate a line of a file")
    eval_parser.add_argument("file", help="Python file to evaluate")
    eval_parser.add_argument(
        "--line", "-l",
        type=int,
        required=True,
        help="Line to evaluate (1-indexed)",
    )
    eval_parser.add_argument(
        "--width", "-w",
        type=int,
        default=80,
        help="Viewport width in columns",
    )
    eval_parser.add_argument(
        "--prefix", "-p",
        default="=> ",
        help="Text shown before the result",
    )
    eval_parser.add_argument(
        "--printer",
        default="repr",
        choices=sorted(PRINTERS),
        help="How values are printed",
    )
    eval_parser.add_argument(
        "--no-font-lock",
        action="store_true",
        help="Style the result uniformly instead of syntax coloring it",
    )
    eval_parser.add_argument(
        "--command", "-c",
        dest="run_command",
        default="eval-line",
        choices=list_commands(),
        help="Command to run with point at the end of the line",
    )

    subparsers.add_parser("list-commands", help="List available commands")
    subparsers.add_parser("show-config", help="Print the default configuration")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "eval":
        return run_eval(args)
    elif args.command == "list-commands":
        run_list_commands()
    elif args.command == "show-config":
        print(json.dumps(OverlayConfig().to_dict(), indent=2))
    else:
        parser.print_help()
    return 0


def run_eval(args) -> int:
    """Evaluate one line of a file and print the file with the result inline."""
    file_path = Path(args.file)
    if not file_path.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    editor = MemoryEditor(width=args.width)
    buffer = editor.open(file_path.read_text(), name=file_path.name)
    if not 1 <= args.line <= buffer.line_count:
        print(f"Error: Line {args.line} out of range [1, {buffer.line_count}]", file=sys.stderr)
        return 1

    line = args.line - 1
    editor.show(buffer, Viewport(
        first_line=max(0, line - editor.height // 2),
        height=editor.height,
        width=args.width,
    ))
    buffer.point = buffer.line_end(buffer.position_to_offset(line))

    evaluator = PythonEvaluator(filename=str(file_path))
    config = OverlayConfig(
        result_prefix=args.prefix,
        use_syntax_coloring=not args.no_font_lock,
        printer=PRINTERS[args.printer],
    )
    manager = AnnotationManager(editor, evaluator=evaluator, config=config)

    try:
        preamble = buffer.text[:buffer.position_to_offset(line)]
        if preamble.strip():
            evaluator.evaluate(preamble)
        with editor.command(buffer):
            get_command(args.run_command)(manager)
    except Exception as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(buffer.render())
    if editor.last_message is not None:
        print(f"{config.result_prefix}{editor.last_message}", file=sys.stderr)
    return 0


def run_list_commands():
    """List available commands."""
    print("Available commands:")
    for name in list_commands():
        doc = (get_command(name).__doc__ or "").strip()
        print(f"  {name}: {doc}")


if __name__ == "__main__":
    sys.exit(main())
