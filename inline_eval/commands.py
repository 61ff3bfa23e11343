"""
User-invocable commands.

Each command takes an AnnotationManager and acts on the editor's current
buffer. The editor binds them to keys; the registry maps command names to
the functions.
"""

from typing import Any, Callable

from .core import Span
from .manager import AnnotationManager


def eval_last_expression(manager: AnnotationManager) -> Any:
    """Evaluate the expression before point and show the result after it."""
    return manager.eval_at_point()


def eval_region(manager: AnnotationManager) -> Any:
    """Evaluate the text between mark and point."""
    buffer = manager.editor.current_buffer
    region = buffer.region
    if region is None:
        raise ValueError("The mark is not set, so there is no region")
    return manager.evaluate_and_annotate(region, buffer)


def eval_line(manager: AnnotationManager) -> Any:
    """Evaluate the line point is on."""
    buffer = manager.editor.current_buffer
    span = Span(buffer.line_start(buffer.point), buffer.line_end(buffer.point))
    return manager.evaluate_and_annotate(span, buffer)


def clear_results(manager: AnnotationManager) -> int:
    """Remove every result shown in the current buffer."""
    return manager.remove_by_category(manager.editor.current_buffer, "result")


# Registry of all available commands
COMMANDS: dict[str, Callable[[AnnotationManager], Any]] = {
    "eval-last-expression": eval_last_expression,
    "eval-region": eval_region,
    "eval-line": eval_line,
    "clear-results": clear_results,
}


def get_command(name: str) -> Callable[[AnnotationManager], Any]:
    """Get a command by name."""
    if name not in COMMANDS:
        raise ValueError(f"Unknown command: {name}. Available: {list(COMMANDS.keys())}")
    return COMMANDS[name]


def list_commands() -> list[str]:
    """List all available command names."""
    return list(COMMANDS.keys())
