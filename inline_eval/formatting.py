"""
Formatting of evaluation results for inline display.

Widths are measured in terminal columns: wide and full-width East Asian
characters count double, line breaks count zero.
"""

import unicodedata
from string import Formatter
from typing import Any, Callable

from .core import StyleRun

LINE_BREAK_PREFIX = " \n"
TRUNCATION_MARKER = "...\nResult truncated."
MAX_WIDTH_FACTOR = 3


def char_width(char: str) -> int:
    if char in "\r\n":
        return 0
    return 2 if unicodedata.east_asian_width(char) in "WF" else 1


def display_width(text: str) -> int:
    """Calculate the display width of a string in columns."""
    return sum(char_width(char) for char in text)


def widest_line(text: str) -> int:
    """Display width of the widest line in text."""
    return max((display_width(line) for line in text.split("\n")), default=0)


def default_format(prefix: str) -> str:
    """The template used when a call does not provide one: ' => {} '."""
    return " " + prefix.replace("{", "{{").replace("}", "}}") + "{} "


def validate_template(template: str) -> str:
    """
    Check that template has exactly one replacement field.

    Returns the field name ("" for an automatic positional field).
    """
    fields = [name for _, name, _, _ in Formatter().parse(template) if name is not None]
    if len(fields) != 1:
        raise ValueError(
            f"Display format must contain exactly one replacement field, got {len(fields)}: {template!r}"
        )
    return fields[0]


def render_value(value: Any, printer: Callable[[Any], str] = repr) -> str:
    """Print value for display, dropping trailing whitespace."""
    return printer(value).rstrip()


def apply_template(template: str, printed: str) -> str:
    """Substitute the printed value into template's single field."""
    name = validate_template(template)
    if name == "" or name.isdigit():
        args = [printed] * (int(name) + 1 if name else 1)
        return template.format(*args)
    return template.format(**{name: printed})


def needs_line_break(text: str, available: int) -> bool:
    """
    Whether text should start on the line below its anchor.

    True when text has a line break followed by more text, or when it is wider
    than the columns left on the anchor's line.
    """
    newline = text.find("\n")
    if newline != -1 and newline < len(text) - 1:
        return True
    return display_width(text) > available


def break_line(text: str, runs: list[StyleRun]) -> tuple[str, list[StyleRun]]:
    """Prefix text with a line break, shifting its style runs to match."""
    delta = len(LINE_BREAK_PREFIX)
    return LINE_BREAK_PREFIX + text, [run.shifted(delta) for run in runs]


def truncate(text: str, runs: list[StyleRun], width: int) -> tuple[str, list[StyleRun]]:
    """
    Cap text at MAX_WIDTH_FACTOR viewport widths.

    Longer text is cut to the longest prefix that fits in that many columns
    and followed by TRUNCATION_MARKER, which carries no style. Shorter text is
    returned as is.
    """
    limit = MAX_WIDTH_FACTOR * width
    if display_width(text) <= limit:
        return text, runs

    cut = 0
    used = 0
    for char in text:
        used += char_width(char)
        if used > limit:
            break
        cut += 1

    clipped = []
    for run in runs:
        if run.start >= cut:
            continue
        clipped.append(StyleRun(run.start, min(run.end, cut), run.faces))
    return text[:cut] + TRUNCATION_MARKER, clipped


def uniform_runs(text: str, face: str) -> list[StyleRun]:
    """One run giving face to all of text."""
    if not text:
        return []
    return [StyleRun(0, len(text), (face,))]


def layer_under(text: str, syntax_runs: list[tuple[int, int, str]], face: str) -> list[StyleRun]:
    """
    Combine syntax faces with a base face of lower priority.

    Every character gets face; characters covered by a syntax run also get
    the syntax face ahead of it. Returns contiguous, non-overlapping runs.
    """
    if not text:
        return []

    boundaries = {0, len(text)}
    for start, end, _ in syntax_runs:
        boundaries.add(max(0, min(start, len(text))))
        boundaries.add(max(0, min(end, len(text))))
    points = sorted(boundaries)

    runs = []
    for start, end in zip(points, points[1:]):
        faces = [syntax_face for s, e, syntax_face in syntax_runs if s <= start and end <= e]
        runs.append(StyleRun(start, end, tuple(faces) + (face,)))
    return runs
