"""
Expression boundary scanning.

Just enough syntax awareness to find the expression that ends at a given
offset: balanced brackets, double-quoted strings with backslash escapes,
line comments, and runs of symbol characters. Reader prefixes such as a
leading quote are kept with the expression they prefix.
"""

import re

OPENERS = "([{"
CLOSERS = ")]}"
PREFIX_CHARS = "'`~@#^"
WHITESPACE = " \t\r\n\f"
COMMENT_CHAR = ";"

# Token classes for fontify(); first match wins
_TOKEN_RE = re.compile(
    r'(?P<string>"(?:[^"\\]|\\.)*"?)'
    r"|(?P<comment>;[^\n]*)"
    r"|(?P<keyword>(?<![\w:]):[\w\-.*+!?<>=/]+)"
    r"|(?P<number>(?<![\w\-.])[-+]?\d[\w.]*)"
    r"|(?P<constant>\b(?:nil|true|false|None|True|False)\b)",
)

TOKEN_FACES = {
    "string": "string",
    "comment": "comment",
    "keyword": "constant",
    "number": "constant",
    "constant": "constant",
}


def _is_symbol_char(char: str) -> bool:
    return not (char in WHITESPACE or char in OPENERS or char in CLOSERS
                or char == '"' or char == COMMENT_CHAR)


def skip_whitespace_backward(text: str, pos: int) -> int:
    """Move pos back over blanks and line breaks."""
    pos = min(max(pos, 0), len(text))
    while pos > 0 and text[pos - 1] in WHITESPACE:
        pos -= 1
    return pos


def skip_whitespace_forward(text: str, pos: int) -> int:
    pos = min(max(pos, 0), len(text))
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def _string_start(text: str, end: int) -> int:
    """Offset of the opening quote for the string whose closing quote is at end - 1."""
    pos = end - 2
    while pos >= 0:
        if text[pos] == '"':
            backslashes = 0
            probe = pos - 1
            while probe >= 0 and text[probe] == "\\":
                backslashes += 1
                probe -= 1
            if backslashes % 2 == 0:
                return pos
        pos -= 1
    return 0


def _comment_start(text: str, pos: int) -> int:
    """
    Offset of the line comment covering pos, or -1.

    Scans the line containing pos from its start so that comment characters
    inside strings are ignored.
    """
    line_start = text.rfind("\n", 0, pos) + 1
    in_string = False
    i = line_start
    while i < pos:
        char = text[i]
        if in_string:
            if char == "\\":
                i += 1
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == COMMENT_CHAR:
            return i
        i += 1
    return -1


def _skip_comments_backward(text: str, pos: int) -> int:
    """Skip whitespace and trailing line comments before pos."""
    while True:
        pos = skip_whitespace_backward(text, pos)
        if pos == 0:
            return pos
        start = _comment_start(text, pos)
        if start == -1:
            return pos
        pos = start


def backward_sexp(text: str, pos: int) -> int:
    """
    Return the start of the expression that ends at or before pos.

    Unbalanced input stops at the beginning of the text rather than raising,
    since the caller only needs a best-effort anchor.
    """
    pos = _skip_comments_backward(text, pos)
    if pos == 0:
        return 0

    char = text[pos - 1]
    if char in CLOSERS:
        depth = 0
        i = pos - 1
        while i >= 0:
            c = text[i]
            if c == '"':
                i = _string_start(text, i + 1) - 1
                continue
            if c in CLOSERS:
                depth += 1
            elif c in OPENERS:
                depth -= 1
                if depth == 0:
                    start = i
                    break
            i -= 1
        else:
            return 0
    elif char == '"':
        start = _string_start(text, pos)
    elif char in OPENERS:
        # Point is just inside a list; the list opener is the expression start
        start = pos - 1
    else:
        start = pos
        while start > 0 and _is_symbol_char(text[start - 1]):
            start -= 1

    while start > 0 and text[start - 1] in PREFIX_CHARS:
        start -= 1
    return start


def forward_sexp(text: str, pos: int) -> int:
    """Return the end of the expression that starts at or after pos."""
    pos = skip_whitespace_forward(text, pos)
    while pos < len(text) and text[pos] in PREFIX_CHARS:
        pos += 1
    if pos >= len(text):
        return len(text)

    char = text[pos]
    if char in OPENERS:
        depth = 0
        i = pos
        while i < len(text):
            c = text[i]
            if c == '"':
                i = _string_end(text, i)
                continue
            if c == COMMENT_CHAR:
                newline = text.find("\n", i)
                i = len(text) if newline == -1 else newline
                continue
            if c in OPENERS:
                depth += 1
            elif c in CLOSERS:
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        return len(text)
    if char == '"':
        return _string_end(text, pos)
    if char in CLOSERS:
        return pos + 1

    end = pos
    while end < len(text) and _is_symbol_char(text[end]):
        end += 1
    return end


def _string_end(text: str, start: int) -> int:
    """Offset just past the closing quote of the string opened at start."""
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return len(text)


def fontify(text: str) -> list[tuple[int, int, str]]:
    """
    Tokenize text into (start, end, face) triples for syntax coloring.

    Only strings, comments, and constant-like tokens are colored; other text
    is left without a face.
    """
    runs = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind is None or match.start() == match.end():
            continue
        runs.append((match.start(), match.end(), TOKEN_FACES[kind]))
    return runs
