"""Splitting of parenthesized lists on their outermost delimiters."""

from __future__ import annotations

from abikit.errors import TypeParserError


def split_top_level(text: str, delimiter: str = ",", depth: int = 0, start: int = 0) -> tuple[list[str], int]:
    """Split ``text[start:]`` on the delimiters found at the outermost nesting level.

    Parentheses open and close nesting levels; a delimiter only splits when the scan
    is back at the level it started from.

    Arguments
    ---------
    text: str
        The text to scan.
    delimiter: str, optional
        The single character separating the pieces. Defaults to ",".
    depth: int, optional
        The number of parentheses already open at ``start``. When positive, the scan
        stops at the ``)`` that closes them. Defaults to 0, which scans to the end
        of the text.
    start: int, optional
        The index at which scanning begins. Defaults to 0.

    Returns
    -------
    tuple[list[str], int]
        The pieces, surrounding whitespace kept, and the index just past
        the last consumed character. A body made only of whitespace has no pieces.
    """
    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    if depth < 0:
        raise ValueError("depth must be non-negative.")
    pieces: list[str] = []
    level = depth
    last = start
    for index in range(start, len(text)):
        char = text[index]
        if char == "(":
            level += 1
        elif char == ")":
            level -= 1
            if level < 0:
                raise TypeParserError(text, "unbalanced parentheses")
            if depth > 0 and level == 0:
                pieces.append(text[last:index])
                return _drop_empty_body(pieces), index + 1
        elif char == delimiter and level == depth:
            pieces.append(text[last:index])
            last = index + 1
    if depth > 0:
        raise TypeParserError(text, "unclosed parenthesis")
    if level != 0:
        raise TypeParserError(text, "unbalanced parentheses")
    pieces.append(text[last:])
    return _drop_empty_body(pieces), len(text)


def _drop_empty_body(pieces: list[str]) -> list[str]:
    # `()` has no elements rather than one empty element
    if len(pieces) == 1 and not pieces[0].strip():
        return []
    return pieces
