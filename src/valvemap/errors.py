"""
Exception types raised while reading .map files.

Fatal errors (MapSyntaxError, MapEncodingError) abort the whole load and no
partial Map is returned.  DegenerateGeometryError marks a single face that
cannot contribute geometry; callers recover from it locally by dropping the
face and recording a validation issue.
"""


class MapError(Exception):
    """Base class for all errors raised by valvemap."""


class MapSyntaxError(MapError):
    """The input text does not match the .map grammar.

    Attributes:
        rule: Innermost grammar rule that failed to match (e.g. "brush_face")
        offset: Character offset into the input
        line: 1-based line number
        column: 1-based column number
        reason: Short description of the unmet expectation
    """

    def __init__(self, reason: str, rule: str, offset: int, line: int, column: int):
        self.reason = reason
        self.rule = rule
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{reason} in {rule} at line {line}, column {column}")


class MapEncodingError(MapError):
    """The input bytes are not valid UTF-8."""

    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"Map is not valid UTF-8 at byte {offset}: {reason}")


class DegenerateGeometryError(MapError):
    """A face cannot produce a plane or polygon."""


__all__ = [
    'MapError',
    'MapSyntaxError',
    'MapEncodingError',
    'DegenerateGeometryError',
]
