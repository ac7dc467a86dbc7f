"""
Valve 220 .map format parser.

Recursive descent parser for the text format written by TrenchBroom and
other Quake-family editors::

    map        := ignored (entity ignored)+
    entity     := '{' ignored (property ignored)+ (brush ignored)* '}'
    property   := string string
    brush      := '{' (brush_face ignored)+ '}'
    brush_face := point point point identifier uv_axis uv_axis float float float
    point      := '(' float float float ')'
    uv_axis    := '[' float float float float ']'
    ignored    := (whitespace | '//' to end-of-line)*

Any unmet expectation raises MapSyntaxError naming the innermost rule and
the position; there is no error recovery and no partial result.  Faces with
collinear points are the one exception: they are dropped with a warning
because they are a geometry problem, not a syntax problem.
"""

from __future__ import annotations
import codecs
import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Tuple

from valvemap.conversion.map_data import Brush, BrushFace, Entity, Map, UvAxis
from valvemap.conversion.plane_math import EPSILON, Vec3
from valvemap.errors import DegenerateGeometryError, MapEncodingError, MapSyntaxError
from valvemap.validation.core import ValidationIssue
from valvemap.validation.checks import format_location
from valvemap.validation.rules import GEOM_002, MAP_003

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n"

_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Characters that may not directly follow a number ("1.302.2", "16abc")
_NUMBER_TAIL = ".+-_"

# Escapes accepted inside quoted strings: \\ \" and backslash-newline
_ESCAPES = {"\\": "\\", '"': '"', "\n": "\n"}


class MapParser:
    """Recursive descent parser for Valve 220 .map text."""

    def __init__(self, source: str, epsilon: float = EPSILON):
        self.source = source
        self.epsilon = epsilon
        self.pos = 0
        self.length = len(source)
        self.issues: List[ValidationIssue] = []
        self._rules: List[str] = []
        self._entity_index = 0
        self._brush_index = 0

    def parse(self) -> Map:
        """Parse the entire source and return a Map."""
        entities = []
        with self._rule("map"):
            self._skip_ignored()
            if self._peek() != '{':
                self._fail("Expected '{' to start entity")
            while self.pos < self.length:
                entities.append(self._parse_entity())
                self._entity_index += 1
                self._skip_ignored()
                if self.pos < self.length and self._peek() != '{':
                    self._fail(f"Expected '{{' to start entity, got {self._describe()}")

        logger.debug("Parsed %d entities", len(entities))
        return Map(entities=tuple(entities))

    # ---------------------------------------------------------------
    # Grammar rules
    # ---------------------------------------------------------------

    def _parse_entity(self) -> Entity:
        with self._rule("entity"):
            self._expect('{')
            self._skip_ignored()

            properties: Dict[str, str] = {}
            if self._peek() != '"':
                with self._rule("property"):
                    self._fail(f"Expected property, got {self._describe()}")
            while self._peek() == '"':
                key, value = self._parse_property()
                if key in properties:
                    location = format_location(self._entity_index)
                    logger.warning("Duplicate property '%s' in %s; keeping last value", key, location)
                    self.issues.append(MAP_003.issue(location, key=key, old=properties[key], new=value))
                properties[key] = value
                self._skip_ignored()

            brushes = []
            self._brush_index = 0
            while self._peek() == '{':
                brushes.append(self._parse_brush())
                self._brush_index += 1
                self._skip_ignored()

            self._expect('}')
            return Entity(properties=properties, brushes=tuple(brushes))

    def _parse_property(self) -> Tuple[str, str]:
        with self._rule("property"):
            key = self._parse_string()
            self._skip_ignored()
            value = self._parse_string()
            return key, value

    def _parse_brush(self) -> Brush:
        with self._rule("brush"):
            self._expect('{')
            self._skip_ignored()

            faces = []
            face_index = 0
            if self._peek() != '(':
                with self._rule("brush_face"):
                    self._fail(f"Expected '(' to start brush face, got {self._describe()}")
            while self._peek() == '(':
                face = self._parse_brush_face(face_index)
                if face is not None:
                    faces.append(face)
                face_index += 1
                self._skip_ignored()

            self._expect('}')
            return Brush(faces=tuple(faces))

    def _parse_brush_face(self, face_index: int):
        with self._rule("brush_face"):
            points = []
            for _ in range(3):
                points.append(self._parse_point())
                self._skip_ignored()

            texture = self._parse_identifier()
            self._skip_ignored()
            u = self._parse_uv_axis()
            self._skip_ignored()
            v = self._parse_uv_axis()
            self._skip_ignored()
            rotation = self._parse_float()
            self._skip_ignored()
            x_scale = self._parse_float()
            self._skip_ignored()
            y_scale = self._parse_float()

        try:
            return BrushFace(
                points=tuple(points),
                texture=texture,
                u=u,
                v=v,
                rotation=rotation,
                x_scale=x_scale,
                y_scale=y_scale,
                epsilon=self.epsilon,
            )
        except DegenerateGeometryError:
            location = format_location(self._entity_index, self._brush_index, face_index)
            logger.warning("Dropping face with collinear points at %s", location)
            self.issues.append(GEOM_002.issue(location, points=", ".join(str(p) for p in points)))
            return None

    def _parse_point(self) -> Vec3:
        with self._rule("point"):
            self._expect('(')
            values = self._parse_float_list(3)
            self._expect(')')
            return (values[0], values[1], values[2])

    def _parse_uv_axis(self) -> UvAxis:
        with self._rule("uv_axis"):
            self._expect('[')
            values = self._parse_float_list(4)
            self._expect(']')
            return UvAxis(axis=(values[0], values[1], values[2]), offset=values[3])

    def _parse_float_list(self, count: int) -> List[float]:
        values = []
        for _ in range(count):
            self._skip_ignored()
            values.append(self._parse_float())
        self._skip_ignored()
        return values

    def _parse_float(self) -> float:
        with self._rule("float"):
            match = _FLOAT_RE.match(self.source, self.pos)
            if match is None:
                self._fail(f"Expected number, got {self._describe()}")
            end = match.end()
            if end < self.length:
                tail = self.source[end]
                if tail.isalnum() or tail in _NUMBER_TAIL:
                    self.pos = end
                    self._fail(f"Malformed number, unexpected {tail!r}")
            self.pos = end
            return float(match.group(0))

    def _parse_identifier(self) -> str:
        with self._rule("identifier"):
            start = self.pos
            while self.pos < self.length and self.source[self.pos] not in WHITESPACE:
                self.pos += 1
            if start == self.pos:
                self._fail(f"Expected texture name, got {self._describe()}")
            return self.source[start:self.pos]

    def _parse_string(self) -> str:
        with self._rule("string"):
            self._expect('"')
            chunks = []
            start = self.pos
            while True:
                if self.pos >= self.length:
                    self._fail("Unterminated string")
                c = self.source[self.pos]
                if c == '"':
                    chunks.append(self.source[start:self.pos])
                    self.pos += 1
                    return "".join(chunks)
                if c == '\\':
                    chunks.append(self.source[start:self.pos])
                    escaped = self.source[self.pos + 1:self.pos + 2]
                    if escaped not in _ESCAPES:
                        self._fail(f"Unsupported escape sequence \\{escaped}")
                    chunks.append(_ESCAPES[escaped])
                    self.pos += 2
                    start = self.pos
                else:
                    self.pos += 1

    # ---------------------------------------------------------------
    # Lexical helpers
    # ---------------------------------------------------------------

    def _skip_ignored(self) -> None:
        """Skip whitespace and // comments."""
        while self.pos < self.length:
            c = self.source[self.pos]
            if c in WHITESPACE:
                self.pos += 1
            elif self.source.startswith("//", self.pos):
                while self.pos < self.length and self.source[self.pos] not in "\r\n":
                    self.pos += 1
            else:
                break

    def _peek(self) -> str:
        if self.pos < self.length:
            return self.source[self.pos]
        return ''

    def _expect(self, expected: str) -> None:
        if self._peek() != expected:
            self._fail(f"Expected '{expected}', got {self._describe()}")
        self.pos += 1

    def _describe(self) -> str:
        c = self._peek()
        return repr(c) if c else "end of input"

    @contextmanager
    def _rule(self, name: str):
        self._rules.append(name)
        try:
            yield
        finally:
            self._rules.pop()

    def line_column(self, offset: int) -> Tuple[int, int]:
        """Convert a character offset to a 1-based (line, column)."""
        line = self.source.count('\n', 0, offset) + 1
        line_start = self.source.rfind('\n', 0, offset) + 1
        return line, offset - line_start + 1

    def _fail(self, reason: str):
        rule = self._rules[-1] if self._rules else "map"
        line, column = self.line_column(self.pos)
        raise MapSyntaxError(reason, rule, self.pos, line, column)


def decode_source(data: bytes) -> str:
    """Decode raw .map bytes as UTF-8, dropping a leading byte order mark.

    Raises:
        MapEncodingError: If the bytes are not valid UTF-8; the offset
            counts from the start of ``data``, BOM included
    """
    skip = len(codecs.BOM_UTF8) if data.startswith(codecs.BOM_UTF8) else 0
    try:
        return data[skip:].decode("utf-8")
    except UnicodeDecodeError as e:
        raise MapEncodingError(e.start + skip, e.reason) from e


def parse_map(source: str, epsilon: float = EPSILON) -> Map:
    """Parse map from string source."""
    return MapParser(source, epsilon).parse()


def parse_map_file(filepath, epsilon: float = EPSILON) -> Map:
    """Parse map from a UTF-8 file."""
    source = decode_source(Path(filepath).read_bytes())
    return parse_map(source, epsilon)
