"""
Interpreter for the SWIFT field notation, the compact positional grammar that
describes the content of an MT field (e.g. ``3!a15d``, ``4!c[/30x]``, ``4*35x``).

A notation string compiles into a :class:`FormatSpec`: an ordered tuple of
:class:`SubFieldSpec` descriptors. The same compiled spec parses raw content
into ordered sub-field values and renders values back into content.

Supported tokens:

* ``N!k`` exactly N characters of class k
* ``Nk``  1 up to N characters of class k
* ``N*Mk`` 1 up to N lines of 1 up to M characters of class k (must be last)
* ``[...]`` an optional group, present or absent as a unit (no nesting)
* anything else is a literal separator, e.g. ``/``, ``,`` or a line break

Character classes: ``a`` upper-case letters, ``n`` digits, ``c`` upper-case
letters and digits, ``x`` any printable character including space, ``d`` a
decimal amount with at most one ``,`` separator (the length counts digits).
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from swiftmt.exceptions import FieldFormatError, GrammarSyntaxError


class CharClass(Enum):
    ALPHA = "a"
    DIGIT = "n"
    ALNUM = "c"
    ANY = "x"
    DECIMAL = "d"


_CLASS_PATTERNS = {
    CharClass.ALPHA: "[A-Z]",
    CharClass.DIGIT: "[0-9]",
    CharClass.ALNUM: "[A-Z0-9]",
    CharClass.ANY: r"[^\x00-\x1f\x7f-\x9f\u2028\u2029]",
}

_COMPONENT_RE = re.compile(r"([0-9]+)(?:\*([0-9]+))?(!)?([a-z]?)")
_DIGITS = "0123456789"


@dataclass(frozen=True)
class SubFieldSpec:
    """
    One positional component of a notation.

    Attributes:
        char_class (CharClass): Allowed characters.
        length (int): Exact (``fixed``) or maximum length; per line for line repeats.
        fixed (bool): True for ``N!k`` components.
        max_lines (Optional[int]): N of an ``N*Mk`` component, None otherwise.
        optional (bool): True inside a ``[...]`` group.
        group (Optional[int]): Index of the enclosing optional group.
        prefix (str): Literal text emitted before the value.
        suffix (str): Literal text emitted after the value.
    """

    char_class: CharClass
    length: int
    fixed: bool = False
    max_lines: Optional[int] = None
    optional: bool = False
    group: Optional[int] = None
    prefix: str = ""
    suffix: str = ""

    @property
    def token(self) -> str:
        head = str(self.length) if self.max_lines is None else f"{self.max_lines}*{self.length}"
        return f"{head}{'!' if self.fixed else ''}{self.char_class.value}"

    def line_pattern(self) -> str:
        if self.char_class is CharClass.DECIMAL:
            return rf"[0-9]{{1,{self.length}}}(?:,[0-9]{{0,{self.length}}})?"
        char = _CLASS_PATTERNS[self.char_class]
        if self.fixed:
            return f"{char}{{{self.length}}}"
        return f"{char}{{1,{self.length}}}"

    def value_pattern(self) -> str:
        line = self.line_pattern()
        if self.max_lines is None:
            return line
        return rf"{line}(?:\n{line}){{0,{self.max_lines - 1}}}"

    def decimal_error(self, value: str) -> Optional[str]:
        """Digit count rule of the ``d`` class, which a regex cannot express."""
        if self.char_class is not CharClass.DECIMAL:
            return None
        digits = len(value.replace(",", ""))
        if self.fixed and digits != self.length:
            return f"amount '{value}' must have exactly {self.length} digits"
        if digits > self.length:
            return f"amount '{value}' exceeds {self.length} digits"
        return None


class FormatSpec:
    """
    Compiled notation. Use :meth:`parse` and :meth:`render` to convert between
    raw content and ordered sub-field values.

    ``str(spec)`` re-derives the notation string it was compiled from.
    """

    def __init__(self, notation: str):
        self.notation = notation
        self.sub_fields: Tuple[SubFieldSpec, ...] = _compile(notation)
        self._units = self._group_units()

        patterns = [self._unit_pattern(unit) for unit in self._units]
        self._regex = re.compile("".join(patterns))
        self._prefix_regexes = [
            re.compile("".join(patterns[: index + 1])) for index in range(len(patterns))
        ]
        self._line_regexes = [re.compile(sf.line_pattern()) for sf in self.sub_fields]

    def __str__(self) -> str:
        parts: List[str] = []
        last = len(self.sub_fields) - 1
        for index, sub_field in enumerate(self.sub_fields):
            group = sub_field.group
            if group is not None and (index == 0 or self.sub_fields[index - 1].group != group):
                parts.append("[")
            parts.extend((sub_field.prefix, sub_field.token, sub_field.suffix))
            if group is not None and (index == last or self.sub_fields[index + 1].group != group):
                parts.append("]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"FormatSpec({self.notation!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FormatSpec) and other.notation == self.notation

    def __hash__(self) -> int:
        return hash(self.notation)

    def _group_units(self) -> List[Tuple[bool, List[int]]]:
        """Splits sub-fields into mandatory singletons and optional groups."""
        units: List[Tuple[bool, List[int]]] = []
        for index, sub_field in enumerate(self.sub_fields):
            if sub_field.group is not None and index > 0 and self.sub_fields[index - 1].group == sub_field.group:
                units[-1][1].append(index)
            else:
                units.append((sub_field.optional, [index]))
        return units

    def _unit_pattern(self, unit: Tuple[bool, List[int]]) -> str:
        optional, members = unit
        body = "".join(
            f"{re.escape(self.sub_fields[i].prefix)}({self.sub_fields[i].value_pattern()}){re.escape(self.sub_fields[i].suffix)}"
            for i in members
        )
        return f"(?:{body})?" if optional else body

    def parse(self, content: str) -> List[Optional[str]]:
        """
        Splits raw content into ordered sub-field values.

        Absent optional sub-fields yield None. A line-repeat component yields
        one value per line present.

        Raises:
            FieldFormatError: If the content does not match the notation.
        """
        if content is None:
            raise FieldFormatError(f"No content to parse against '{self.notation}'", position=0)

        match = self._regex.fullmatch(content)
        if match is None:
            raise self._diagnose(content)

        values: List[Optional[str]] = []
        for index, sub_field in enumerate(self.sub_fields):
            value = match.group(index + 1)
            if value is not None:
                reason = sub_field.decimal_error(value)
                if reason:
                    raise FieldFormatError(
                        f"Invalid content for '{self.notation}': {reason}",
                        position=match.start(index + 1),
                        expected_class=sub_field.token,
                    )
            if sub_field.max_lines is not None:
                values.extend(value.split("\n") if value is not None else [None])
            else:
                values.append(value)
        return values

    def _diagnose(self, content: str) -> FieldFormatError:
        position = 0
        for unit, regex in zip(self._units, self._prefix_regexes):
            match = regex.match(content)
            if match is None:
                token = self.sub_fields[unit[1][0]].token
                if position >= len(content):
                    message = f"Missing mandatory sub-field '{token}' at position {position} of '{self.notation}'"
                else:
                    found = content[position : position + 12]
                    message = f"Expected '{token}' at position {position} of '{self.notation}', found {found!r}"
                return FieldFormatError(message, position=position, expected_class=token)
            position = match.end()

        return FieldFormatError(
            f"Unexpected trailing content {content[position:position + 12]!r} "
            f"at position {position} of '{self.notation}'",
            position=position,
        )

    def render(self, values: Sequence[Optional[str]]) -> str:
        """
        Renders ordered sub-field values into content. Omitted optional groups
        drop their literals too.

        Raises:
            FieldFormatError: If a value is missing or violates its sub-field rule,
                or if the rendered content would not parse back into the same values.
        """
        values = list(values)
        assigned: List[object] = []
        for index, sub_field in enumerate(self.sub_fields):
            if sub_field.max_lines is not None:
                assigned.append(self._collect_lines(values[index:], index))
            else:
                assigned.append(values[index] if index < len(values) else None)

        if self.sub_fields[-1].max_lines is None and len(values) > len(self.sub_fields):
            raise FieldFormatError(
                f"Too many values for '{self.notation}': expected at most "
                f"{len(self.sub_fields)}, got {len(values)}"
            )

        parts: List[str] = []
        expected: List[Optional[str]] = []
        for optional, members in self._units:
            present = [assigned[i] is not None for i in members]
            if optional and not any(present):
                expected.extend(None for _ in members)
                continue
            for i in members:
                sub_field = self.sub_fields[i]
                if assigned[i] is None:
                    raise FieldFormatError(
                        f"Missing mandatory sub-field '{sub_field.token}' for '{self.notation}'",
                        position=i,
                        expected_class=sub_field.token,
                    )
                parts.append(sub_field.prefix)
                parts.append(self._render_value(sub_field, i, assigned[i]))
                parts.append(sub_field.suffix)
                expected.extend(assigned[i] if isinstance(assigned[i], list) else [assigned[i]])

        content = "".join(parts)
        # adjacent variable-width components can shift a boundary
        try:
            reparsed = self.parse(content)
        except FieldFormatError as e:
            raise FieldFormatError(
                f"Ambiguous values for '{self.notation}': {content!r} cannot be read back",
                expected_class=e.expected_class,
            ) from e
        if reparsed != expected:
            raise FieldFormatError(
                f"Ambiguous values for '{self.notation}': {content!r} reads back as {reparsed!r}"
            )
        return content

    def _collect_lines(self, values: List[Optional[str]], position: int) -> Optional[List[str]]:
        while values and values[-1] is None:
            values = values[:-1]
        if not values:
            return None
        if any(value is None for value in values):
            raise FieldFormatError(
                f"Line values for '{self.notation}' must not contain gaps",
                position=position,
            )
        return values

    def _render_value(self, sub_field: SubFieldSpec, index: int, value: object) -> str:
        lines = value if isinstance(value, list) else [value]
        if sub_field.max_lines is not None and len(lines) > sub_field.max_lines:
            raise FieldFormatError(
                f"Too many lines for '{sub_field.token}': {len(lines)} > {sub_field.max_lines}",
                position=index,
                expected_class=sub_field.token,
            )
        for line in lines:
            if not isinstance(line, str) or not self._line_regexes[index].fullmatch(line):
                raise FieldFormatError(
                    f"Value {line!r} does not match '{sub_field.token}' of '{self.notation}'",
                    position=index,
                    expected_class=sub_field.token,
                )
            reason = sub_field.decimal_error(line)
            if reason:
                raise FieldFormatError(reason, position=index, expected_class=sub_field.token)
        return "\n".join(lines)


def _compile(notation: str) -> Tuple[SubFieldSpec, ...]:
    if not notation:
        raise GrammarSyntaxError("Notation must not be empty")

    specs: List[dict] = []
    pending = ""
    group: Optional[int] = None
    group_count = 0
    group_members = 0

    def attach_suffix(scope: Optional[int]) -> None:
        if not specs or specs[-1]["group"] != scope:
            raise GrammarSyntaxError(f"Literal {pending!r} is not attached to any component in '{notation}'")
        specs[-1]["suffix"] += pending

    position = 0
    while position < len(notation):
        char = notation[position]
        if char == "[":
            if group is not None:
                raise GrammarSyntaxError(f"Nested optional group at position {position} in '{notation}'")
            if pending:
                attach_suffix(None)
                pending = ""
            group = group_count
            group_count += 1
            group_members = 0
            position += 1
        elif char == "]":
            if group is None:
                raise GrammarSyntaxError(f"Unbalanced ']' at position {position} in '{notation}'")
            if group_members == 0:
                raise GrammarSyntaxError(f"Empty optional group at position {position} in '{notation}'")
            if pending:
                attach_suffix(group)
                pending = ""
            group = None
            position += 1
        elif char in _DIGITS:
            match = _COMPONENT_RE.match(notation, position)
            count, line_length, fixed, class_char = match.groups()
            try:
                char_class = CharClass(class_char)
            except ValueError:
                raise GrammarSyntaxError(
                    f"Invalid character class {class_char!r} at position {match.end(4)} in '{notation}'"
                ) from None
            length = int(line_length) if line_length else int(count)
            max_lines = int(count) if line_length else None
            if length == 0 or max_lines == 0:
                raise GrammarSyntaxError(f"Zero length component at position {position} in '{notation}'")
            specs.append(
                {
                    "char_class": char_class,
                    "length": length,
                    "fixed": bool(fixed),
                    "max_lines": max_lines,
                    "optional": group is not None,
                    "group": group,
                    "prefix": pending,
                    "suffix": "",
                }
            )
            pending = ""
            group_members += 1
            position = match.end()
        else:
            pending += char
            position += 1

    if group is not None:
        raise GrammarSyntaxError(f"Unclosed optional group in '{notation}'")
    if not specs:
        raise GrammarSyntaxError(f"Notation '{notation}' has no components")
    if pending:
        attach_suffix(None)

    for spec in specs[:-1]:
        if spec["max_lines"] is not None:
            raise GrammarSyntaxError(f"Line repeat component must be last in '{notation}'")

    return tuple(SubFieldSpec(**spec) for spec in specs)


def compile_notation(notation: str) -> FormatSpec:
    """
    Compiles a notation string.

    Raises:
        GrammarSyntaxError: If the notation is malformed.
    """
    return FormatSpec(notation)


def parse(spec: FormatSpec, content: str) -> List[Optional[str]]:
    return spec.parse(content)


def render(spec: FormatSpec, values: Sequence[Optional[str]]) -> str:
    return spec.render(values)
