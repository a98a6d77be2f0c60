"""
Binding value literals.

Variable bindings arrive as loosely typed JSON values. They are parsed into a
closed set of variants, each of which knows how to render itself as a Python
literal inside a generated keyword argument list.
"""

import ast
import keyword
import math
import re
from dataclasses import dataclass
from typing import Any, Collection, Mapping, Tuple, Union

from .exceptions import InvalidBindingNameError, UnsupportedBindingError

PYTHON_KEYWORD_LITERALS = frozenset({"None", "True", "False"})

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_BRACKET_PAIRS = (("(", ")"), ("[", "]"), ("{", "}"))


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return f"float('{value}')"
    if value.is_integer():
        return str(int(value))
    fixed = f"{value:f}"
    # Fixed notation truncates very small values, keep the exact repr then
    if float(fixed) == value:
        return fixed
    return repr(value)


def is_numeric_literal(text: str) -> bool:
    """True when ``text`` is a decimal number that Python accepts verbatim."""
    if not _DECIMAL_PATTERN.fullmatch(text):
        return False
    try:
        # "007" matches the pattern but is not a valid Python literal
        ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return False
    return True


def is_preformatted_literal(text: str) -> bool:
    return len(text) >= 2 and any(
        text.startswith(opening) and text.endswith(closing)
        for opening, closing in _BRACKET_PAIRS
    )


@dataclass(frozen=True)
class StringValue:
    value: str

    @property
    def is_omitted(self) -> bool:
        return self.value == ""

    def render(self) -> str:
        text = self.value
        if (
            text in PYTHON_KEYWORD_LITERALS
            or is_numeric_literal(text)
            or is_preformatted_literal(text)
        ):
            return text
        return repr(text)

    def render_element(self) -> str:
        # Inside a sequence strings are always data, never code
        return repr(self.value)


@dataclass(frozen=True)
class NumberValue:
    value: Union[int, float]
    is_omitted = False

    def render(self) -> str:
        return _format_number(self.value)

    render_element = render


@dataclass(frozen=True)
class BoolValue:
    value: bool
    is_omitted = False

    def render(self) -> str:
        return "True" if self.value else "False"

    render_element = render


@dataclass(frozen=True)
class NullValue:
    is_omitted = False

    def render(self) -> str:
        return "None"

    render_element = render


@dataclass(frozen=True)
class SequenceValue:
    items: Tuple["BindingValue", ...]
    is_omitted = False

    def render(self) -> str:
        return "[" + ", ".join(item.render_element() for item in self.items) + "]"

    render_element = render


BindingValue = Union[StringValue, NumberValue, BoolValue, NullValue, SequenceValue]


def parse_binding(raw: Any, name: str = "<value>") -> BindingValue:
    """
    Convert a raw binding value into its literal variant.

    Args:
        raw: Value as decoded from JSON (or supplied by Python callers)
        name: Parameter name, used in error messages only

    Raises:
        UnsupportedBindingError: For mappings and any other type without a
            literal form.
    """
    # bool must be checked before int, it is a subclass
    if isinstance(raw, bool):
        return BoolValue(raw)
    if raw is None:
        return NullValue()
    if isinstance(raw, str):
        return StringValue(raw)
    if isinstance(raw, (int, float)):
        return NumberValue(raw)
    if isinstance(raw, (list, tuple)):
        return SequenceValue(tuple(parse_binding(item, name) for item in raw))
    raise UnsupportedBindingError(
        f"Binding '{name}' has unsupported type {type(raw).__name__}; "
        "pass mappings as a pre-formatted string such as \"{'a': 1}\"",
        details={"parameter": name, "type": type(raw).__name__},
    )


def validate_parameter_name(name: str) -> None:
    if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
        raise InvalidBindingNameError(
            f"Binding name {name!r} is not a valid keyword argument",
            details={"parameter": name},
        )


def render_bindings(
    bindings: Mapping[str, Any], exclude: Collection[str] = ()
) -> str:
    """
    Render bindings as a keyword argument list.

    Parameters are sorted by name so repeated generation is byte-identical.
    Empty strings are dropped entirely.

    Returns:
        str: e.g. ``"max_depth=5, mode='auto'"`` or ``""`` when nothing remains
    """
    parts = []
    for name in sorted(bindings):
        validate_parameter_name(name)
        if name in exclude:
            continue
        literal = parse_binding(bindings[name], name)
        if literal.is_omitted:
            continue
        parts.append(f"{name}={literal.render()}")
    return ", ".join(parts)


__all__ = [
    "BindingValue",
    "BoolValue",
    "NullValue",
    "NumberValue",
    "SequenceValue",
    "StringValue",
    "is_numeric_literal",
    "is_preformatted_literal",
    "parse_binding",
    "render_bindings",
    "validate_parameter_name",
]
