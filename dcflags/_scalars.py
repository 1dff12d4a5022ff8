"""Conversion of single raw tokens into typed leaf values.

Each supported leaf type is described by a :class:`ScalarSpec`, produced by the
first matching rule in `_RULES`. Specs are built once when a schema is bound;
conversion itself is a pure function of the spec and the token."""

from __future__ import annotations

import dataclasses
import enum
import inspect
import pathlib
import re
from typing import Any, Callable, Iterable, Literal, Sequence, Set, Union

from typing_extensions import get_args, get_origin
from typing_extensions import Literal as LiteralAlternate

from . import _resolver, _strings
from ._errors import InvalidValueError, MissingValueError, SchemaDefinitionError
from .conf import _markers

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)"
)


@dataclasses.dataclass(frozen=True)
class ScalarSpec:
    """Specification for constructing a leaf value from one string."""

    type: Any
    metavar: str
    instance_from_str: Callable[[str], Any]
    """Convert a token to a value. Raises ValueError with a short reason on failure."""
    str_from_instance: Callable[[Any], str]
    """Inverse of `instance_from_str`, used for helptext defaults and round trips."""
    choices: tuple[str, ...] | None = None
    is_bool: bool = False


@dataclasses.dataclass(frozen=True)
class SequenceSpec:
    """Specification for a multi-value field: a homogeneous sequence of leaves."""

    container: Callable[[Iterable[Any]], Sequence[Any]]
    element: ScalarSpec
    non_empty: bool

    @property
    def metavar(self) -> str:
        return _strings.multi_metavar_from_single(self.element.metavar)

    def str_from_instance(self, instance: Sequence[Any]) -> list[str]:
        return [self.element.str_from_instance(x) for x in instance]


ValueSpec = Union[ScalarSpec, SequenceSpec]


def _choice_spec(
    typ: Any,
    value_from_choice: dict[str, Any],
    choice_from_value: Callable[[Any], str],
) -> ScalarSpec:
    choices = tuple(value_from_choice.keys())

    def instance_from_str(token: str) -> Any:
        if token not in value_from_choice:
            raise ValueError(f"expected one of {{{','.join(choices)}}}")
        return value_from_choice[token]

    return ScalarSpec(
        type=typ,
        metavar="{" + ",".join(choices) + "}",
        instance_from_str=instance_from_str,
        str_from_instance=choice_from_value,
        choices=choices,
    )


def _bool_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if typ is not bool:
        return None

    def instance_from_str(token: str) -> bool:
        if token == "true":
            return True
        if token == "false":
            return False
        raise ValueError("expected 'true' or 'false'")

    return ScalarSpec(
        type=bool,
        metavar="{true,false}",
        instance_from_str=instance_from_str,
        str_from_instance=lambda instance: "true" if instance else "false",
        choices=("true", "false"),
        is_bool=True,
    )


def _int_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if typ is not int:
        return None
    ranges = [m for m in markers if isinstance(m, _markers.Range)]

    def instance_from_str(token: str) -> int:
        if _INT_PATTERN.fullmatch(token) is None:
            raise ValueError("expected a base-10 integer")
        out = int(token)
        for r in ranges:
            if not r.contains(out):
                raise ValueError(f"{out} is outside of the allowed range {r}")
        return out

    return ScalarSpec(
        type=int,
        metavar="INT",
        instance_from_str=instance_from_str,
        str_from_instance=str,
    )


def _float_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if typ is not float:
        return None

    def instance_from_str(token: str) -> float:
        if _FLOAT_PATTERN.fullmatch(token) is None:
            raise ValueError("expected a decimal number")
        return float(token)

    return ScalarSpec(
        type=float,
        metavar="FLOAT",
        instance_from_str=instance_from_str,
        # repr() is the shortest string that round-trips.
        str_from_instance=repr,
    )


def _str_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if typ is not str:
        return None
    return ScalarSpec(
        type=str,
        metavar="STR",
        instance_from_str=lambda token: token,
        str_from_instance=lambda instance: instance,
    )


def _path_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if not (inspect.isclass(typ) and issubclass(typ, pathlib.PurePath)):
        return None
    return ScalarSpec(
        type=typ,
        metavar=typ.__name__.upper(),
        instance_from_str=typ,
        str_from_instance=str,
    )


def _enum_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if not (inspect.isclass(typ) and issubclass(typ, enum.Enum)):
        return None
    if _markers.EnumChoicesFromValues in markers:
        return _choice_spec(
            typ,
            {str(member.value): member for member in typ},
            lambda instance: str(instance.value),
        )
    return _choice_spec(
        typ,
        dict(typ.__members__),
        lambda instance: instance.name,
    )


def _literal_rule(typ: Any, markers: Set[Any]) -> ScalarSpec | None:
    if get_origin(typ) not in (Literal, LiteralAlternate):
        return None
    use_values = _markers.EnumChoicesFromValues in markers

    def choice_from_value(x: Any) -> str:
        if isinstance(x, enum.Enum):
            return str(x.value) if use_values else x.name
        if isinstance(x, bool):
            return "true" if x else "false"
        return str(x)

    return _choice_spec(
        typ,
        {choice_from_value(x): x for x in get_args(typ)},
        choice_from_value,
    )


_RULES = (
    _bool_rule,
    _int_rule,
    _float_rule,
    _str_rule,
    _path_rule,
    _enum_rule,
    _literal_rule,
)


def get_scalar_spec(typ: Any, markers: Set[Any]) -> ScalarSpec:
    """Get a spec for a leaf type. `typ` may still carry `Annotated[]` metadata,
    which is merged into `markers`."""
    typ, extra_markers = _resolver.unwrap_annotated(typ, "all")
    markers = markers | set(extra_markers)

    for rule in _RULES:
        spec = rule(typ, markers)
        if spec is not None:
            return spec

    if typ is Any:
        raise SchemaDefinitionError("`Any` is not a parsable type.")
    if _resolver.is_union(typ):
        raise SchemaDefinitionError(
            f"Union type {typ} is not supported as a value; only Optional[T] is."
        )
    raise SchemaDefinitionError(f"Unsupported type annotation: {typ}.")


def get_value_spec(typ: Any, markers: Set[Any]) -> ValueSpec:
    """Get a spec for a field's value type, with `Optional[]` already stripped."""
    typ, extra_markers = _resolver.unwrap_annotated(typ, "all")
    markers = markers | set(extra_markers)

    sequence = _resolver.sequence_container(typ)
    if sequence is None:
        if _markers.NonEmpty in markers:
            raise SchemaDefinitionError(
                f"NonEmpty can only be applied to sequence types, but got {typ}."
            )
        return get_scalar_spec(typ, markers)

    container, element_type = sequence
    element_core, element_is_optional = _resolver.unwrap_optional(
        _resolver.unwrap_annotated(element_type)
    )
    if element_is_optional:
        raise SchemaDefinitionError(f"Sequence elements can't be optional: {typ}.")
    if _resolver.sequence_container(element_core) is not None:
        raise SchemaDefinitionError(f"Nested sequence types are not supported: {typ}.")
    return SequenceSpec(
        container=container,
        element=get_scalar_spec(element_type, markers - {_markers.NonEmpty}),
        non_empty=_markers.NonEmpty in markers,
    )


def convert_token(
    spec: ScalarSpec,
    token: str | None,
    *,
    is_optional: bool,
    arg_name: str,
    prog: str,
) -> Any:
    """Convert one token into one leaf value.

    `token` is None when the argument was passed in without a value, like
    `--verbose`. This means `True` for booleans and `None` for optional fields;
    anything else is missing a value."""
    if token is None:
        if spec.is_bool:
            return True
        if is_optional:
            return None
        raise MissingValueError(arg_name, metavar=spec.metavar, prog=prog)
    try:
        return spec.instance_from_str(token)
    except ValueError as e:
        raise InvalidValueError(arg_name, token, e.args[0], prog=prog) from e
