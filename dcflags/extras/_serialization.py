"""Serialization of parsed values back into argument lists."""

from __future__ import annotations

import dataclasses
from typing import Any, List, Optional, Sequence, Union

from .. import _parsers, _scalars, _scanner, _strings
from .._fields import FieldDefinition
from .._singleton import MISSING
from ..conf import _markers


def _path_to_record(
    spec: Union[_parsers.ParserSpecification, _parsers.SubcommandsSpecification],
    cls: type,
) -> Optional[List[str]]:
    """Subcommand names leading from `spec` to the record schema for `cls`."""
    if isinstance(spec, _parsers.ParserSpecification):
        return [] if spec.f is cls else None
    for name, child in spec.parser_from_name.items():
        path = _path_to_record(child, cls)
        if path is not None:
            return [name] + path
    return None


def _sequence_args(field: FieldDefinition, strings: Sequence[str]) -> List[str]:
    if len(strings) == 0:
        return [field.flag + "="]
    if all(s != "" and "," not in s for s in strings):
        return [field.flag + "=" + s for s in strings]
    if not any(_scanner.looks_like_flag(s) for s in strings):
        return [field.flag, *strings]
    raise ValueError(
        f"Values of {field.flag} contain both commas and flag-like strings, so"
        " they can't be written as arguments."
    )


def _absent_value(field: FieldDefinition) -> Any:
    """The value a field resolves to when it isn't passed in."""
    if field.has_default:
        return field.make_default()
    return None if field.resolves_to_none else MISSING


def _flag_args(field: FieldDefinition, value: Any) -> List[str]:
    spec = field.value_spec
    if value is None:
        if _absent_value(field) is None:
            return []
        if isinstance(spec, _scalars.ScalarSpec) and not spec.is_bool:
            # `--name` without a value is None for optional fields.
            return [field.flag]
        raise ValueError(f"None can't be written as arguments for {field.flag}.")

    if isinstance(spec, _scalars.SequenceSpec):
        return _sequence_args(field, spec.str_from_instance(value))

    assert isinstance(spec, _scalars.ScalarSpec)
    if spec.is_bool:
        return [field.flag] if value else [field.flag + "=false"]
    return [field.flag + "=" + spec.str_from_instance(value)]


def _positional_args(fields: Sequence[FieldDefinition], instance: Any) -> List[str]:
    out: List[str] = []
    omitted: Optional[FieldDefinition] = None
    for field in fields:
        value = getattr(instance, field.intern_name)
        spec = field.value_spec
        if value is None or (
            isinstance(spec, _scalars.SequenceSpec) and len(value) == 0
        ):
            if _absent_value(field) != value:
                raise ValueError(
                    f"{field.metavar} can't be omitted: it would resolve to"
                    f" {_absent_value(field)!r} instead of {value!r}."
                )
            omitted = field
            continue
        if omitted is not None:
            raise ValueError(
                f"{omitted.metavar} has no value, so {field.metavar} can't be"
                " written as a positional argument."
            )
        if isinstance(spec, _scalars.SequenceSpec):
            out.extend(spec.str_from_instance(value))
        else:
            assert isinstance(spec, _scalars.ScalarSpec)
            out.append(spec.str_from_instance(value))
    return out


def to_args(
    instance: Any,
    schema: Any = None,
    *,
    config: Optional[Sequence[_markers.Marker]] = None,
    use_underscores: bool = False,
) -> List[str]:
    """Generate an argument list that parses back into `instance`.

    Scalars are written as `--name=value`, booleans as `--name` or `--name=false`,
    and sequences as repeated `--name=value` occurrences. Positional values follow
    a `--` separator.

    Args:
        instance: A dataclass instance.
        schema: The schema `instance` was parsed from. When this is a `Union`,
            the subcommand names that select `type(instance)` are prepended.
            Defaults to `type(instance)`.
        config: Markers that will be passed to :func:`dcflags.parse`.
        use_underscores: Should match the value passed to :func:`dcflags.parse`.

    Returns:
        Arguments, not including the program name.
    """
    cls = type(instance)
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"Expected a dataclass instance, but got {cls}.")

    delimeter: _strings.Delimeter = "_" if use_underscores else "-"
    markers = frozenset(() if config is None else config)
    root_spec = _parsers.spec_from_type(
        cls if schema is None else schema, markers, delimeter
    )
    path = _path_to_record(root_spec, cls)
    if path is None:
        raise TypeError(f"{cls} is not a member of {schema}.")

    spec = _parsers.spec_from_type(cls, markers, delimeter)
    assert isinstance(spec, _parsers.ParserSpecification)

    out = list(path)
    for field in spec.named_flags:
        out.extend(_flag_args(field, getattr(instance, field.intern_name)))

    positionals = _positional_args(spec.positional_fields, instance)
    if len(positionals) > 0:
        out.append(_strings.SEPARATOR_TOKEN)
        out.extend(positionals)
    return out
