"""Core functionality for calling schemas with resolved values."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Dict, List, Mapping

from ._parsers import ParserSpecification


def callable_with_values(
    parser_spec: ParserSpecification,
    value_from_field_name: Mapping[str, Any],
) -> Callable[[], Any]:
    """Populate the schema target with resolved values.

    We return a `Callable[[], T]` instead of the result directly; this keeps the
    stack short when the user's function raises."""
    positional_args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for field in parser_spec.fields:
        value = value_from_field_name[field.intern_name]
        if field.call_positionally:
            positional_args.append(value)
        else:
            kwargs[field.intern_name] = value
    return partial(parser_spec.f, *positional_args, **kwargs)
