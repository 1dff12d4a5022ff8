"""Resolution of fields that were not filled in during scanning."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ._accumulator import Accumulator
from ._errors import MissingRequiredFlagError, MissingRequiredPositionalError
from ._parsers import ParserSpecification


def resolve_defaults(
    parser_spec: ParserSpecification,
    values: Mapping[str, Any],
    accumulators: Mapping[str, Accumulator],
    *,
    prog: str,
) -> Dict[str, Any]:
    """Produce a value for every field of `parser_spec`, in declaration order.

    Seen fields keep their scanned value, and seen sequence fields are finalized.
    Unseen fields fall back to their default, then to None if optional and not
    marked with `MISSING`. The first required field without a value raises."""
    out: Dict[str, Any] = {}
    for field in parser_spec.fields:
        name = field.intern_name
        if field.kind == "separator":
            out[name] = None
        elif name in accumulators:
            out[name] = accumulators[name].finalize()
        elif name in values:
            out[name] = values[name]
        elif field.has_default:
            out[name] = field.make_default()
        elif field.resolves_to_none:
            out[name] = None
        elif field.kind == "flag":
            raise MissingRequiredFlagError(name, field.flag, prog=prog)
        else:
            raise MissingRequiredPositionalError(name, field.metavar, prog=prog)
    return out
