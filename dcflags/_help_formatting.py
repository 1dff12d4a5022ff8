"""Default help collaborator: renders usage, helptext, and error messages.

Nothing in here is called by the parser itself; `dcflags.cli()` injects
`print_help()` as the help handler and uses `format_error()` on failures."""

from __future__ import annotations

import shutil
import sys
import textwrap
from typing import Any, List, Optional, Sequence, Tuple, Union

import termcolor

from . import _docstrings, _scalars, _strings
from ._errors import ParseError
from ._fields import FieldDefinition
from ._parsers import ParserSpecification, SubcommandsSpecification

_MAX_INVOCATION_WIDTH = 28


def _bold(x: str) -> str:
    return termcolor.colored(x, attrs=["bold"])


def _format_metavar(x: str) -> str:
    return termcolor.colored(x, "cyan")


def _str_from_default(field: FieldDefinition) -> str:
    value = field.make_default()
    if value is None:
        return "None"
    spec = field.value_spec
    if isinstance(spec, _scalars.SequenceSpec):
        return " ".join(spec.str_from_instance(value))
    assert isinstance(spec, _scalars.ScalarSpec)
    return spec.str_from_instance(value)


def _flag_invocation(field: FieldDefinition) -> str:
    """`--name=INT`, or `-n, --name=INT` when an alias is declared."""
    assert field.value_spec is not None
    if isinstance(field.value_spec, _scalars.ScalarSpec) and field.value_spec.is_bool:
        out = _bold(field.flag)
    elif field.is_multi_value:
        out = _bold(field.flag) + " " + _format_metavar(field.metavar)
    else:
        out = _bold(field.flag) + "=" + _format_metavar(field.metavar)
    if field.alias is not None:
        out = _bold(field.alias) + ", " + out
    return out


def _positional_invocation(field: FieldDefinition) -> str:
    if field.is_multi_value:
        return _format_metavar(_strings.multi_metavar_from_single(field.metavar))
    return _format_metavar(field.metavar)


def _usage_part(field: FieldDefinition) -> str:
    if field.kind == "flag":
        part = _flag_invocation(field).split(", ")[-1]
    else:
        part = _positional_invocation(field)
    if field.has_default or field.resolves_to_none:
        part = f"[{part}]"
    return part


def format_usage(
    spec: Union[ParserSpecification, SubcommandsSpecification],
    prog: str,
    *,
    add_help: bool = True,
) -> str:
    parts = [_bold("usage:"), prog]
    if add_help:
        parts.append("[-h]")
    if isinstance(spec, SubcommandsSpecification):
        parts.append(
            _format_metavar("{" + ",".join(spec.parser_from_name.keys()) + "}")
        )
        parts.append("...")
    else:
        parts.extend(_usage_part(field) for field in spec.named_flags)
        if len(spec.positional_fields) > 0:
            parts.append("[--]")
            parts.extend(_usage_part(field) for field in spec.positional_fields)
    return " ".join(parts)


def _format_rows(rows: Sequence[Tuple[str, str]], width: int) -> List[str]:
    """Two-column layout. Invocations that are too wide push their helptext onto
    the next line."""
    left_width = min(
        max(len(_strings.strip_ansi_sequences(left)) for left, _ in rows),
        _MAX_INVOCATION_WIDTH,
    )
    indent = " " * (left_width + 4)
    out: List[str] = []
    for left, right in rows:
        wrapped = textwrap.wrap(right, width=max(width - len(indent), 20))
        left_len = len(_strings.strip_ansi_sequences(left))
        if left_len > left_width:
            out.append("  " + left)
            out.extend(indent + line for line in wrapped)
            continue
        first = wrapped[0] if len(wrapped) > 0 else ""
        padding = " " * (left_width - left_len)
        out.append(("  " + left + padding + "  " + first).rstrip())
        out.extend(indent + line for line in wrapped[1:])
    return out


def _field_helptext(spec: ParserSpecification, field: FieldDefinition) -> str:
    parts: List[str] = []
    helptext = field.helptext
    if helptext is None:
        helptext = _docstrings.get_field_docstring(spec.f, field.intern_name)
    if helptext is not None:
        parts.append(helptext)
    if field.has_default:
        parts.append(f"(default: {_str_from_default(field)})")
    elif field.resolves_to_none:
        parts.append("(default: None)")
    else:
        parts.append("(required)")
    return " ".join(parts)


def format_help(
    spec: Union[ParserSpecification, SubcommandsSpecification],
    prog: str,
    *,
    description: Optional[str] = None,
    add_help: bool = True,
) -> List[str]:
    """Render the full helptext for one (sub)command level, as a list of lines."""
    width = min(shutil.get_terminal_size().columns, 100)
    out = [format_usage(spec, prog, add_help=add_help), ""]

    if description is None:
        description = spec.description
    if description != "":
        out.extend(description.split("\n"))
        out.append("")

    if isinstance(spec, SubcommandsSpecification):
        rows = [
            (_bold(name), spec.description_from_name(name))
            for name in spec.parser_from_name.keys()
        ]
        out.append(_bold("subcommands:"))
        out.extend(_format_rows(rows, width))
        out.append("")
        return out

    flag_rows: List[Tuple[str, str]] = []
    if add_help:
        flag_rows.append(
            (
                _bold("-h") + ", " + _bold("--help"),
                "show this help message and exit",
            )
        )
    flag_rows.extend(
        (_flag_invocation(field), _field_helptext(spec, field))
        for field in spec.named_flags
    )
    if len(flag_rows) > 0:
        out.append(_bold("options:"))
        out.extend(_format_rows(flag_rows, width))
        out.append("")

    if len(spec.positional_fields) > 0:
        out.append(_bold("positional arguments:"))
        out.extend(
            _format_rows(
                [
                    (_positional_invocation(field), _field_helptext(spec, field))
                    for field in spec.positional_fields
                ],
                width,
            )
        )
        out.append("")
    return out


def print_help(
    spec: Union[ParserSpecification, SubcommandsSpecification],
    prog: str,
    *,
    description: Optional[str] = None,
    add_help: bool = True,
    file: Any = None,
) -> None:
    """Help handler used by `dcflags.cli()`."""
    print(
        *format_help(spec, prog, description=description, add_help=add_help),
        sep="\n",
        file=sys.stdout if file is None else file,
    )


def spec_from_prog(
    root_spec: Union[ParserSpecification, SubcommandsSpecification],
    root_prog: str,
    prog: str,
) -> Union[ParserSpecification, SubcommandsSpecification]:
    """Find the (sub)command level an error was raised from, using the subcommand
    names appended to its `prog`."""
    spec = root_spec
    assert prog.startswith(root_prog)
    for name in prog[len(root_prog) :].split():
        assert isinstance(spec, SubcommandsSpecification)
        spec = spec.parser_from_name[name]
    return spec


def format_error(
    error: ParseError,
    spec: Union[ParserSpecification, SubcommandsSpecification],
    *,
    add_help: bool = True,
) -> List[str]:
    """Render a parse error. `spec` should be the level that raised it."""
    out = [
        format_usage(spec, error.prog, add_help=add_help),
        termcolor.colored(f"{error.prog}: error: ", "red", attrs=["bold"])
        + error.message,
    ]
    if add_help:
        out.append(f"For full helptext, run {_bold(error.prog + ' --help')}")
    return out
