"""Token scanning for record schemas.

The scanner is a two-state machine. While SCANNING, each token is dispatched to
the help collaborator, the separator, a long flag, a short alias, or the next
positional field. After the separator or the first positional value, the scanner
is in POSITIONAL_ONLY mode and every remaining token is a positional value, even
if it looks like a flag."""

from __future__ import annotations

import difflib
import enum
import re
from collections import deque
from typing import Any, Callable, Dict, NoReturn, Optional, Sequence, Union

from . import _defaults, _scalars, _strings
from ._accumulator import Accumulator
from ._errors import (
    DuplicateFlagError,
    HelpRequested,
    UnexpectedArgumentError,
    UnknownFlagError,
)
from ._fields import FieldDefinition
from ._parsers import ParserSpecification, SubcommandsSpecification

HelpHandler = Callable[
    [Union[ParserSpecification, SubcommandsSpecification], str], None
]

_NEGATIVE_NUMBER_PATTERN = re.compile(
    r"-(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)"
)


class ScanState(enum.Enum):
    SCANNING = enum.auto()
    POSITIONAL_ONLY = enum.auto()


def looks_like_flag(token: str) -> bool:
    """True for `--name`, `-n`, and `--`. A lone `-` and negative numbers are bare
    tokens."""
    return (
        token.startswith("-")
        and len(token) > 1
        and _NEGATIVE_NUMBER_PATTERN.fullmatch(token) is None
    )


def request_help(
    spec: Union[ParserSpecification, SubcommandsSpecification],
    prog: str,
    help_handler: Optional[HelpHandler],
) -> NoReturn:
    """Hand the matched schema to the help collaborator, then stop parsing."""
    if help_handler is not None:
        help_handler(spec, prog)
    raise HelpRequested(spec, prog)


class ArgumentScanner:
    """Per-call scanning state for one record schema. Use once, via `run()`."""

    def __init__(
        self,
        parser_spec: ParserSpecification,
        args: Sequence[str],
        *,
        prog: str,
        help_handler: Optional[HelpHandler] = None,
        add_help: bool = True,
    ) -> None:
        self.parser_spec = parser_spec
        self.prog = prog
        self.help_handler = help_handler
        self.add_help = add_help

        self.state = ScanState.SCANNING
        self._tokens: deque[str] = deque(args)
        self._values: Dict[str, Any] = {}
        self._accumulators: Dict[str, Accumulator] = {}
        self._positional_index = 0

    def run(self) -> Dict[str, Any]:
        """Consume every token, then resolve defaults. Returns values keyed by
        field name."""
        while len(self._tokens) > 0:
            token = self._tokens.popleft()

            if self.state is ScanState.POSITIONAL_ONLY:
                self._consume_positional(token)
            elif self.add_help and token in _strings.HELP_ALIASES:
                request_help(self.parser_spec, self.prog, self.help_handler)
            elif token == _strings.SEPARATOR_TOKEN:
                if len(self.parser_spec.positional_fields) == 0:
                    raise UnexpectedArgumentError(
                        token, "no positional arguments are accepted.", prog=self.prog
                    )
                self.state = ScanState.POSITIONAL_ONLY
            elif token.startswith(_strings.LONG_FLAG_PREFIX):
                self._consume_long_flag(token)
            elif looks_like_flag(token):
                self._consume_short_flag(token)
            else:
                self._consume_positional(token)

        return _defaults.resolve_defaults(
            self.parser_spec, self._values, self._accumulators, prog=self.prog
        )

    def _consume_long_flag(self, token: str) -> None:
        name, eq, value = token.partition("=")
        field = self.parser_spec.field_from_flag.get(name, None)
        if field is None:
            raise UnknownFlagError(
                name,
                suggestions=difflib.get_close_matches(
                    name, list(self.parser_spec.field_from_flag.keys()), n=3
                ),
                prog=self.prog,
            )
        self._consume_flag(field, value if eq else None)

    def _consume_short_flag(self, token: str) -> None:
        name, eq, value = token.partition("=")
        field = self.parser_spec.field_from_alias.get(name, None)
        if field is None:
            raise UnexpectedArgumentError(
                token,
                "short flags must be declared as an alias of a long flag.",
                prog=self.prog,
            )
        self._consume_flag(field, value if eq else None)

    def _consume_flag(self, field: FieldDefinition, inline: Optional[str]) -> None:
        if field.is_multi_value:
            accumulator = self._get_accumulator(field)
            if inline is not None:
                accumulator.push_inline(inline)
            else:
                accumulator.push_space_separated(self._take_space_separated())
            return

        if field.intern_name in self._values:
            raise DuplicateFlagError(field.flag, prog=self.prog)
        assert isinstance(field.value_spec, _scalars.ScalarSpec)
        self._values[field.intern_name] = _scalars.convert_token(
            field.value_spec,
            inline,
            is_optional=field.is_optional,
            arg_name=field.flag,
            prog=self.prog,
        )

    def _take_space_separated(self) -> list[str]:
        """Pop values up to the next flag-like token or the end of the stream."""
        out = []
        while len(self._tokens) > 0 and not looks_like_flag(self._tokens[0]):
            out.append(self._tokens.popleft())
        return out

    def _consume_positional(self, token: str) -> None:
        positional_fields = self.parser_spec.positional_fields
        if self._positional_index >= len(positional_fields):
            raise UnexpectedArgumentError(
                token,
                "no positional arguments are accepted."
                if len(positional_fields) == 0
                else f"expected at most {len(positional_fields)} positional"
                " argument(s).",
                prog=self.prog,
            )

        field = positional_fields[self._positional_index]
        self._positional_index += 1
        self.state = ScanState.POSITIONAL_ONLY

        if field.is_multi_value:
            # The final sequence-typed positional absorbs everything left.
            tokens = [token, *self._tokens]
            self._tokens.clear()
            self._get_accumulator(field).push_space_separated(tokens)
            return

        assert isinstance(field.value_spec, _scalars.ScalarSpec)
        self._values[field.intern_name] = _scalars.convert_token(
            field.value_spec,
            token,
            is_optional=field.is_optional,
            arg_name=field.display_name,
            prog=self.prog,
        )

    def _get_accumulator(self, field: FieldDefinition) -> Accumulator:
        if field.intern_name not in self._accumulators:
            assert isinstance(field.value_spec, _scalars.SequenceSpec)
            self._accumulators[field.intern_name] = Accumulator(
                arg_name=field.display_name,
                spec=field.value_spec,
                prog=self.prog,
            )
        return self._accumulators[field.intern_name]
