"""Errors raised by dcflags.

Every parse-time failure is a subclass of :class:`ParseError` and carries the
``prog`` of the (sub)command level that raised it. Schema problems are reported
separately as :class:`SchemaDefinitionError`, when the schema is bound and
before any token is read."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from ._parsers import ParserSpecification, SubcommandsSpecification


def _did_you_mean(suggestions: Sequence[str]) -> str:
    if len(suggestions) == 0:
        return ""
    return " Did you mean " + " or ".join(f"'{s}'" for s in suggestions) + "?"


class SchemaDefinitionError(TypeError):
    """Raised when a schema can't be turned into a parser, for example because
    of an unsupported type annotation or a misplaced separator."""


class HelpRequested(Exception):
    """Raised after the help collaborator has been invoked for ``-h``/``--help``.

    This is not a :class:`ParseError`: parsing stopped because the user asked
    for help, and the caller decides what happens next."""

    def __init__(
        self, spec: ParserSpecification | SubcommandsSpecification, prog: str
    ) -> None:
        super().__init__(f"{prog}: help requested")
        self.spec = spec
        self.prog = prog


class ParseError(Exception):
    """Base class for errors raised while converting tokens into values."""

    def __init__(self, message: str, *, prog: str) -> None:
        super().__init__(message)
        self.message = message
        self.prog = prog

    def __str__(self) -> str:
        return f"{self.prog}: {self.message}"


class UnknownFlagError(ParseError):
    def __init__(
        self, flag: str, *, suggestions: Sequence[str] = (), prog: str
    ) -> None:
        super().__init__(
            f"unrecognized flag '{flag}'." + _did_you_mean(suggestions), prog=prog
        )
        self.flag = flag
        self.suggestions = tuple(suggestions)


class UnknownSubcommandError(ParseError):
    def __init__(
        self,
        token: str,
        *,
        choices: Sequence[str],
        suggestions: Sequence[str] = (),
        prog: str,
    ) -> None:
        super().__init__(
            f"unknown subcommand '{token}', expected one of {{{','.join(choices)}}}."
            + _did_you_mean(suggestions),
            prog=prog,
        )
        self.token = token
        self.choices = tuple(choices)
        self.suggestions = tuple(suggestions)


class MissingSubcommandError(ParseError):
    def __init__(self, *, choices: Sequence[str], prog: str) -> None:
        super().__init__(
            f"missing subcommand, expected one of {{{','.join(choices)}}}.", prog=prog
        )
        self.choices = tuple(choices)


class DuplicateFlagError(ParseError):
    def __init__(self, flag: str, *, prog: str) -> None:
        super().__init__(f"flag '{flag}' was passed in more than once.", prog=prog)
        self.flag = flag


class MissingValueError(ParseError):
    def __init__(self, arg_name: str, *, metavar: str, prog: str) -> None:
        super().__init__(
            f"missing value for '{arg_name}', expected {arg_name}={metavar}.",
            prog=prog,
        )
        self.arg_name = arg_name


class InvalidValueError(ParseError):
    def __init__(self, arg_name: str, token: str, reason: str, *, prog: str) -> None:
        super().__init__(
            f"invalid value '{token}' for '{arg_name}': {reason}", prog=prog
        )
        self.arg_name = arg_name
        self.token = token
        self.reason = reason


class InvalidSliceElementError(ParseError):
    def __init__(
        self, arg_name: str, index: int, token: str, reason: str, *, prog: str
    ) -> None:
        super().__init__(
            f"invalid element '{token}' at index {index} for '{arg_name}': {reason}",
            prog=prog,
        )
        self.arg_name = arg_name
        self.index = index
        self.token = token
        self.reason = reason


class MixedSyntaxError(ParseError):
    def __init__(self, arg_name: str, locked: Any, found: Any, *, prog: str) -> None:
        super().__init__(
            f"'{arg_name}' was first passed in {locked.value} form, but later in"
            f" {found.value} form. Use one form for every occurrence.",
            prog=prog,
        )
        self.arg_name = arg_name
        self.locked = locked
        self.found = found


class EmptySliceError(ParseError):
    def __init__(self, arg_name: str, *, prog: str) -> None:
        super().__init__(f"'{arg_name}' requires at least one value.", prog=prog)
        self.arg_name = arg_name


class MissingRequiredFlagError(ParseError):
    def __init__(self, field: str, flag: str, *, prog: str) -> None:
        super().__init__(f"required flag '{flag}' was not passed in.", prog=prog)
        self.field = field
        self.flag = flag


class MissingRequiredPositionalError(ParseError):
    def __init__(self, field: str, metavar: str, *, prog: str) -> None:
        super().__init__(
            f"required positional argument {metavar} was not passed in.", prog=prog
        )
        self.field = field
        self.metavar = metavar


class UnexpectedArgumentError(ParseError):
    def __init__(self, token: str, reason: str, *, prog: str) -> None:
        super().__init__(f"unexpected argument '{token}': {reason}", prog=prog)
        self.token = token
        self.reason = reason


class EmptyInputError(ParseError):
    def __init__(self, *, prog: str) -> None:
        super().__init__(
            "argument vector is empty; expected at least the program name.",
            prog=prog,
        )
