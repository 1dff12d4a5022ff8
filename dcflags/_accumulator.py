"""Accumulation of multi-value (sequence-typed) fields across occurrences.

Three input forms are accepted for a field `--files`:

    --files=a.txt --files=b.txt     REPEATED
    --files=a.txt,b.txt             COMMA_JOINED
    --files a.txt b.txt             SPACE_SEPARATED

The first occurrence locks the field to its form. Later occurrences must use the
same form, and extend the buffer."""

from __future__ import annotations

import dataclasses
import enum
import logging
from typing import Any, List, Sequence

from ._errors import (
    EmptySliceError,
    InvalidSliceElementError,
    MixedSyntaxError,
)
from ._scalars import SequenceSpec

logger = logging.getLogger(__name__)


class SyntaxLock(enum.Enum):
    UNSET = "unset"
    REPEATED = "repeated (--f=a --f=b)"
    COMMA_JOINED = "comma-joined (--f=a,b)"
    SPACE_SEPARATED = "space-separated (--f a b)"


@dataclasses.dataclass
class Accumulator:
    """Per-call state for one sequence-typed field."""

    arg_name: str
    spec: SequenceSpec
    prog: str
    lock: SyntaxLock = SyntaxLock.UNSET
    buffer: List[Any] = dataclasses.field(default_factory=list)

    def push_inline(self, value: str) -> None:
        """Handle an occurrence with an inline value, `--f=value`."""
        if value == "":
            # `--f=` is an explicitly empty sequence.
            self._extend(SyntaxLock.COMMA_JOINED, [])
        elif "," in value:
            self._extend(SyntaxLock.COMMA_JOINED, value.split(","))
        else:
            self._extend(SyntaxLock.REPEATED, [value])

    def push_space_separated(self, tokens: Sequence[str]) -> None:
        """Handle an occurrence without an inline value, `--f a b c`. `tokens`
        may be empty."""
        self._extend(SyntaxLock.SPACE_SEPARATED, tokens)

    def _extend(self, syntax: SyntaxLock, tokens: Sequence[str]) -> None:
        assert syntax is not SyntaxLock.UNSET
        if self.lock is SyntaxLock.UNSET:
            logger.debug("%s: %s locked to %s", self.prog, self.arg_name, syntax.name)
            self.lock = syntax
        elif self.lock is not syntax:
            raise MixedSyntaxError(self.arg_name, self.lock, syntax, prog=self.prog)

        for token in tokens:
            index = len(self.buffer)
            try:
                self.buffer.append(self.spec.element.instance_from_str(token))
            except ValueError as e:
                raise InvalidSliceElementError(
                    self.arg_name, index, token, e.args[0], prog=self.prog
                ) from e

    def finalize(self) -> Sequence[Any]:
        assert self.lock is not SyntaxLock.UNSET
        if self.spec.non_empty and len(self.buffer) == 0:
            raise EmptySliceError(self.arg_name, prog=self.prog)
        return self.spec.container(self.buffer)
