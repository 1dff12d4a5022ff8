from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, TypeVar

from typing_extensions import Annotated

from .. import _singleton

# All Annotated[T, None] values are just for static checkers. The real marker
# singletons are instantiated dynamically below.

T = TypeVar("T")

Separator = Annotated[T, None]
"""Mark the boundary between named flags and positional arguments.

Fields declared before the separator are parsed as ``--name=value`` flags;
fields declared after it are positional, and are filled in declaration order.
The separator itself carries no value, so it must be annotated as
``Separator[None]``. At most one separator is allowed per schema.

Example::

    @dataclasses.dataclass(kw_only=True)
    class Args:
        verbose: bool = False
        _: dcflags.conf.Separator[None] = None
        input_file: str
        output_file: str = "out.txt"

With this configuration, the CLI accepts ``prog --verbose in.txt`` and
``prog -- --weird-file-name.txt``.
"""

NonEmpty = Annotated[T, None]
"""Require a sequence-typed field to contain at least one element when it is
passed in. ``--files`` with no values then fails instead of producing ``[]``.

Example::

    files: dcflags.conf.NonEmpty[list[str]] = dataclasses.field(default_factory=lambda: ["a.txt"])
"""

EnumChoicesFromValues = Annotated[T, None]
"""Match enum members by their values instead of their names.

By default, ``--color=RED`` selects ``Color.RED``. With this marker, the string
form of each member's value is matched instead, so ``--color=red`` selects a
member declared as ``RED = "red"``.
"""


@dataclasses.dataclass(frozen=True)
class Range:
    """Inclusive bounds for integer fields, attached via ``Annotated``.

    Example::

        workers: Annotated[int, dcflags.conf.Range(1, 64)] = 4
    """

    min: int | None = None
    max: int | None = None

    def contains(self, value: int) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    def __str__(self) -> str:
        lo = "-inf" if self.min is None else str(self.min)
        hi = "inf" if self.max is None else str(self.max)
        return f"[{lo}, {hi}]"


# Fixed-width integer aliases.
Int8 = Annotated[int, Range(-(2**7), 2**7 - 1)]
Int16 = Annotated[int, Range(-(2**15), 2**15 - 1)]
Int32 = Annotated[int, Range(-(2**31), 2**31 - 1)]
Int64 = Annotated[int, Range(-(2**63), 2**63 - 1)]
UInt8 = Annotated[int, Range(0, 2**8 - 1)]
UInt16 = Annotated[int, Range(0, 2**16 - 1)]
UInt32 = Annotated[int, Range(0, 2**32 - 1)]
UInt64 = Annotated[int, Range(0, 2**64 - 1)]


# Dynamically generate marker singletons.
# These can be used one of two ways:
# - Marker[T]
# - Annotated[T, Marker]


class _Marker(_singleton.Singleton):
    def __getitem__(self, key):
        return Annotated[(key, self)]  # type: ignore


Marker = Any


if not TYPE_CHECKING:

    def _make_marker(description: str) -> _Marker:
        class _InnerMarker(_Marker):
            def __repr__(self):
                return description

        return _InnerMarker()

    _dynamic_marker_types = {}
    for k, v in dict(globals()).items():
        if v == Annotated[T, None]:
            _dynamic_marker_types[k] = _make_marker(k)
    globals().update(_dynamic_marker_types)
    del _dynamic_marker_types
