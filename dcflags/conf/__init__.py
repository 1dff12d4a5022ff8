"""The :mod:`dcflags.conf` submodule contains helpers for attaching parsing-specific
configuration metadata to types via `PEP 593 <https://peps.python.org/pep-0593/>`_ runtime
annotations.

Markers can be applied in three ways:

1. They can be subscripted directly: ``dcflags.conf.NonEmpty[list[str]]``
2. They can be passed into :py:data:`typing.Annotated`: ``Annotated[str, dcflags.conf.NonEmpty]``
3. They can be passed into :func:`dcflags.parse`: ``dcflags.parse(Args, args, config=(dcflags.conf.EnumChoicesFromValues,))``
"""

from ._confstruct import arg as arg
from ._confstruct import subcommand as subcommand
from ._markers import EnumChoicesFromValues as EnumChoicesFromValues
from ._markers import Int8 as Int8
from ._markers import Int16 as Int16
from ._markers import Int32 as Int32
from ._markers import Int64 as Int64
from ._markers import NonEmpty as NonEmpty
from ._markers import Range as Range
from ._markers import Separator as Separator
from ._markers import UInt8 as UInt8
from ._markers import UInt16 as UInt16
from ._markers import UInt32 as UInt32
from ._markers import UInt64 as UInt64
