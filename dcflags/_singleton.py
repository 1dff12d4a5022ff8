from typing import Any


class Singleton:
    # Singleton pattern.
    # https://www.python.org/download/releases/2.2/descrintro/#__new__
    def __new__(cls, *args, **kwds):
        it = cls.__dict__.get("__it__")
        if it is not None:
            return it
        cls.__it__ = it = object.__new__(cls)
        it.init(*args, **kwds)
        return it

    def init(self, *args, **kwds):
        pass


class MissingType(Singleton):
    """Type for the :data:`dcflags.MISSING` singleton."""

    def __repr__(self) -> str:
        return "dcflags.MISSING"


MISSING: Any = MissingType()
"""Sentinel value to mark a field as required, even if the schema would
otherwise provide a default. Unlike a field without a default, an `Optional[T]`
field marked this way does not fall back to None.

.. code-block:: python

    @dataclasses.dataclass
    class Args:
        port: int = dcflags.MISSING  # --port=VALUE must be passed in.
"""


class NoDefaultType(Singleton):
    def __repr__(self) -> str:
        return "dcflags.NO_DEFAULT"


NO_DEFAULT: Any = NoDefaultType()
"""Internal marker for fields that were declared without any default. Unlike
:data:`MISSING`, this still lets optional fields resolve to None."""

MISSING_AND_NO_DEFAULT = (MISSING, NO_DEFAULT)
