"""The :mod:`dcflags.extras` submodule contains helpers that complement :func:`dcflags.parse()`.

.. warning::

    Compared to the core interface, APIs here are more likely to be changed or deprecated.

"""

from ._serialization import to_args as to_args
