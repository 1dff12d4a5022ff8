from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class _SubcommandConfig:
    name: str | None
    description: str | None


def subcommand(
    name: str | None = None,
    *,
    description: str | None = None,
) -> Any:
    """Configure subcommand behavior for Union types.

    Members of a ``Union`` schema become subcommands. By default the
    subcommand name is derived from the class name (``StartServer`` becomes
    ``start-server``); ``subcommand()`` overrides it. Nested unions must be
    named this way to stay distinct from the outer union.

    Example::

        from dataclasses import dataclass
        from typing import Annotated, Union

        import dcflags

        @dataclass
        class Add:
            url: str

        @dataclass
        class Remove:
            force: bool = False

        @dataclass
        class Status:
            short: bool = False

        Command = Union[
            Annotated[Union[Add, Remove], dcflags.conf.subcommand("remote")],
            Annotated[Status, dcflags.conf.subcommand("st")],
        ]

        # CLI usage: python script.py remote add --url=https://...
        dcflags.cli(Command)

    Args:
        name: Custom name for the subcommand in the CLI.
        description: Custom helptext for this subcommand.

    Returns:
        A configuration object that should be attached to a type using `Annotated[]`.
    """
    return _SubcommandConfig(name, description)


@dataclasses.dataclass(frozen=True)
class _ArgConfig:
    name: str | None
    alias: str | None
    metavar: str | None
    help: str | None


def arg(
    *,
    name: str | None = None,
    alias: str | None = None,
    metavar: str | None = None,
    help: str | None = None,
) -> Any:
    """Provide fine-grained control over an argument's name and helptext.

    Should be attached to a field using `Annotated[]`.

    Example::

        @dataclasses.dataclass
        class Args:
            verbose: Annotated[bool, dcflags.conf.arg(alias="-v")] = False
            out_dir: Annotated[str, dcflags.conf.arg(name="output")] = "."

    With this configuration, ``-v``, ``--verbose`` and ``--output=build`` are
    all accepted.

    Args:
        name: A new name for the argument in the CLI. The leading ``--`` is added
            automatically.
        alias: A one-character short alias, written with its leading dash (``"-v"``).
            ``-v`` and ``-v=value`` are both accepted.
        metavar: Metavar to display in helptext.
        help: Override helptext for this argument. The docstring is used by default.

    Returns:
        A configuration object that should be attached to a type using `Annotated[]`.
    """
    return _ArgConfig(name=name, alias=alias, metavar=metavar, help=help)
