import dataclasses
import enum
import inspect
import pathlib
from typing import List, Literal, Optional, Union, cast
from unittest import mock

from helptext_utils import get_helptext_with_checks
from typing_extensions import Annotated

import dcflags


class Color(enum.Enum):
    RED = enum.auto()
    GREEN = enum.auto()


def test_helptext() -> None:
    @dataclasses.dataclass
    class Helptext:
        """This docstring should be printed as a description."""

        x: int  # Documentation 1

        # Documentation 2
        y: Annotated[int, "ignored"]

        z: int = 3
        """Documentation 3"""

    helptext = get_helptext_with_checks(Helptext)
    assert cast(str, Helptext.__doc__) in helptext
    assert "--x=INT" in helptext
    assert "--y=INT" in helptext
    assert "--z=INT" in helptext
    assert "Documentation 1 (required)\n" in helptext
    assert "Documentation 2 (required)\n" in helptext
    assert "Documentation 3 (default: 3)\n" in helptext


def test_helptext_sphinx_autodoc_style() -> None:
    @dataclasses.dataclass
    class Helptext:
        #: Documentation 1
        x: int = 1

    helptext = get_helptext_with_checks(Helptext)
    assert "Documentation 1 (default: 1)\n" in helptext


def test_helptext_from_class_docstring() -> None:
    @dataclasses.dataclass
    class Helptext2:
        """This docstring should be printed as a description.

        Attributes:
            x: Documentation 1
            y: Documentation 2
        """

        x: int
        y: int = 5

    helptext = get_helptext_with_checks(Helptext2)
    assert "This docstring should be printed as a description." in helptext
    assert "Attributes" not in helptext
    assert "Documentation 1 (required)\n" in helptext
    assert "Documentation 2 (default: 5)\n" in helptext


def test_helptext_inherited() -> None:
    @dataclasses.dataclass
    class Parent:
        x: int = 1  # Documentation 1

    @dataclasses.dataclass
    class Child(Parent):
        y: int = 2
        """Documentation 2"""

    helptext = get_helptext_with_checks(Child)
    assert "Documentation 1 (default: 1)\n" in helptext
    assert "Documentation 2 (default: 2)\n" in helptext


def test_generated_docstring_is_ignored() -> None:
    @dataclasses.dataclass
    class NoDocstring:
        x: int = 1

    helptext = get_helptext_with_checks(NoDocstring)
    assert "NoDocstring(" not in helptext


def test_dynamic_dataclass() -> None:
    # No source code to read comments from.
    Dynamic = dataclasses.make_dataclass(
        "Dynamic", [("x", int, dataclasses.field(default=1))]
    )
    helptext = get_helptext_with_checks(Dynamic)
    assert "--x=INT" in helptext
    assert "(default: 1)" in helptext


def test_helptext_function() -> None:
    def main(a: int, b: str = "hello") -> None:
        """Do some work.

        Longer description of the work.

        Args:
            a: Documentation 1
            b: Documentation 2
        """

    helptext = get_helptext_with_checks(main)
    assert "Do some work." in helptext
    assert "Longer description of the work." in helptext
    assert "Args:" not in helptext
    assert "Documentation 1 (required)\n" in helptext
    assert "Documentation 2 (default: hello)\n" in helptext


def test_arg_config_overrides() -> None:
    @dataclasses.dataclass
    class A:
        x: Annotated[
            int, dcflags.conf.arg(name="renamed", metavar="N", help="Overridden.")
        ] = 1  # Not this.

    helptext = get_helptext_with_checks(A)
    assert "--renamed=N" in helptext
    assert "Overridden. (default: 1)\n" in helptext
    assert "Not this." not in helptext
    assert dcflags.parse(A, ["--renamed=2"]) == A(x=2)


def test_metavars_and_defaults() -> None:
    @dataclasses.dataclass
    class A:
        flag: bool = False
        color: Color = Color.RED
        mode: Literal["fast", "slow"] = "fast"
        path: pathlib.Path = pathlib.Path("/tmp")
        ratio: float = 0.5
        limit: Optional[int] = None
        files: List[str] = dataclasses.field(default_factory=lambda: ["a", "b"])

    helptext = get_helptext_with_checks(A)
    assert "--flag " in helptext
    assert "--color={RED,GREEN}" in helptext
    assert "--mode={fast,slow}" in helptext
    assert "--path=PATH" in helptext
    assert "--ratio=FLOAT" in helptext
    assert "--limit=INT" in helptext
    assert "--files [STR [STR ...]]" in helptext
    assert "(default: false)" in helptext
    assert "(default: RED)" in helptext
    assert "(default: fast)" in helptext
    assert "(default: /tmp)" in helptext
    assert "(default: 0.5)" in helptext
    assert "(default: None)" in helptext
    assert "(default: a b)" in helptext


def test_required_optional() -> None:
    @dataclasses.dataclass
    class A:
        limit: Optional[int] = dcflags.MISSING

    helptext = get_helptext_with_checks(A)
    assert "usage: app [-h] --limit=INT\n" in helptext
    assert "(required)" in helptext


def test_use_underscores() -> None:
    @dataclasses.dataclass
    class A:
        dry_run: bool = False

    assert "--dry_run" in get_helptext_with_checks(A, use_underscores=True)
    assert "--dry-run" in get_helptext_with_checks(A)


def test_subcommand_helptext() -> None:
    @dataclasses.dataclass
    class Checkout:
        """Check out a branch."""

        branch: str

    @dataclasses.dataclass
    class Commit:
        message: str

    helptext = get_helptext_with_checks(
        Union[  # type: ignore
            Checkout,
            Annotated[Commit, dcflags.conf.subcommand(description="Record changes.")],
        ]
    )
    assert "{checkout,commit}" in helptext
    assert "Check out a branch." in helptext
    assert "Record changes." in helptext

    helptext = get_helptext_with_checks(
        Union[Checkout, Commit], args=["checkout", "--help"]  # type: ignore
    )
    assert helptext.startswith("usage: app checkout [-h] --branch=STR\n")


def test_long_invocations_wrap() -> None:
    @dataclasses.dataclass
    class A:
        a_very_long_flag_name_for_wrapping: int = 1
        """Documentation 1"""

    helptext = get_helptext_with_checks(A)
    lines = helptext.splitlines()
    index = [i for i, line in enumerate(lines) if "--a-very-long" in line][-1]
    assert lines[index].strip() == "--a-very-long-flag-name-for-wrapping=INT"
    assert lines[index + 1].strip() == "Documentation 1 (default: 1)"


def test_parse_does_not_read_source() -> None:
    @dataclasses.dataclass
    class Lazy:
        """Read only when help is shown."""

        x: int = 1  # Documentation 1

        y: int = 2
        """Documentation 2"""

    @dataclasses.dataclass
    class Other:
        z: int = 3  # Documentation 3

    with mock.patch.object(inspect, "getsource", wraps=inspect.getsource) as spy:
        assert dcflags.parse(Lazy, ["--x=5"]) == Lazy(x=5, y=2)
        assert dcflags.parse(Union[Lazy, Other], ["other", "--z=4"]) == Other(z=4)
    assert spy.call_count == 0

    helptext = get_helptext_with_checks(Lazy)
    assert "Read only when help is shown." in helptext
    assert "Documentation 1 (default: 1)\n" in helptext
    assert "Documentation 2 (default: 2)\n" in helptext
