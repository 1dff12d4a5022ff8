import dataclasses
import enum
import pathlib
from typing import Literal, Optional

import pytest
from typing_extensions import Annotated

import dcflags
from dcflags import _scalars


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


def test_bool_presence_and_explicit_values() -> None:
    @dataclasses.dataclass
    class A:
        flag: bool = False

    assert dcflags.parse(A, []) == A(flag=False)
    assert dcflags.parse(A, ["--flag"]) == A(flag=True)
    assert dcflags.parse(A, ["--flag=true"]) == A(flag=True)
    assert dcflags.parse(A, ["--flag=false"]) == A(flag=False)


@pytest.mark.parametrize("token", ["True", "FALSE", "1", "yes", ""])
def test_bool_is_case_sensitive(token: str) -> None:
    @dataclasses.dataclass
    class A:
        flag: bool = False

    with pytest.raises(dcflags.InvalidValueError) as e:
        dcflags.parse(A, [f"--flag={token}"], prog="app")
    assert e.value.arg_name == "--flag"
    assert e.value.token == token
    assert e.value.prog == "app"


def test_int() -> None:
    @dataclasses.dataclass
    class A:
        x: int

    assert dcflags.parse(A, ["--x=5"]) == A(x=5)
    assert dcflags.parse(A, ["--x=-3"]) == A(x=-3)
    assert dcflags.parse(A, ["--x=+7"]) == A(x=7)
    assert dcflags.parse(A, ["--x=007"]) == A(x=7)


@pytest.mark.parametrize("token", ["1_000", " 5", "5 ", "5.0", "0x10", "٣", "abc"])
def test_int_rejects_permissive_forms(token: str) -> None:
    @dataclasses.dataclass
    class A:
        x: int

    with pytest.raises(dcflags.InvalidValueError):
        dcflags.parse(A, [f"--x={token}"])


def test_float() -> None:
    @dataclasses.dataclass
    class A:
        x: float

    assert dcflags.parse(A, ["--x=1.5"]) == A(x=1.5)
    assert dcflags.parse(A, ["--x=-2e3"]) == A(x=-2000.0)
    assert dcflags.parse(A, ["--x=.5"]) == A(x=0.5)
    assert dcflags.parse(A, ["--x=3"]) == A(x=3.0)
    assert dcflags.parse(A, ["--x=inf"]) == A(x=float("inf"))

    for token in ("1_0.5", "abc", "1.5.5", " 1.5", "Infinity"):
        with pytest.raises(dcflags.InvalidValueError):
            dcflags.parse(A, [f"--x={token}"])


def test_ranges() -> None:
    @dataclasses.dataclass
    class A:
        port: dcflags.conf.UInt16 = 8080
        small: dcflags.conf.Int8 = 0
        workers: Annotated[int, dcflags.conf.Range(1, 64)] = 4

    assert dcflags.parse(A, ["--port=65535", "--small=-128"]) == A(
        port=65535, small=-128
    )
    assert dcflags.parse(A, ["--workers=64"]) == A(workers=64)

    for args in (["--port=65536"], ["--port=-1"], ["--small=128"], ["--workers=0"]):
        with pytest.raises(dcflags.InvalidValueError) as e:
            dcflags.parse(A, args)
        assert "outside of the allowed range" in e.value.reason


def test_enum_by_name() -> None:
    @dataclasses.dataclass
    class A:
        color: Color = Color.RED

    assert dcflags.parse(A, ["--color=GREEN"]) == A(color=Color.GREEN)
    with pytest.raises(dcflags.InvalidValueError) as e:
        dcflags.parse(A, ["--color=green"])
    assert "{RED,GREEN}" in e.value.reason


def test_enum_by_value() -> None:
    @dataclasses.dataclass
    class A:
        color: dcflags.conf.EnumChoicesFromValues[Color] = Color.RED

    assert dcflags.parse(A, ["--color=green"]) == A(color=Color.GREEN)
    with pytest.raises(dcflags.InvalidValueError):
        dcflags.parse(A, ["--color=GREEN"])


def test_enum_by_value_global_config() -> None:
    @dataclasses.dataclass
    class A:
        color: Color = Color.RED

    assert dcflags.parse(
        A, ["--color=green"], config=(dcflags.conf.EnumChoicesFromValues,)
    ) == A(color=Color.GREEN)


def test_literal() -> None:
    @dataclasses.dataclass
    class A:
        mode: Literal["fast", "slow"] = "fast"
        level: Literal[1, 2, 3] = 1

    assert dcflags.parse(A, ["--mode=slow", "--level=3"]) == A(mode="slow", level=3)
    with pytest.raises(dcflags.InvalidValueError):
        dcflags.parse(A, ["--mode=medium"])


def test_path() -> None:
    @dataclasses.dataclass
    class A:
        out: pathlib.Path = pathlib.Path("build")

    assert dcflags.parse(A, ["--out=/tmp/x"]) == A(out=pathlib.Path("/tmp/x"))


def test_optional_scalar() -> None:
    @dataclasses.dataclass
    class A:
        x: Optional[int]

    assert dcflags.parse(A, []) == A(x=None)
    assert dcflags.parse(A, ["--x"]) == A(x=None)
    assert dcflags.parse(A, ["--x=3"]) == A(x=3)


def test_missing_value() -> None:
    @dataclasses.dataclass
    class A:
        x: int = 3

    with pytest.raises(dcflags.MissingValueError) as e:
        dcflags.parse(A, ["--x"], prog="app")
    assert e.value.arg_name == "--x"
    assert str(e.value).startswith("app: ")


def test_space_separated_value_is_not_a_scalar_value() -> None:
    @dataclasses.dataclass
    class A:
        x: int = 3

    # `--x 5` is `--x` with no value, followed by a bare token.
    with pytest.raises(dcflags.MissingValueError):
        dcflags.parse(A, ["--x", "5"])


@pytest.mark.parametrize(
    "typ,value",
    [
        (bool, True),
        (bool, False),
        (int, -12),
        (int, 2**70),
        (float, 0.1),
        (float, -1e-07),
        (float, float("inf")),
        (str, "hello world"),
        (str, ""),
        (Color, Color.GREEN),
        (Literal["a", "b"], "b"),
        (pathlib.Path, pathlib.Path("a/b.txt")),
    ],
)
def test_round_trip(typ, value) -> None:
    spec = _scalars.get_scalar_spec(typ, set())
    assert spec.instance_from_str(spec.str_from_instance(value)) == value
