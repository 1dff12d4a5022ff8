"""Invalid schemas should fail when they're bound, before any token is read."""

import dataclasses
from typing import Any, Dict, List, Optional, Union

import pytest
from typing_extensions import Annotated

import dcflags


def _assert_schema_error(schema: Any, **kwargs: Any) -> None:
    with pytest.raises(dcflags.SchemaDefinitionError):
        dcflags.parse(schema, [], **kwargs)
    # Raised even when the arguments would otherwise be fine, or ask for help.
    with pytest.raises(dcflags.SchemaDefinitionError):
        dcflags.parse(schema, ["--help"], **kwargs)


def test_schema_error_is_type_error() -> None:
    assert issubclass(dcflags.SchemaDefinitionError, TypeError)
    assert not issubclass(dcflags.SchemaDefinitionError, dcflags.ParseError)


def test_two_separators() -> None:
    @dataclasses.dataclass(kw_only=True)
    class A:
        _: dcflags.conf.Separator[None] = None
        a: str
        __: dcflags.conf.Separator[None] = None
        b: str

    _assert_schema_error(A)


def test_separator_with_value_type() -> None:
    @dataclasses.dataclass(kw_only=True)
    class A:
        _: dcflags.conf.Separator[int] = 0
        a: str

    _assert_schema_error(A)


def test_global_separator() -> None:
    @dataclasses.dataclass
    class A:
        a: str = "x"

    _assert_schema_error(A, config=(dcflags.conf.Separator,))


def test_duplicate_flag_names() -> None:
    @dataclasses.dataclass
    class A:
        a: Annotated[int, dcflags.conf.arg(name="x")] = 0
        b: Annotated[int, dcflags.conf.arg(name="x")] = 0

    _assert_schema_error(A)


def test_help_flag_collision() -> None:
    @dataclasses.dataclass
    class A:
        help: bool = False

    _assert_schema_error(A)
    _assert_schema_error(A, add_help=False)


def test_duplicate_aliases() -> None:
    @dataclasses.dataclass
    class A:
        a: Annotated[bool, dcflags.conf.arg(alias="-a")] = False
        b: Annotated[bool, dcflags.conf.arg(alias="-a")] = False

    _assert_schema_error(A)


@pytest.mark.parametrize("alias", ["a", "--a", "-ab", "-1", "-"])
def test_malformed_alias(alias: str) -> None:
    @dataclasses.dataclass
    class A:
        a: Annotated[bool, dcflags.conf.arg(alias=alias)] = False

    _assert_schema_error(A)


def test_help_alias_collision() -> None:
    @dataclasses.dataclass
    class A:
        height: Annotated[int, dcflags.conf.arg(alias="-h")] = 0

    _assert_schema_error(A)


def test_alias_on_positional() -> None:
    @dataclasses.dataclass(kw_only=True)
    class A:
        _: dcflags.conf.Separator[None] = None
        a: Annotated[str, dcflags.conf.arg(alias="-a")]

    _assert_schema_error(A)


def test_sequence_positional_must_be_last() -> None:
    @dataclasses.dataclass(kw_only=True)
    class A:
        _: dcflags.conf.Separator[None] = None
        files: List[str]
        dest: str

    _assert_schema_error(A)


@pytest.mark.parametrize(
    "typ",
    [Any, Dict[str, int], dict, Union[int, str], List[List[int]], List[Optional[int]]],
)
def test_unsupported_types(typ: Any) -> None:
    @dataclasses.dataclass
    class A:
        x: typ  # type: ignore

    _assert_schema_error(A)


def test_non_empty_on_scalar() -> None:
    @dataclasses.dataclass
    class A:
        x: dcflags.conf.NonEmpty[int] = 0

    _assert_schema_error(A)


def test_global_non_empty_skips_scalars() -> None:
    @dataclasses.dataclass
    class A:
        x: int = 0
        files: List[str] = dataclasses.field(default_factory=list)

    assert dcflags.parse(A, [], config=(dcflags.conf.NonEmpty,)) == A()
    with pytest.raises(dcflags.EmptySliceError):
        dcflags.parse(A, ["--files="], config=(dcflags.conf.NonEmpty,))


def test_nested_struct_field() -> None:
    @dataclasses.dataclass
    class Inner:
        a: int = 0

    @dataclasses.dataclass
    class Outer:
        inner: Inner = dataclasses.field(default_factory=Inner)

    _assert_schema_error(Outer)


def test_optional_subcommand_union() -> None:
    @dataclasses.dataclass
    class A:
        pass

    @dataclasses.dataclass
    class B:
        pass

    _assert_schema_error(Union[A, B, None])


def test_duplicate_subcommand_names() -> None:
    @dataclasses.dataclass
    class A:
        pass

    @dataclasses.dataclass
    class B:
        pass

    _assert_schema_error(
        Union[
            Annotated[A, dcflags.conf.subcommand("x")],
            Annotated[B, dcflags.conf.subcommand("x")],
        ]
    )


@pytest.mark.parametrize("name", ["run all", "", "-x", "--go", "tab\tname"])
def test_subcommand_name_must_be_one_token(name: str) -> None:
    @dataclasses.dataclass
    class A:
        pass

    @dataclasses.dataclass
    class B:
        pass

    _assert_schema_error(Union[Annotated[A, dcflags.conf.subcommand(name)], B])


def test_variadic_parameters() -> None:
    def main(*args: int) -> None:
        pass

    def main2(**kwargs: int) -> None:
        pass

    _assert_schema_error(main)
    _assert_schema_error(main2)


def test_missing_annotation() -> None:
    def main(a, b: int = 0) -> None:  # type: ignore
        pass

    _assert_schema_error(main)


@pytest.mark.parametrize("schema", [int, str, List[int], None])
def test_not_a_schema(schema: Any) -> None:
    _assert_schema_error(schema)
