"""Utilities for resolving and unwrapping type annotations."""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
from types import UnionType
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    overload,
)

from typing_extensions import Annotated, get_args, get_origin, get_type_hints

NoneType = type(None)
MetadataType = TypeVar("MetadataType")


@overload
def unwrap_annotated(
    typ: Any,
    search_type: type[MetadataType],
) -> Tuple[Any, Tuple[MetadataType, ...]]: ...


@overload
def unwrap_annotated(
    typ: Any,
    search_type: Literal["all"],
) -> Tuple[Any, Tuple[Any, ...]]: ...


@overload
def unwrap_annotated(
    typ: Any,
    search_type: None = None,
) -> Any: ...


def unwrap_annotated(
    typ: Any,
    search_type: Union[type, Literal["all"], None] = None,
) -> Union[Tuple[Any, Tuple[Any, ...]], Any]:
    """Helper for parsing typing.Annotated types.

    Strips one layer of Annotated and extracts metadata. Nested Annotated types are
    flattened by `typing` itself, so one layer is all there is.

    Examples:
    - int, int => (int, ())
    - Annotated[int, 1], int => (int, (1,))
    - Annotated[int, "1"], int => (int, ())
    """
    if not hasattr(typ, "__metadata__"):
        return typ if search_type is None else (typ, ())

    args = get_args(typ)
    assert len(args) >= 2
    if search_type is None:
        return args[0]

    targets = tuple(
        x
        for x in args[1:]
        if search_type == "all" or isinstance(x, search_type)  # type: ignore
    )
    return args[0], targets


def is_union(typ: Any) -> bool:
    return get_origin(typ) in (Union, UnionType)


def unwrap_optional(typ: Any) -> Tuple[Any, bool]:
    """Strip exactly one level of `Optional[]`.

    Examples:
    - Optional[int] => (int, True)
    - Union[int, str, None] => (Union[int, str], True)
    - int => (int, False)
    """
    if not is_union(typ):
        return typ, False
    options = get_args(typ)
    if NoneType not in options:
        return typ, False
    rest = tuple(o for o in options if o is not NoneType)
    if len(rest) == 1:
        return rest[0], True
    return Union[rest], True  # type: ignore


def is_struct_type(typ: Any) -> bool:
    """Can `typ` be treated as a record schema, with each input becoming a field?"""
    if dataclasses.is_dataclass(typ) and isinstance(typ, type):
        return True
    return inspect.isfunction(typ) or inspect.ismethod(typ)


def sequence_container(typ: Any) -> Tuple[Callable[[Any], Sequence], Any] | None:
    """If `typ` is a homogeneous sequence type, return (container constructor,
    element type). Returns None otherwise.

    Examples:
    - list[int] => (list, int)
    - Sequence[str] => (list, str)
    - tuple[float, ...] => (tuple, float)
    - tuple[int, str] => None
    """
    if typ in (list, List, collections.abc.Sequence, Sequence):
        return list, str
    if typ in (tuple, Tuple):
        return tuple, str

    origin = get_origin(typ)
    args = get_args(typ)
    if origin in (list, collections.abc.Sequence):
        return list, args[0] if len(args) == 1 else str
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple, args[0]
        return None
    return None


def resolved_hints(f: Callable) -> Dict[str, Any]:
    """Evaluate the (possibly stringified) annotations of a class or function,
    keeping `Annotated[]` metadata."""
    return get_type_hints(f, include_extras=True)


def annotated_with(typ: Any, *metadata: Any) -> Any:
    if len(metadata) == 0:
        return typ
    return Annotated[(typ, *metadata)]  # type: ignore
