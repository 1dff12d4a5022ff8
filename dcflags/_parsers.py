"""Parser specifications: schemas bound once into immutable descriptions that the
scanner and subcommand dispatcher interpret."""

from __future__ import annotations

import dataclasses
import functools
import logging
import re
from typing import Any, Callable, Dict, FrozenSet, Tuple, Union

from typing_extensions import get_args

from . import _docstrings, _fields, _resolver, _strings
from ._errors import SchemaDefinitionError
from .conf import _confstruct

logger = logging.getLogger(__name__)

_ALIAS_PATTERN = re.compile(r"-[A-Za-z]")


@dataclasses.dataclass(frozen=True)
class ParserSpecification:
    """A record schema: named flags, optionally followed by positional fields."""

    f: Callable
    fields: Tuple[_fields.FieldDefinition, ...]
    """Every field in declaration order, including the separator."""
    named_flags: Tuple[_fields.FieldDefinition, ...]
    positional_fields: Tuple[_fields.FieldDefinition, ...]
    separator: _fields.FieldDefinition | None
    field_from_flag: Dict[str, _fields.FieldDefinition]
    """Maps `--name` to its field."""
    field_from_alias: Dict[str, _fields.FieldDefinition]
    """Maps `-n` to its field."""

    @property
    def description(self) -> str:
        """Read from the docstring of `f` on demand; only helptext needs it."""
        return _docstrings.get_callable_description(self.f)

    @staticmethod
    def from_callable(
        f: Callable,
        markers: FrozenSet[Any],
        delimeter: _strings.Delimeter,
    ) -> ParserSpecification:
        field_list = _fields.field_list_from_callable(f, markers, delimeter)

        field_from_flag: Dict[str, _fields.FieldDefinition] = {}
        field_from_alias: Dict[str, _fields.FieldDefinition] = {}
        for field in field_list:
            if field.kind != "flag":
                continue

            if field.flag in _strings.HELP_ALIASES or field.flag in field_from_flag:
                raise SchemaDefinitionError(
                    f"Flag {field.flag} is declared more than once in {f.__name__},"
                    " or collides with the help flag."
                )
            field_from_flag[field.flag] = field

            if field.alias is None:
                continue
            if _ALIAS_PATTERN.fullmatch(field.alias) is None:
                raise SchemaDefinitionError(
                    f"Alias {field.alias!r} for {field.flag} should be a dash"
                    " followed by one letter, like '-v'."
                )
            if field.alias in _strings.HELP_ALIASES or field.alias in field_from_alias:
                raise SchemaDefinitionError(
                    f"Alias {field.alias} is declared more than once in"
                    f" {f.__name__}, or collides with the help flag."
                )
            field_from_alias[field.alias] = field

        positional_fields = tuple(x for x in field_list if x.kind == "positional")
        for field in positional_fields[:-1]:
            if field.is_multi_value:
                raise SchemaDefinitionError(
                    f"Positional field `{field.intern_name}` is a sequence, so it"
                    " must be the last positional field."
                )
        for field in positional_fields:
            if field.alias is not None:
                raise SchemaDefinitionError(
                    f"Positional field `{field.intern_name}` can't have an alias."
                )

        separators = tuple(x for x in field_list if x.kind == "separator")
        spec = ParserSpecification(
            f=f,
            fields=tuple(field_list),
            named_flags=tuple(x for x in field_list if x.kind == "flag"),
            positional_fields=positional_fields,
            separator=separators[0] if len(separators) > 0 else None,
            field_from_flag=field_from_flag,
            field_from_alias=field_from_alias,
        )
        logger.debug(
            "Bound %s: %d flags, %d positional fields",
            f.__name__,
            len(spec.named_flags),
            len(spec.positional_fields),
        )
        return spec


@dataclasses.dataclass(frozen=True)
class SubcommandsSpecification:
    """A tagged-union schema: one discriminant token selects a nested schema."""

    typ: Any
    description: str
    parser_from_name: Dict[str, ParserSpecification | SubcommandsSpecification]
    configured_description_from_name: Dict[str, str]
    """Descriptions set with `conf.subcommand(description=...)`."""

    def description_from_name(self, name: str) -> str:
        if name in self.configured_description_from_name:
            return self.configured_description_from_name[name]
        return self.parser_from_name[name].description

    @staticmethod
    def from_union(
        typ: Any,
        markers: FrozenSet[Any],
        delimeter: _strings.Delimeter,
    ) -> SubcommandsSpecification:
        typ, configs = _resolver.unwrap_annotated(typ, _confstruct._SubcommandConfig)
        assert _resolver.is_union(typ)

        parser_from_name: Dict[str, ParserSpecification | SubcommandsSpecification] = {}
        configured_description_from_name: Dict[str, str] = {}
        for option in get_args(typ):
            option_stripped, option_configs = _resolver.unwrap_annotated(
                option, _confstruct._SubcommandConfig
            )
            if option_stripped is _resolver.NoneType:
                raise SchemaDefinitionError(
                    f"{typ} includes None; subcommand unions can't be optional."
                )

            name = _strings.subcommand_name_from_type(option, delimeter)
            if name == "" or name.startswith("-") or any(c.isspace() for c in name):
                raise SchemaDefinitionError(
                    f"Subcommand name {name!r} in {typ} can't be matched by a single"
                    " token; names must be non-empty, must not start with '-', and"
                    " must not contain whitespace."
                )
            if name in parser_from_name:
                raise SchemaDefinitionError(
                    f"Subcommand name {name!r} is used more than once in {typ}."
                )

            parser = spec_from_type(option, markers, delimeter)
            parser_from_name[name] = parser

            for config in option_configs:
                if config.description is not None:
                    configured_description_from_name[name] = config.description

        description = ""
        for config in configs:
            if config.description is not None:
                description = config.description

        logger.debug("Bound subcommands %s", list(parser_from_name.keys()))
        return SubcommandsSpecification(
            typ=typ,
            description=description,
            parser_from_name=parser_from_name,
            configured_description_from_name=configured_description_from_name,
        )


def _spec_from_type(
    typ: Any,
    markers: FrozenSet[Any],
    delimeter: _strings.Delimeter,
) -> Union[ParserSpecification, SubcommandsSpecification]:
    typ_stripped = _resolver.unwrap_annotated(typ)
    if _resolver.is_union(typ_stripped):
        return SubcommandsSpecification.from_union(typ, markers, delimeter)
    if _resolver.is_struct_type(typ_stripped):
        return ParserSpecification.from_callable(typ_stripped, markers, delimeter)
    raise SchemaDefinitionError(
        f"{typ} can't be used as a schema. Expected a dataclass, a function, or a"
        " Union of those."
    )


def _cache_key(typ: Any) -> Any:
    """`Union[A, B] == Union[B, A]`, but subcommand order follows the arguments, so
    they are part of the key."""
    return (typ, tuple(_cache_key(arg) for arg in get_args(typ)))


@functools.lru_cache(maxsize=256)
def _cached_spec_from_type(
    key: Any,
    markers: FrozenSet[Any],
    delimeter: _strings.Delimeter,
) -> Union[ParserSpecification, SubcommandsSpecification]:
    return _spec_from_type(key[0], markers, delimeter)


def spec_from_type(
    typ: Any,
    markers: FrozenSet[Any],
    delimeter: _strings.Delimeter,
) -> Union[ParserSpecification, SubcommandsSpecification]:
    """Bind a schema, caching the result when the type is hashable."""
    key = _cache_key(typ)
    try:
        hash(key)
    except TypeError:
        return _spec_from_type(typ, markers, delimeter)
    return _cached_spec_from_type(key, markers, delimeter)
