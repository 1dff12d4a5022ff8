"""Abstractions for pulling out 'field' definitions, which specify inputs, types, and
defaults, from dataclasses and function signatures."""

from __future__ import annotations

import dataclasses
import inspect
from typing import Any, Callable, FrozenSet, List, Literal, Optional

from typing_extensions import get_args

from . import _resolver, _scalars, _strings
from ._errors import SchemaDefinitionError
from ._singleton import MISSING, MISSING_AND_NO_DEFAULT, NO_DEFAULT
from .conf import _confstruct, _markers

FieldKind = Literal["flag", "positional", "separator"]


@dataclasses.dataclass(frozen=True)
class FieldDefinition:
    intern_name: str
    """Name of the field in the schema, used as the keyword when calling it."""
    extern_name: str
    """Name in the CLI, without the leading `--`."""
    kind: FieldKind
    type: Any
    """Full type, including runtime annotations."""
    value_spec: Optional[_scalars.ValueSpec]
    """How tokens are converted. None only for the separator."""
    default: Any
    default_factory: Optional[Callable[[], Any]]
    is_optional: bool
    alias: Optional[str]
    helptext: Optional[str]
    """Set by `conf.arg(help=...)`. Docstrings and comments are only read when help
    is rendered; see `_help_formatting`."""
    metavar: str
    markers: FrozenSet[Any]
    call_positionally: bool = False

    @staticmethod
    def make(
        name: str,
        typ: Any,
        default: Any,
        default_factory: Optional[Callable[[], Any]],
        kind: FieldKind,
        markers: FrozenSet[Any],
        delimeter: _strings.Delimeter,
        call_positionally: bool = False,
    ) -> FieldDefinition:
        type_stripped, metadata = _resolver.unwrap_annotated(typ, "all")

        # Apply any `conf.arg()` overrides, later ones taking precedence.
        extern_name = _strings.flag_name_from_field_name(name, delimeter)
        alias = None
        metavar = None
        helptext = None
        for argconf in metadata:
            if not isinstance(argconf, _confstruct._ArgConfig):
                continue
            if argconf.name is not None:
                extern_name = argconf.name
            if argconf.alias is not None:
                alias = argconf.alias
            if argconf.metavar is not None:
                metavar = argconf.metavar
            if argconf.help is not None:
                helptext = argconf.help

        field_markers = frozenset(
            x for x in metadata if isinstance(x, (_markers._Marker, _markers.Range))
        )
        global_markers = markers
        markers = global_markers | field_markers

        if kind == "separator":
            if type_stripped is not _resolver.NoneType:
                raise SchemaDefinitionError(
                    f"Separator field `{name}` must be annotated as"
                    f" `Separator[None]`, but got {typ}."
                )
            return FieldDefinition(
                intern_name=name,
                extern_name=extern_name,
                kind=kind,
                type=typ,
                value_spec=None,
                default=None,
                default_factory=None,
                is_optional=True,
                alias=None,
                helptext=helptext,
                metavar="",
                markers=markers,
                call_positionally=call_positionally,
            )

        if _markers.Separator in markers:
            raise SchemaDefinitionError(
                "Separator must be attached to one field via `Separator[None]`,"
                " not passed in as a global marker."
            )

        core_type, is_optional = _resolver.unwrap_optional(type_stripped)
        if _resolver.is_struct_type(_resolver.unwrap_annotated(core_type)):
            raise SchemaDefinitionError(
                f"Field `{name}` has type {core_type}, but nested schemas are only"
                " supported as subcommands of a Union schema."
            )
        value_markers = set(markers)
        if (
            _markers.NonEmpty in global_markers
            and _markers.NonEmpty not in field_markers
            and _resolver.sequence_container(_resolver.unwrap_annotated(core_type))
            is None
        ):
            # Global markers only apply where they make sense.
            value_markers.discard(_markers.NonEmpty)
        value_spec = _scalars.get_value_spec(core_type, value_markers)

        if metavar is None:
            metavar = (
                extern_name.upper().replace("-", "_")
                if kind == "positional"
                else value_spec.metavar
            )

        return FieldDefinition(
            intern_name=name,
            extern_name=extern_name,
            kind=kind,
            type=typ,
            value_spec=value_spec,
            default=default,
            default_factory=default_factory,
            is_optional=is_optional,
            alias=alias,
            helptext=helptext,
            metavar=metavar,
            markers=markers,
            call_positionally=call_positionally,
        )

    @property
    def flag(self) -> str:
        return _strings.LONG_FLAG_PREFIX + self.extern_name

    @property
    def display_name(self) -> str:
        """Name used to refer to this field in error messages."""
        return self.flag if self.kind == "flag" else self.metavar

    @property
    def is_multi_value(self) -> bool:
        return isinstance(self.value_spec, _scalars.SequenceSpec)

    @property
    def has_default(self) -> bool:
        if self.default_factory is not None:
            return True
        return not any(self.default is x for x in MISSING_AND_NO_DEFAULT)

    @property
    def resolves_to_none(self) -> bool:
        """Optional fields without a default resolve to None when they aren't passed
        in, unless they were explicitly marked with `MISSING`."""
        return (
            self.is_optional and not self.has_default and self.default is not MISSING
        )

    def make_default(self) -> Any:
        """Produce the default value. Factories are called fresh every time."""
        assert self.has_default
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


def _separator_type(typ: Any) -> Optional[Any]:
    """Returns the `Separator[...]` annotation of a field, or None. On Python 3.10,
    `get_type_hints()` wraps parameters defaulting to None in `Optional[]`."""
    options = get_args(typ) if _resolver.is_union(typ) else (typ,)
    for option in options:
        _, metadata = _resolver.unwrap_annotated(option, "all")
        if any(x is _markers.Separator for x in metadata):
            return option
    return None


def _raw_fields_from_dataclass(
    cls: type,
) -> List[tuple[str, Any, Any, Optional[Callable[[], Any]], bool]]:
    hints = _resolver.resolved_hints(cls)
    out = []
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        default = (
            NO_DEFAULT if field.default is dataclasses.MISSING else field.default
        )
        default_factory = (
            None
            if field.default_factory is dataclasses.MISSING
            else field.default_factory
        )
        out.append((field.name, hints[field.name], default, default_factory, False))
    return out


def _raw_fields_from_function(
    f: Callable,
) -> List[tuple[str, Any, Any, Optional[Callable[[], Any]], bool]]:
    hints = _resolver.resolved_hints(f)
    out = []
    for param in inspect.signature(f).parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            raise SchemaDefinitionError(
                f"Variadic parameter `{param.name}` of {f.__name__} can't be"
                " parsed; only named parameters are supported."
            )
        if param.name not in hints:
            raise SchemaDefinitionError(
                f"Parameter `{param.name}` of {f.__name__} is missing a type"
                " annotation."
            )
        default = NO_DEFAULT if param.default is param.empty else param.default
        out.append(
            (
                param.name,
                hints[param.name],
                default,
                None,
                param.kind is param.POSITIONAL_ONLY,
            )
        )
    return out


def field_list_from_callable(
    f: Callable,
    markers: FrozenSet[Any],
    delimeter: _strings.Delimeter,
) -> List[FieldDefinition]:
    """Get the fields of a dataclass or function, in declaration order.

    Fields before a `conf.Separator[None]` field are flags; fields after it are
    positional. Without a separator every field is a flag."""
    if dataclasses.is_dataclass(f):
        raw_fields = _raw_fields_from_dataclass(f)  # type: ignore
    else:
        raw_fields = _raw_fields_from_function(f)

    separator_count = sum(
        1 for _, typ, _, _, _ in raw_fields if _separator_type(typ) is not None
    )
    if separator_count > 1:
        raise SchemaDefinitionError(
            f"{f.__name__} declares {separator_count} separator fields; at most one"
            " is allowed."
        )

    out: List[FieldDefinition] = []
    kind: FieldKind = "flag"
    for name, typ, default, default_factory, call_positionally in raw_fields:
        if _separator_type(typ) is not None:
            typ = _separator_type(typ)
            field_kind: FieldKind = "separator"
            kind = "positional"
        else:
            field_kind = kind
        out.append(
            FieldDefinition.make(
                name=name,
                typ=typ,
                default=default,
                default_factory=default_factory,
                kind=field_kind,
                markers=markers,
                delimeter=delimeter,
                call_positionally=call_positionally,
            )
        )
    return out
