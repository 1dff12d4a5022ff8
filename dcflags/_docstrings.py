"""Helpers for reading helptext from docstrings and comments. Only the default help
collaborator uses these; parsing never depends on them."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import io
import tokenize
from typing import Callable, Dict, List, Optional

import docstring_parser

from . import _strings


@dataclasses.dataclass(frozen=True)
class _Token:
    token_type: int
    content: str
    logical_line: int
    actual_line: int


@dataclasses.dataclass(frozen=True)
class _FieldData:
    index: int
    logical_line: int
    actual_line: int


@dataclasses.dataclass(frozen=True)
class _ClassTokenization:
    tokens: List[_Token]
    tokens_from_logical_line: Dict[int, List[_Token]]
    tokens_from_actual_line: Dict[int, List[_Token]]
    field_data_from_name: Dict[str, _FieldData]

    @staticmethod
    @functools.lru_cache(maxsize=64)
    def make(clz) -> "_ClassTokenization":
        """Parse the source code of a class, and cache some tokenization information."""
        readline = io.BytesIO(inspect.getsource(clz).encode("utf-8")).readline

        tokens: List[_Token] = []
        tokens_from_logical_line: Dict[int, List[_Token]] = {1: []}
        tokens_from_actual_line: Dict[int, List[_Token]] = {1: []}
        field_data_from_name: Dict[str, _FieldData] = {}

        logical_line: int = 1
        actual_line: int = 1
        for toktype, tok, _start, _end, _line in tokenize.tokenize(readline):
            # Logical lines are delimited by `tokenize.NEWLINE`. `tokenize.NL` only
            # appears when a logical line is broken across multiple actual lines.
            if toktype == tokenize.NEWLINE:
                logical_line += 1
                actual_line += 1
                tokens_from_logical_line[logical_line] = []
                tokens_from_actual_line[actual_line] = []
            elif toktype == tokenize.NL:
                actual_line += 1
                tokens_from_actual_line[actual_line] = []
            elif toktype not in (tokenize.INDENT, tokenize.DEDENT):
                token = _Token(
                    token_type=toktype,
                    content=tok,
                    logical_line=logical_line,
                    actual_line=actual_line,
                )
                tokens.append(token)
                tokens_from_logical_line[logical_line].append(token)
                tokens_from_actual_line[actual_line].append(token)

        for i, token in enumerate(tokens[:-1]):
            # Naive heuristic for field names: a name that starts its line, followed
            # by a colon.
            if (
                token.token_type == tokenize.NAME
                and tokens[i + 1].content == ":"
                and token == tokens_from_actual_line[token.actual_line][0]
                and token.content not in field_data_from_name
            ):
                field_data_from_name[token.content] = _FieldData(
                    index=i,
                    logical_line=token.logical_line,
                    actual_line=token.actual_line,
                )

        return _ClassTokenization(
            tokens=tokens,
            tokens_from_logical_line=tokens_from_logical_line,
            tokens_from_actual_line=tokens_from_actual_line,
            field_data_from_name=field_data_from_name,
        )


def _get_class_tokenization_with_field(
    cls: type, field_name: str
) -> Optional[_ClassTokenization]:
    # Search for the field in this class and all dataclass parents.
    for search_cls in cls.__mro__:
        if not dataclasses.is_dataclass(search_cls):
            continue
        try:
            tokenization = _ClassTokenization.make(search_cls)
        except (OSError, TypeError):
            # Source isn't available: dynamically created classes, the REPL, etc.
            return None
        if field_name in tokenization.field_data_from_name:
            return tokenization
    return None


@functools.lru_cache(maxsize=1024)
def _parse_docstring_from_object(obj: object) -> Dict[str, str]:
    return {
        doc.arg_name: doc.description
        for doc in docstring_parser.parse_from_object(obj).params
        if doc.description is not None
    }


def get_field_docstring(f: Callable, field_name: str) -> Optional[str]:
    """Get helptext for one field of a schema.

    Sources, in order: `Args:`/`Attributes:` sections and attribute docstrings
    (via docstring_parser), a comment on the same line as the field, and
    contiguous comments directly above the field."""
    search = f.__mro__ if inspect.isclass(f) else (f,)
    for obj in search:
        if getattr(obj, "__module__", None) == "builtins":
            continue
        docstring = _parse_docstring_from_object(obj).get(field_name, None)
        if docstring is not None:
            return _strings.remove_single_line_breaks(_strings.dedent(docstring))

    if not inspect.isclass(f):
        return None
    tokenization = _get_class_tokenization_with_field(f, field_name)
    if tokenization is None:
        return None
    field_data = tokenization.field_data_from_name[field_name]

    # Comment on the same line as the field.
    final_token_on_line = tokenization.tokens_from_logical_line[
        field_data.logical_line
    ][-1]
    if final_token_on_line.token_type == tokenize.COMMENT:
        comment = final_token_on_line.content
        assert comment.startswith("#")
        return comment.lstrip("#:").strip()

    # Comments directly above the field. A comment block can cover a group of
    # fields:
    #
    #     # Network settings.
    #     host: str
    #     port: int
    comments: List[str] = []
    current_actual_line = field_data.actual_line - 1
    while current_actual_line in tokenization.tokens_from_actual_line:
        actual_line_tokens = tokenization.tokens_from_actual_line[current_actual_line]
        current_actual_line -= 1

        # Stop at empty lines.
        if len(actual_line_tokens) == 0:
            break

        if (
            len(actual_line_tokens) == 1
            and actual_line_tokens[0].token_type == tokenize.COMMENT
        ):
            comments.append(actual_line_tokens[0].content.lstrip("#:").strip())
        elif len(comments) > 0:
            # Comments should be contiguous.
            break

    if len(comments) > 0:
        return _strings.remove_single_line_breaks("\n".join(reversed(comments)))
    return None


def get_callable_description(f: Callable) -> str:
    """Get the description of a schema from its docstring.

    `dataclasses.dataclass` populates `__doc__` from the fields of the class when no
    docstring is written; these generated docstrings are ignored."""
    docstring = f.__doc__
    if docstring is None:
        return ""
    docstring = _strings.dedent(docstring)

    if dataclasses.is_dataclass(f):
        default_doc = f.__name__ + str(inspect.signature(f)).replace(" -> None", "")  # type: ignore
        if docstring == default_doc:
            return ""

    parsed_docstring = docstring_parser.parse(docstring)
    parts: List[str] = []
    if parsed_docstring.short_description is not None:
        parts.append(parsed_docstring.short_description)
    if parsed_docstring.long_description is not None:
        parts.append(parsed_docstring.long_description)
    return "\n".join(parts)
