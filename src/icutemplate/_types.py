# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Types used by icutemplate."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from typing_extensions import (
    NamedTuple,
    NotRequired,
    Required,
    TypeAlias,
    TypedDict,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from collections.abc import Set as AbstractSet

    from typing_extensions import Any, TypeIs

__all__ = (
    'VALID_OPTIONS',
    'CallSite',
    'CallSiteProblem',
    'IcuTemplateOptions',
    'PlaceholderMap',
    'ValidationRule',
    'is_icu_template_options',
)


PlaceholderMap: TypeAlias = dict[str, str]
"""Placeholder names mapped to text, e.g. example values."""


class IcuTemplateOptions(TypedDict, total=False):
    r"""Options for an ICU message template declaration.

    These options are read at build time by the message extraction
    tool, so they must always be passed as a literal `dict` display at
    the call site.

    Attributes:
        description:
            Required text describing how the message will be used.
            Translators use this to understand the message.
        meaning:
            Optional text used to tell apart messages with identical
            text but different uses (e.g. "close" as in "shut" versus
            "close" as in "near").  Unlike the description, the meaning
            contributes to the message identifier.  Usually unset.
        example:
            Optional map from placeholder names to example values
            (e.g. `{'NAME': 'Jane'}`), shown to translators.
        original_code:
            Optional map from placeholder names to snippets showing how
            the value is obtained (e.g. `{'NAME': 'user.get_name()'}`).
            Intended for generated code; hand-written code should use
            meaningful placeholder names instead.

    """

    description: Required[str]
    """"""
    meaning: NotRequired[str]
    """"""
    example: NotRequired[PlaceholderMap]
    """"""
    original_code: NotRequired[PlaceholderMap]
    """"""


VALID_OPTIONS = frozenset({
    'description',
    'meaning',
    'example',
    'original_code',
})
"""The option names permitted in an [`IcuTemplateOptions`][] record."""

PLACEHOLDER_MAP_OPTIONS = ('example', 'original_code')
"""The options holding placeholder maps, in checking order."""


class ValidationRule(str, enum.Enum):
    """The rules an ICU template declaration may violate.

    Attributes:
        TEMPLATE_NOT_A_STRING:
            The template is not a string.
        OPTIONS_NOT_A_MAPPING:
            The options record is not a mapping.
        CLOSURE_STYLE_PLACEHOLDER:
            The template contains a closure-style placeholder `{$NAME}`.
        MISSING_DESCRIPTION:
            The description is missing or empty.
        INVALID_DESCRIPTION:
            The description is not a string.
        INVALID_MEANING:
            The meaning is not a string.
        INVALID_PLACEHOLDER_MAP:
            An `example` or `original_code` entry is not a mapping.
        UNKNOWN_PLACEHOLDER:
            A placeholder map names a placeholder absent from the
            template.
        INVALID_PLACEHOLDER_VALUE:
            A placeholder map value is not a string.
        UNKNOWN_OPTION:
            The options record contains an unrecognized option name.

    """

    TEMPLATE_NOT_A_STRING = 'template-not-a-string'
    """"""
    OPTIONS_NOT_A_MAPPING = 'options-not-a-mapping'
    """"""
    CLOSURE_STYLE_PLACEHOLDER = 'closure-style-placeholder'
    """"""
    MISSING_DESCRIPTION = 'missing-description'
    """"""
    INVALID_DESCRIPTION = 'invalid-description'
    """"""
    INVALID_MEANING = 'invalid-meaning'
    """"""
    INVALID_PLACEHOLDER_MAP = 'invalid-placeholder-map'
    """"""
    UNKNOWN_PLACEHOLDER = 'unknown-placeholder'
    """"""
    INVALID_PLACEHOLDER_VALUE = 'invalid-placeholder-value'
    """"""
    UNKNOWN_OPTION = 'unknown-option'
    """"""

    __str__ = str.__str__


class CallSite(NamedTuple):
    """A literal `declare_icu_template` call found in Python source.

    Attributes:
        filename:
            The name of the file containing the call.
        lineno:
            The (1-based) line number of the call.
        col_offset:
            The (0-based) column offset of the call.
        template:
            The literal template argument.
        options:
            The literal options argument.

    """

    filename: str
    """"""
    lineno: int
    """"""
    col_offset: int
    """"""
    template: Any
    """"""
    options: Any
    """"""


class CallSiteProblem(NamedTuple):
    """A problem with a `declare_icu_template` call in Python source.

    Attributes:
        filename:
            The name of the file containing the call.
        lineno:
            The (1-based) line number of the call.
        col_offset:
            The (0-based) column offset of the call.
        message:
            A description of the problem.
        rule:
            The violated validation rule, if the problem was found by
            the template validator.  `None` for calling convention
            violations.

    """

    filename: str
    """"""
    lineno: int
    """"""
    col_offset: int
    """"""
    message: str
    """"""
    rule: ValidationRule | None = None
    """"""

    def __str__(self) -> str:
        return (
            f'{self.filename}:{self.lineno}:{self.col_offset + 1}: '
            f'{self.message}'
        )


def json_path(path: Sequence[str | int], /) -> str:
    r"""Transform a series of keys and indices into a JSONPath selector.

    The resulting JSONPath selector conforms to RFC 9535, is always
    rooted at the JSON root node (i.e., starts with `$`), and only
    contains name and index selectors (in shorthand dot notation, where
    possible).

    Args:
        path:
            A sequence of object keys or array indices to navigate to
            the desired JSON value, starting from the root node.

    Returns:
        A valid JSONPath selector (a string) identifying the desired
        JSON value.

    Examples:
        >>> json_path(['example', 'NAME'])
        '$.example.NAME'
        >>> json_path(['original_code', 'not a name'])
        '$.original_code["not a name"]'
        >>> json_path(['example', '{$NAME}'])
        '$.example["{$NAME}"]'
        >>> json_path(['custom_array', 2, 0])
        '$.custom_array[2][0]'

    """

    def needs_longhand(x: str | int) -> bool:
        initial = (
            frozenset('abcdefghijklmnopqrstuvwxyz')
            | frozenset('ABCDEFGHIJKLMNOPQRSTUVWXYZ')
            | frozenset('_')
        )
        chars = initial | frozenset('0123456789')
        return not (
            isinstance(x, str)
            and x
            and set(x).issubset(chars)
            and x[:1] in initial
        )

    chunks = ['$']
    chunks.extend(
        f'[{json.dumps(x)}]' if needs_longhand(x) else f'.{x}' for x in path
    )
    return ''.join(chunks)


def validate_icu_template_options(  # noqa: C901
    obj: Any,  # noqa: ANN401
    /,
    *,
    placeholder_names: AbstractSet[str] | None = None,
    allow_unknown_options: bool = False,
) -> None:
    """Check that `obj` is a valid ICU template options record.

    This is the boundary check for untyped input, e.g. options decoded
    from JSON or recovered from source code.

    Args:
        obj:
            The object to test.
        placeholder_names:
            If given, the placeholder names of the template.  Keys of
            the placeholder maps must then be among these names.
        allow_unknown_options:
            If false, abort on unknown option names.

    Raises:
        TypeError:
            An entry in the options record, or the options record
            itself, has the wrong type.
        ValueError:
            An entry in the options record is not allowed, or has
            a disallowed value.

    """
    err_obj_not_a_dict = 'ICU template options is not a dict'

    def err_not_a_dict(path: Sequence[str], /) -> str:
        json_path_str = json_path(path)
        return f'ICU template options entry {json_path_str} is not a dict'

    def err_not_a_string(path: Sequence[str], /) -> str:
        json_path_str = json_path(path)
        return f'ICU template options entry {json_path_str} is not a string'

    def err_empty(path: Sequence[str], /) -> str:
        json_path_str = json_path(path)
        return f'ICU template options entry {json_path_str} is empty'

    def err_missing(path: Sequence[str], /) -> str:
        json_path_str = json_path(path)
        return f'ICU template options entry {json_path_str} is missing'

    def err_unknown_placeholder(path: Sequence[str], /) -> str:
        json_path_str = json_path(path)
        return (
            f'ICU template options entry {json_path_str} names '
            f'an unknown placeholder'
        )

    def err_non_str_placeholder_name(key: Any, path: Sequence[str], /) -> str:  # noqa: ANN401
        json_path_str = json_path(path)
        return (
            f'ICU template options entry {json_path_str} contains '
            f'non-string placeholder name {key!r}'
        )

    def err_unknown_option(key: str, /) -> str:
        return f'ICU template options uses unknown option {key!r}'

    if not isinstance(obj, Mapping):
        raise TypeError(err_obj_not_a_dict)
    if 'description' not in obj:
        raise ValueError(err_missing(['description']))
    if not isinstance(obj['description'], str):
        raise TypeError(err_not_a_string(['description']))
    if not obj['description']:
        raise ValueError(err_empty(['description']))
    if obj.get('meaning') is not None and not isinstance(obj['meaning'], str):
        raise TypeError(err_not_a_string(['meaning']))
    for map_name in PLACEHOLDER_MAP_OPTIONS:
        placeholder_map = obj.get(map_name)
        if placeholder_map is None:
            continue
        if not isinstance(placeholder_map, Mapping):
            raise TypeError(err_not_a_dict([map_name]))
        for key, value in placeholder_map.items():
            if not isinstance(key, str):
                raise TypeError(err_non_str_placeholder_name(key, [map_name]))
            if placeholder_names is not None and key not in placeholder_names:
                raise ValueError(err_unknown_placeholder([map_name, key]))
            if not isinstance(value, str):
                raise TypeError(err_not_a_string([map_name, key]))
    if not allow_unknown_options:
        for key in obj:
            if key not in VALID_OPTIONS:
                raise ValueError(err_unknown_option(key))


def is_icu_template_options(obj: Any) -> TypeIs[IcuTemplateOptions]:  # noqa: ANN401
    """Check if `obj` is a valid ICU template options record.

    Placeholder map keys are not checked against any template.

    Args:
        obj: The object to test.

    Returns:
        True if this is an options record, false otherwise.

    """
    try:
        validate_icu_template_options(obj)
    except (TypeError, ValueError) as exc:
        if 'ICU template options' not in str(exc):  # pragma: no cover
            raise  # noqa: DOC501
        return False
    return True
