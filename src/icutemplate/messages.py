# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Support for declaring localizable messages as ICU templates.

Messages are declared via [`declare_icu_template`][], which returns the
template string unchanged.  An external message extraction tool reads
the call sites at build time, and a compiler later replaces each call
with the translated template.  Until then, i.e. when running
uncompiled, each call checks the template and its options for
easy-to-spot authoring mistakes.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from icutemplate import _types

if TYPE_CHECKING:
    from collections.abc import Set as AbstractSet

    from typing_extensions import Any

__all__ = (
    'InvalidIcuTemplateError',
    'assert_icu_template_parameters_are_valid',
    'assert_no_closure_style_placeholders',
    'declare_icu_template',
    'find_closure_style_placeholder',
    'gather_icu_placeholder_names',
)
__author__ = 'Marco Ricci <software@the13thletter.info>'

CLOSURE_PLACEHOLDER_RE = re.compile(r'\{\$([^}]+)\}')
"""Matches a single closure-style placeholder, e.g. `{$NAME}`."""

ICU_PLACEHOLDER_RE = re.compile(r'\{([A-Za-z_][A-Za-z0-9_]*)\}')
"""Matches a simple ICU-style placeholder, e.g. `{NAME}`.

Group 1 contains the placeholder name.
"""


class InvalidIcuTemplateError(AssertionError):
    """An ICU template declaration failed to validate.

    Attributes:
        rule:
            The [validation rule][icutemplate._types.ValidationRule]
            that was violated.

    """

    def __init__(self, rule: _types.ValidationRule, message: str) -> None:
        super().__init__(message)
        self.rule = rule

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.rule, *self.args))


def find_closure_style_placeholder(template: str, /) -> str | None:
    """Return the first closure-style placeholder in `template`, if any.

    Examples:
        >>> find_closure_style_placeholder('Hi, {$NAME}!')
        '{$NAME}'
        >>> find_closure_style_placeholder('Hi, {NAME}!') is None
        True

    """
    match = CLOSURE_PLACEHOLDER_RE.search(template)
    return match.group(0) if match is not None else None


def assert_no_closure_style_placeholders(template: str, /) -> None:
    """Fail if `template` contains closure-style placeholders.

    Closure-style placeholders (`{$NAME}`) are reserved for compile-time
    substitution and must not appear in ICU templates.

    Raises:
        InvalidIcuTemplateError:
            A closure-style placeholder was found.

    """
    placeholder = find_closure_style_placeholder(template)
    if placeholder is not None:
        msg = (
            f'closure-style placeholder {placeholder!r} '
            f'found in ICU template {template!r}'
        )
        raise InvalidIcuTemplateError(
            _types.ValidationRule.CLOSURE_STYLE_PLACEHOLDER, msg
        )


def gather_icu_placeholder_names(template: str, /) -> frozenset[str]:
    """Return the names of all ICU placeholders in `template`.

    Names are case-sensitive; repeated placeholders are only reported
    once.

    Examples:
        >>> sorted(gather_icu_placeholder_names('{B} and {a}, then {B}'))
        ['B', 'a']
        >>> gather_icu_placeholder_names('{0} and {$NAME}')
        frozenset()

    """
    return frozenset(ICU_PLACEHOLDER_RE.findall(template))


def _assert_valid_placeholder_map(
    map_name: str,
    placeholder_map: Any,  # noqa: ANN401
    placeholder_names: AbstractSet[str],
    /,
) -> None:
    if not isinstance(placeholder_map, Mapping):
        msg = f'invalid {map_name} map: {placeholder_map!r}'
        raise InvalidIcuTemplateError(
            _types.ValidationRule.INVALID_PLACEHOLDER_MAP, msg
        )
    for name, value in placeholder_map.items():
        if name not in placeholder_names:
            msg = f'{map_name}: unknown placeholder: {name!r}'
            raise InvalidIcuTemplateError(
                _types.ValidationRule.UNKNOWN_PLACEHOLDER, msg
            )
        if not isinstance(value, str):
            msg = f'invalid {map_name} value for {name}: {value!r}'
            raise InvalidIcuTemplateError(
                _types.ValidationRule.INVALID_PLACEHOLDER_VALUE, msg
            )


def assert_icu_template_parameters_are_valid(
    template: str,
    options: Mapping[str, Any],
    /,
    *,
    compiled: bool = False,
) -> None:
    """Fail if the parameters are not valid for [`declare_icu_template`][].

    The checks stop at the first violation found.

    Args:
        template:
            The ICU template string.
        options:
            The options record; see [`IcuTemplateOptions`][icutemplate._types.IcuTemplateOptions].
        compiled:
            If true, skip all checks.  The build pipeline has already
            validated (and replaced) the call.

    Raises:
        InvalidIcuTemplateError:
            The template or the options are invalid.  See the exact
            error message and the `rule` attribute for details.

    """
    if compiled:
        return
    if not isinstance(template, str):
        msg = f'invalid template string: {template!r}'
        raise InvalidIcuTemplateError(
            _types.ValidationRule.TEMPLATE_NOT_A_STRING, msg
        )
    if not isinstance(options, Mapping):
        msg = f'invalid options: {options!r}'
        raise InvalidIcuTemplateError(
            _types.ValidationRule.OPTIONS_NOT_A_MAPPING, msg
        )
    assert_no_closure_style_placeholders(template)
    placeholder_names = gather_icu_placeholder_names(template)

    description = options.get('description')
    if not description:
        raise InvalidIcuTemplateError(
            _types.ValidationRule.MISSING_DESCRIPTION,
            'no description supplied',
        )
    if not isinstance(description, str):
        msg = f'invalid description: {description!r}'
        raise InvalidIcuTemplateError(
            _types.ValidationRule.INVALID_DESCRIPTION, msg
        )

    meaning = options.get('meaning')
    if meaning is not None and not isinstance(meaning, str):
        msg = f'invalid meaning: {meaning!r}'
        raise InvalidIcuTemplateError(
            _types.ValidationRule.INVALID_MEANING, msg
        )

    for map_name in _types.PLACEHOLDER_MAP_OPTIONS:
        placeholder_map = options.get(map_name)
        if placeholder_map is not None:
            _assert_valid_placeholder_map(
                map_name, placeholder_map, placeholder_names
            )

    for option_name in options:
        if option_name not in _types.VALID_OPTIONS:
            msg = f'unknown option name: {option_name!r}'
            raise InvalidIcuTemplateError(
                _types.ValidationRule.UNKNOWN_OPTION, msg
            )


def declare_icu_template(
    template: str,
    options: _types.IcuTemplateOptions | Mapping[str, Any],
    /,
    *,
    compiled: bool = False,
) -> str:
    """Declare a message template using ICU format.

    See <https://unicode-org.github.io/icu/userguide/format_parse/messages/>.

    When run uncompiled, the template string and options are checked
    for easy-to-spot authoring mistakes.  If there are none, the
    template string is returned unmodified.

    The template will usually contain ICU placeholders (e.g. `"Hi,
    {NAME}!"`), and so will the return value.  Pass it to an ICU message
    formatter to substitute the runtime values and produce the final
    message.  Closure-style placeholders (e.g. `"Hi, {$NAME}!"`) are an
    error.

    !!! warning "Calling convention"

        The message extraction tool reads the call site statically.
        Both arguments must therefore be *literals*: a string literal
        and a `dict` display of string literals.  The tool can neither
        evaluate expressions nor look up variables.  See
        [`icutemplate.callsites`][] for a checker.

    Example:
        ```python
        MSG_HI = declare_icu_template(
            'Hi, {START_BOLD}{NAME}{END_BOLD}!',
            {
                'description': 'Say "Hi" to the user.',
                'example': {'NAME': 'Jane'},
                # Generated code only; hand-written code should use
                # meaningful placeholder names instead.
                'original_code': {'NAME': 'user.get_name()'},
            },
        )
        ```

    Args:
        template:
            The ICU template string.
        options:
            The options record.  Must contain a `description`, and may
            contain a `meaning`, an `example` map and an
            `original_code` map.  Nothing else.
        compiled:
            If true, skip all checks and pass the template through.
            Set by builds whose message calls were already validated by
            the compiler.

    Returns:
        The template string, unchanged.

    Raises:
        InvalidIcuTemplateError:
            The template or the options are invalid.  Never raised if
            `compiled` is true.

    Examples:
        >>> declare_icu_template(
        ...     'Hi, {NAME}!',
        ...     {'description': 'greets user', 'example': {'NAME': 'Jane'}},
        ... )
        'Hi, {NAME}!'
        >>> declare_icu_template('Hi, {$NAME}!', {'description': 'x'})
        ... # doctest: +ELLIPSIS
        Traceback (most recent call last):
            ...
        icutemplate.messages.InvalidIcuTemplateError: closure-style placeholder ...

    """
    assert_icu_template_parameters_are_valid(
        template, options, compiled=compiled
    )
    return template
