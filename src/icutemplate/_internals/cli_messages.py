# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Messages for the command-line interface of `icutemplate`.

Every user-visible string of the command-line interface is a member of
one of the enums below.  The strings are looked up in a [`gettext`][]
catalog only when they are rendered.

!!! warning

    Non-public module (implementation detail).  Subject to change
    without notice, including removal.

"""

from __future__ import annotations

import enum
import functools
import gettext
import os
import pathlib
import string
import sys
import types
from typing import TYPE_CHECKING, Callable, NamedTuple, Union, cast

from typing_extensions import TypeAlias, override

from icutemplate import _internals

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from typing_extensions import Any, Self

__all__ = ('PROG_NAME',)

PROG_NAME = _internals.PROG_NAME

PLURAL_SELECTOR = 'count'
"""The replacement field that selects the plural form of a message."""


def default_locale_directories() -> list[pathlib.Path]:
    """Return the directories searched for message catalogs, in order.

    The user's data directory comes first (`$XDG_DATA_HOME/locale`,
    defaulting to `~/.local/share/locale`; `%APPDATA%/locale` on
    Windows), then `share/locale` below `sys.prefix` and below
    `sys.base_prefix`.

    """
    if sys.platform.startswith('win'):
        appdata = os.environ.get('APPDATA')
        data_home = pathlib.Path(appdata or pathlib.Path.home())
    else:
        xdg_data_home = os.environ.get('XDG_DATA_HOME')
        data_home = (
            pathlib.Path(xdg_data_home)
            if xdg_data_home
            else pathlib.Path.home() / '.local' / 'share'
        )
    return [
        data_home / 'locale',
        pathlib.Path(sys.prefix, 'share', 'locale'),
        pathlib.Path(sys.base_prefix, 'share', 'locale'),
    ]


def load_translations(
    localedirs: Sequence[str | os.PathLike[str]] | None = None,
    languages: Sequence[str] | None = None,
) -> gettext.NullTranslations:
    """Load the first `icutemplate` message catalog found.

    Args:
        localedirs:
            The directories to search, in order.  Defaults to
            [`default_locale_directories`][].
        languages:
            The languages to look for.  Defaults to the languages named
            in the environment, as per [`gettext.find`][].

    Returns:
        The catalog from the first directory that has one, else
        a catalog that leaves every message untranslated.

    """
    if localedirs is None:
        localedirs = default_locale_directories()
    for localedir in localedirs:
        try:
            return gettext.translation(
                PROG_NAME,
                localedir=os.fspath(localedir),
                languages=languages,
            )
        except OSError:
            continue
    return gettext.NullTranslations()


translation = load_translations()


@functools.cache
def _known_messages() -> dict[tuple[str, str], MsgTemplate]:
    known: dict[tuple[str, str], MsgTemplate] = {}
    for enum_class in MSG_TEMPLATE_CLASSES:
        for member in enum_class:
            ts = cast('TranslatableString', member.value)
            known.setdefault((ts.l10n_context, ts.singular), member)
    return known


class DebugTranslations(gettext.NullTranslations):
    """Translations that reveal which known message was requested.

    A known message translates to the name of its enum member, followed
    by its replacement fields in call syntax, e.g.
    `ErrMsgTemplate.CANNOT_READ_FILE(path={path!r}, error={error!r})`.
    Unknown messages stay untranslated.

    """

    @staticmethod
    def _describe(
        context: str,
        message: str,
        plural: str = '',
        n: int = 1,
    ) -> str:
        member = _known_messages().get((context, message))
        if member is None:
            return plural if plural and n != 1 else message
        ts = cast('TranslatableString', member.value)
        fields = ', '.join(f'{f}={{{f}!r}}' for f in ts.fields())
        return f'{member}({fields})' if fields else str(member)

    @override
    def pgettext(self, context: str, message: str, /) -> str:
        return self._describe(context, message)

    @override
    def npgettext(
        self,
        context: str,
        msgid1: str,
        msgid2: str,
        n: int,
        /,
    ) -> str:
        return self._describe(context, msgid1, msgid2, n)


class TranslatableString(NamedTuple):
    """A message as it appears in the message catalog.

    Attributes:
        l10n_context:
            The [`gettext`][] context, telling translators where the
            message is used.
        singular:
            The message itself.
        plural:
            The plural form of the message, if it has one.  The plural
            form is then selected by the `count` replacement field.
        flags:
            `.po` file flags, e.g. `python-brace-format` for messages
            with replacement fields.
        translator_comments:
            Commentary for the translator.

    """

    l10n_context: str
    """"""
    singular: str
    """"""
    plural: str = ''
    """"""
    flags: frozenset[str] = frozenset()
    """"""
    translator_comments: str = ''
    """"""

    def fields(self) -> list[str]:
        """Return the names of the replacement fields, in order.

        Examples:
            >>> brace_format = frozenset({'python-brace-format'})
            >>> TranslatableString(
            ...     '', '{count} of {path!r}', flags=brace_format
            ... ).fields()
            ['count', 'path']
            >>> TranslatableString('', 'literal {braces}').fields()
            []

        """
        if 'python-brace-format' not in self.flags:
            return []
        names = [
            field
            for _text, field, _spec, _conversion in string.Formatter().parse(
                self.singular
            )
            if field is not None
        ]
        return list(dict.fromkeys(names))

    def validate_flags(self, *extra_flags: str) -> Self:
        """Add `extra_flags`, then check the flags against the message.

        Returns:
            A copy of this string, with the extra flags added.

        Raises:
            ValueError:
                The message contains braces but is not marked as either
                using or not using brace formatting; or the message is
                marked as using brace formatting but has no fields; or
                the message has a plural form but no `count` field.

        Examples:
            >>> TranslatableString('', 'all OK').validate_flags().flags
            frozenset()
            >>> TranslatableString('', '{braces}').validate_flags()
            ... # doctest: +ELLIPSIS
            Traceback (most recent call last):
                ...
            ValueError: Missing flag for how to deal with brace character ...
            >>> TranslatableString('', '{n} file', '{n} files').validate_flags(
            ...     'python-brace-format'
            ... )
            ... # doctest: +ELLIPSIS
            Traceback (most recent call last):
                ...
            ValueError: Plural message without a 'count' field ...

        """
        flags = frozenset(f.strip() for f in self.flags.union(extra_flags))
        formatting = flags & {'python-brace-format', 'no-python-brace-format'}
        if '{' in self.singular and not formatting:
            msg = (
                f'Missing flag for how to deal with brace character '
                f'in {self.singular!r}'
            )
            raise ValueError(msg)
        if 'python-brace-format' in flags and '{' not in self.singular:
            msg = f'Missing format string parameters in {self.singular!r}'
            raise ValueError(msg)
        result = self._replace(flags=flags)
        if result.plural and PLURAL_SELECTOR not in result.fields():
            msg = (
                f'Plural message without a {PLURAL_SELECTOR!r} field: '
                f'{self.singular!r}'
            )
            raise ValueError(msg)
        return result


def _normalize_prose(text: str, /) -> str:
    return ' '.join(text.split())


def translatable(
    context: str,
    single: str,
    /,
    flags: str | Iterable[str] = (),
    plural: str = '',
    comments: str = '',
) -> TranslatableString:
    """Return a [`TranslatableString`][] with normalized, validated parts.

    Whitespace runs in the messages and the comments collapse to single
    spaces.  Nonempty comments are prefixed with `TRANSLATORS:`.

    """
    flag_set = (
        frozenset({flags}) if isinstance(flags, str) else frozenset(flags)
    )
    comments = _normalize_prose(comments)
    if comments and not comments.startswith('TRANSLATORS:'):
        comments = f'TRANSLATORS: {comments}'
    return TranslatableString(
        context.strip(),
        _normalize_prose(single),
        plural=_normalize_prose(plural),
        flags=flag_set,
        translator_comments=comments,
    ).validate_flags()


def commented(comments: str = '', /) -> Callable[..., TranslatableString]:
    """Return [`translatable`][] with the translator comments filled in.

    Reads better than a `comments=` argument at the end of a long
    message definition.

    """  # noqa: DOC201
    return functools.partial(translatable, comments=comments)


class TranslatedString:
    """A message that renders its translation when stringified.

    Translation and formatting happen on first stringification, and
    the result is kept.  Values that are themselves translated strings
    are rendered first.

    """

    def __init__(
        self,
        template: str | TranslatableString | MsgTemplate,
        args_dict: Mapping[str, Any] = types.MappingProxyType({}),
        /,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        """Initializer.

        Args:
            template:
                The message.  A plain string is looked up without
                context.  An enum member stands for its
                [`TranslatableString`][] value.
            args_dict:
                Values for the replacement fields.
            kwargs:
                More values for the replacement fields.

        """
        if isinstance(template, MSG_TEMPLATE_CLASSES):
            template = cast('TranslatableString', template.value)
        self.template = template
        self.kwargs = {**args_dict, **kwargs}
        self._rendered: str | None = None

    def __bool__(self) -> bool:
        return bool(str(self))

    def __eq__(self, other: object) -> bool:
        return str(self) == other

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.template!r}, {self.kwargs!r})'

    def __str__(self) -> str:
        if self._rendered is None:
            values = {
                k: str(v) if isinstance(v, TranslatedString) else v
                for k, v in self.kwargs.items()
            }
            self._rendered = self._translated_template().format(**values)
        return self._rendered

    def _translated_template(self) -> str:
        template = self.template
        if isinstance(template, str):
            return translation.gettext(template)
        if template.plural:
            text = translation.npgettext(
                template.l10n_context,
                template.singular,
                template.plural,
                self.kwargs[PLURAL_SELECTOR],
            )
        else:
            text = translation.pgettext(
                template.l10n_context, template.singular
            )
        if 'no-python-brace-format' in template.flags:
            text = text.replace('{', '{{').replace('}', '}}')
        return text


class Label(enum.Enum):
    """Labels for the `icutemplate` command-line.

    Includes help text, help metavar names and the pieces that other
    messages are assembled from.

    """

    ICUTEMPLATE_01 = commented(
        'This is the first paragraph of the command help text, '
        'but it also appears (in truncated form, if necessary) '
        'as one-line help text for this command.  '
        'The translation should thus be as meaningful as possible '
        'even if truncated.',
    )(
        'Label :: Help text :: Command description',
        'Check ICU message template declarations in Python source files.',
    )
    """"""
    ICUTEMPLATE_02 = commented(
        'The metavar is Label.PATH_METAVAR.',
    )(
        'Label :: Help text :: Explanation',
        'Each {path_metavar} may be a file or a directory.  '
        'Directories are searched recursively for Python files.  '
        'Every call to declare_icu_template in these files must use '
        'literal arguments, and these arguments must pass validation.',
        flags='python-brace-format',
    )
    """"""
    ICUTEMPLATE_03 = commented(
        '',
    )(
        'Label :: Help text :: Explanation',
        'The exit status is 0 if all declarations are valid, '
        'and 1 otherwise.',
    )
    """"""
    FUNCTION_OPTION_HELP_TEXT = commented(
        'The metavar is Label.FUNCTION_METAVAR.',
    )(
        'Label :: Help text :: One-line description',
        'also treat calls to {metavar} as template declarations '
        '(may be given multiple times)',
        flags='python-brace-format',
    )
    """"""
    DEBUG_OPTION_HELP_TEXT = commented(
        '',
    )(
        'Label :: Help text :: One-line description',
        'also emit debug information (implies --verbose)',
    )
    """"""
    VERBOSE_OPTION_HELP_TEXT = commented(
        '',
    )(
        'Label :: Help text :: One-line description',
        'emit extra/progress information to standard error',
    )
    """"""
    QUIET_OPTION_HELP_TEXT = commented(
        '',
    )(
        'Label :: Help text :: One-line description',
        'suppress even warnings, emit only errors',
    )
    """"""
    VERSION_OPTION_HELP_TEXT = commented(
        '',
    )(
        'Label :: Help text :: One-line description',
        'show version and feature information, then exit',
    )
    """"""
    VERSION_INFO_MAJOR_LIBRARY_TEXT = commented(
        'This message reports on the version of a major library '
        'that icutemplate depends on, such as click.',
    )(
        'Label :: Info Message',
        'Using {dependency_name_and_version}',
        flags='python-brace-format',
    )
    """"""
    VALIDATION_RULES_LABEL = commented(
        'This is the label for the list of validation rules '
        'in the --version output.  The list items are '
        'not translated.',
    )(
        'Label :: Info Message :: Table row header',
        'Validation rules:',
    )
    """"""
    FUNCTION_METAVAR = commented(
        'This metavar is used in Label.FUNCTION_OPTION_HELP_TEXT.',
    )(
        'Label :: Help text :: Metavar :: icutemplate',
        'NAME',
    )
    """"""
    PATH_METAVAR = commented(
        'This metavar is used in Label.ICUTEMPLATE_02.',
    )(
        'Label :: Help text :: Metavar :: icutemplate',
        'PATH',
    )
    """"""
    DECLARATION_COUNT = commented(
        'Used in InfoMsgTemplate.CHECKED_FILE and '
        'InfoMsgTemplate.ALL_DECLARATIONS_VALID.',
    )(
        'Label :: Info Message :: Count',
        '{count} template declaration',
        plural='{count} template declarations',
        flags='python-brace-format',
    )
    """"""
    FILE_COUNT = commented(
        'Used in InfoMsgTemplate.ALL_DECLARATIONS_VALID and '
        'ErrMsgTemplate.PROBLEMS_FOUND.',
    )(
        'Label :: Info Message :: Count',
        '{count} file',
        plural='{count} files',
        flags='python-brace-format',
    )
    """"""
    PROBLEM_COUNT = commented(
        'Used in ErrMsgTemplate.PROBLEMS_FOUND.',
    )(
        'Label :: Error message :: Count',
        '{count} problem',
        plural='{count} problems',
        flags='python-brace-format',
    )
    """"""


class InfoMsgTemplate(enum.Enum):
    """Info messages for the `icutemplate` command-line."""

    CHECKED_FILE = commented(
        'The declarations are Label.DECLARATION_COUNT, '
        'counting the declare_icu_template calls found in the file.',
    )(
        'Info message',
        'Checked {declarations} in {path!r}.',
        flags='python-brace-format',
    )
    """"""
    ALL_DECLARATIONS_VALID = commented(
        'The declarations are Label.DECLARATION_COUNT, '
        'the files are Label.FILE_COUNT.',
    )(
        'Info message',
        'No problems found in {declarations} across {files}.',
        flags='python-brace-format',
    )
    """"""


class WarnMsgTemplate(enum.Enum):
    """Warning messages for the `icutemplate` command-line."""

    NO_PYTHON_FILES = commented(
        'The path is a directory given on the command-line.',
    )(
        'Warning message',
        'No Python files found below {path!r}.',
        flags='python-brace-format',
    )
    """"""


class ErrMsgTemplate(enum.Enum):
    """Error messages for the `icutemplate` command-line."""

    INVALID_DECLARATION = commented(
        'The location is "FILE:LINE:COLUMN".  '
        'The problem is an untranslated English description '
        'of what is wrong with this template declaration.',
    )(
        'Error message',
        '{location}: {problem}',
        flags='python-brace-format',
    )
    """"""
    CANNOT_READ_FILE = commented(
        'The error is usually an operating system error message.',
    )(
        'Error message',
        'Cannot read {path!r}: {error}.',
        flags='python-brace-format',
    )
    """"""
    CANNOT_PARSE_FILE = commented(
        'The error is the (untranslated) message from the Python '
        'parser, e.g. "invalid syntax".',
    )(
        'Error message',
        'Cannot parse {path!r} as Python source (line {lineno}): {error}.',
        flags='python-brace-format',
    )
    """"""
    CANNOT_PARSE_FILE_ANYWHERE = commented(
        'The error is the (untranslated) message from the Python '
        'parser, e.g. "source code cannot contain null bytes".  '
        'The parser did not name a line.',
    )(
        'Error message',
        'Cannot parse {path!r} as Python source: {error}.',
        flags='python-brace-format',
    )
    """"""
    PROBLEMS_FOUND = commented(
        'The problems are Label.PROBLEM_COUNT, '
        'the files are Label.FILE_COUNT.',
    )(
        'Error message',
        'Found {problems} in {files}.',
        flags='python-brace-format',
    )
    """"""


MsgTemplate: TypeAlias = Union[
    Label,
    InfoMsgTemplate,
    WarnMsgTemplate,
    ErrMsgTemplate,
]
"""A type alias for all enums containing translatable strings as values."""
MSG_TEMPLATE_CLASSES = (
    Label,
    InfoMsgTemplate,
    WarnMsgTemplate,
    ErrMsgTemplate,
)
"""A collection all enums containing translatable strings as values."""
