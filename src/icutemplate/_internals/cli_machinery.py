# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib


"""Command-line machinery for icutemplate.

Warning:
    Non-public module (implementation detail).  Subject to change
    without notice, including removal.

"""

from __future__ import annotations

import collections
import importlib.metadata
import logging
import textwrap
import warnings
from typing import TYPE_CHECKING, Callable, Literal, TextIO, TypeVar

import click
from typing_extensions import Any, ParamSpec, override

from icutemplate import _internals, _types
from icutemplate._internals import cli_messages as _msg

if TYPE_CHECKING:
    from collections.abc import MutableSequence

    from typing_extensions import Self

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION
VERSION_OUTPUT_WRAPPING_WIDTH = 72


# Logging
# =======


class ClickEchoStderrHandler(logging.Handler):
    """A [`logging.Handler`][] writing to standard error via [`click.echo`][].

    A record's `color` attribute, if any, is passed on to `click.echo`.

    """

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(
            self.format(record),
            err=True,
            color=getattr(record, 'color', None),
        )


class CLIofPackageFormatter(logging.Formatter):
    """Format log records as diagnostics of a command-line program.

    Every line of the message is prefixed with the program name and
    a level label, e.g. `icutemplate: Error: `.  INFO records carry no
    label.  The `Warning` and `Error` labels are set in bold; `click.echo`
    removes the markup when standard error is not a terminal.

    """

    def __init__(self, *, prog_name: str = PROG_NAME) -> None:
        super().__init__()
        self.prog_name = prog_name

    @staticmethod
    def level_label(levelno: int, /) -> str:
        """Return the label for records at level `levelno`.

        Examples:
            >>> CLIofPackageFormatter.level_label(logging.DEBUG)
            'Debug: '
            >>> CLIofPackageFormatter.level_label(logging.INFO)
            ''

        """
        if levelno >= logging.ERROR:
            return f'{click.style("Error", bold=True)}: '
        if levelno >= logging.WARNING:
            return f'{click.style("Warning", bold=True)}: '
        if levelno >= logging.INFO:
            return ''
        return 'Debug: '

    @override
    def format(self, record: logging.LogRecord) -> str:
        prefix = f'{self.prog_name}: {self.level_label(record.levelno)}'
        text = ''.join(
            prefix + line
            for line in record.getMessage().splitlines(keepends=True)
        )
        if record.exc_info:
            text += self.formatException(record.exc_info) + '\n'
        return text


class StandardCLILogging:
    """The handlers that turn log records into command-line diagnostics.

    `cli_handler` takes the records of the `icutemplate` logger
    hierarchy, and `warnings_handler` takes Python warnings.  Both start
    out at level WARNING.

    """

    prog_name = PROG_NAME
    package_name = PROG_NAME.replace('-', '_')
    cli_formatter = CLIofPackageFormatter(prog_name=prog_name)
    cli_handler = ClickEchoStderrHandler(logging.WARNING)
    cli_handler.addFilter(logging.Filter(package_name))
    cli_handler.setFormatter(cli_formatter)
    warnings_handler = ClickEchoStderrHandler(logging.WARNING)
    warnings_handler.setFormatter(cli_formatter)

    @classmethod
    def ensure_standard_logging(cls) -> StandardLoggingContextManager:
        """Return a context manager attaching `cli_handler`."""
        return StandardLoggingContextManager(
            cls.cli_handler, root_logger=cls.package_name
        )

    @classmethod
    def ensure_standard_warnings_logging(
        cls,
    ) -> StandardWarningsLoggingContextManager:
        """Return a context manager diverting warnings to `warnings_handler`."""
        return StandardWarningsLoggingContextManager(cls.warnings_handler)


class StandardLoggingContextManager:
    """Attach a handler to a logger for the duration of a context.

    Nested contexts attach the handler only once, and the context that
    attached it removes it again.  Not thread safe: loggers are global
    state.

    """

    def __init__(
        self,
        handler: logging.Handler,
        root_logger: str | None = None,
    ) -> None:
        self.handler = handler
        self.logger = logging.getLogger(root_logger)
        self.attached: MutableSequence[bool] = collections.deque()

    def __enter__(self) -> Self:
        attach = self.handler not in self.logger.handlers
        if attach:
            self.logger.addHandler(self.handler)
        self.attached.append(attach)
        return self

    def __exit__(self, *exc_info: object) -> Literal[False]:
        if self.attached.pop():
            self.logger.removeHandler(self.handler)
        return False


class StandardWarningsLoggingContextManager(StandardLoggingContextManager):
    """Divert Python warnings to the `py.warnings` logger in a context.

    Warnings written to an explicit file still go to that file.  The
    previous [`warnings.showwarning`][] is restored on exit.  Nestable,
    but not thread safe.

    """

    def __init__(self, handler: logging.Handler) -> None:
        super().__init__(handler, root_logger='py.warnings')
        self.saved_showwarning: MutableSequence[Callable[..., None]] = (
            collections.deque()
        )

    def __enter__(self) -> Self:
        previous = warnings.showwarning

        def showwarning(  # noqa: PLR0913,PLR0917
            message: Warning | str,
            category: type[Warning],
            filename: str,
            lineno: int,
            file: TextIO | None = None,
            line: str | None = None,
        ) -> None:
            if file is not None:  # pragma: no cover [external-api]
                previous(message, category, filename, lineno, file, line)
                return
            text = warnings.formatwarning(
                message, category, filename, lineno, line
            )
            self.logger.warning('%s', text.rstrip('\n'))

        self.saved_showwarning.append(previous)
        warnings.showwarning = showwarning
        return super().__enter__()

    def __exit__(self, *exc_info: object) -> Literal[False]:
        super().__exit__(*exc_info)
        warnings.showwarning = self.saved_showwarning.pop()
        return False


P = ParamSpec('P')
R = TypeVar('R')


def adjust_logging_level(
    ctx: click.Context,
    /,
    param: click.Parameter | None = None,
    value: int | None = None,
) -> None:
    """Show log records down to level `value` on standard error.

    This is the callback of `--debug`, `--verbose` and `--quiet`.

    """
    # All three options share this callback, and click also calls it
    # for the options not given, with a false value.
    if param is None or not value or ctx.resilient_parsing:
        return
    StandardCLILogging.cli_handler.setLevel(value)
    logging.getLogger(StandardCLILogging.package_name).setLevel(value)


# Options and commands with translatable help texts
# =================================================


class TranslatedHelpOption(click.Option):
    """A [`click.Option`][] whose help text may be a help text object.

    Help text objects stringify to the help text, typically a
    [`TranslatedString`][icutemplate._internals.cli_messages.TranslatedString].
    They are only stringified when the help is actually rendered.

    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:  # noqa: ANN401
        # The Option constructor preprocesses the help text and assumes
        # it is a string.  Re-add it, unprocessed, after construction.
        unset = object()
        help = kwargs.pop('help', unset)  # noqa: A001
        super().__init__(*args, **kwargs)
        if help is not unset:  # pragma: no branch
            self.help = help

    @override
    def get_help_record(self, ctx: click.Context) -> tuple[str, str] | None:
        help_object = self.help
        self.help = str(help_object) if help_object is not None else None
        try:
            return super().get_help_record(ctx)
        finally:
            self.help = help_object


class CommandWithTranslatedHelp(click.Command):
    """A [`click.Command`][] whose help text may be a help text object.

    The help text may also be a sequence of help text objects, one per
    paragraph.  Parameter metavars may be help text objects too.

    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:  # noqa: ANN401
        unset = object()
        help = kwargs.pop('help', unset)  # noqa: A001
        super().__init__(*args, **kwargs)
        if help is not unset:  # pragma: no branch
            self.help = help

    @staticmethod
    def _text(text: object, /) -> str:
        if isinstance(text, (list, tuple)):
            return '\n\n'.join(str(x) for x in text)
        return str(text)

    @override
    def collect_usage_pieces(self, ctx: click.Context) -> list[str]:
        return [str(piece) for piece in super().collect_usage_pieces(ctx)]

    @override
    def get_short_help_str(self, limit: int = 45) -> str:
        if self.short_help:
            return str(self.short_help)
        if not self.help:
            return ''
        return click.utils.make_default_short_help(
            self._text(self.help), limit
        )

    @override
    def format_help_text(
        self,
        ctx: click.Context,
        formatter: click.HelpFormatter,
    ) -> None:
        text = self._text(self.help) if self.help is not None else ''
        if text:
            formatter.write_paragraph()
            with formatter.indentation():
                formatter.write_text(text)


class TopLevelCLIEntryPoint(CommandWithTranslatedHelp):
    """A [`CommandWithTranslatedHelp`][] for the top-level command.

    Calling the command object installs the standard logging and
    warnings handlers around the actual invocation.  Calling `.main`
    directly, as [`click.testing.CliRunner`][] does, skips this.

    """

    def __call__(  # pragma: no cover [external-api]
        self,
        *args: Any,  # noqa: ANN401
        **kwargs: Any,  # noqa: ANN401
    ) -> Any:  # noqa: ANN401
        """"""  # noqa: D419
        with (
            StandardCLILogging.ensure_standard_logging(),
            StandardCLILogging.ensure_standard_warnings_logging(),
        ):
            return self.main(*args, **kwargs)


# Actual options and callbacks used by icutemplate
# ================================================


def version_option_callback(
    ctx: click.Context,
    param: click.Parameter,
    value: bool,  # noqa: FBT001
) -> None:
    """Print version and validation rule information, then exit."""
    del param
    if not value or ctx.resilient_parsing:
        return
    click.echo(
        ' '.join([click.style(PROG_NAME, bold=True), VERSION]),
        color=ctx.color,
    )
    for dependency in ('click', 'typing_extensions'):
        try:
            dependency_version = importlib.metadata.version(dependency)
        except importlib.metadata.PackageNotFoundError:  # pragma: no cover
            continue
        click.echo(
            str(
                _msg.TranslatedString(
                    _msg.Label.VERSION_INFO_MAJOR_LIBRARY_TEXT,
                    dependency_name_and_version=(
                        f'{dependency} {dependency_version}'
                    ),
                )
            ),
            color=ctx.color,
        )
    click.echo()
    label = str(_msg.TranslatedString(_msg.Label.VALIDATION_RULES_LABEL))
    rules = ', '.join(str(rule) for rule in _types.ValidationRule)
    text = textwrap.fill(
        f'{label} {rules}.',
        width=VERSION_OUTPUT_WRAPPING_WIDTH,
        subsequent_indent='    ',
        break_on_hyphens=False,
    )
    click.echo(
        click.style(label, bold=True) + text[len(label) :],
        color=ctx.color,
    )
    ctx.exit()


def version_option(f: Callable[P, R]) -> Callable[P, R]:
    """Decorate the function with the `--version` click option."""
    return click.option(
        '--version',
        is_flag=True,
        is_eager=True,
        expose_value=False,
        callback=version_option_callback,
        cls=TranslatedHelpOption,
        help=_msg.TranslatedString(_msg.Label.VERSION_OPTION_HELP_TEXT),
    )(f)


LOGGING_OPTIONS: tuple[tuple[tuple[str, ...], int, _msg.Label], ...] = (
    (('-q', '--quiet'), logging.ERROR, _msg.Label.QUIET_OPTION_HELP_TEXT),
    (('-v', '--verbose'), logging.INFO, _msg.Label.VERBOSE_OPTION_HELP_TEXT),
    (('--debug',), logging.DEBUG, _msg.Label.DEBUG_OPTION_HELP_TEXT),
)
"""Flags, log level and help text of each logging option."""


def standard_logging_options(f: Callable[P, R]) -> Callable[P, R]:
    """Decorate the function with standard logging click options.

    The options appear as `--debug`, `-v`/`--verbose`, `-q`/`--quiet`
    in the help, and all call back into [`adjust_logging_level`][].

    Args:
        f: A callable to decorate.

    Returns:
        The decorated callable.

    """
    for flags, level, help_text in LOGGING_OPTIONS:
        f = click.option(
            *flags,
            'logging_level',
            is_flag=True,
            flag_value=level,
            expose_value=False,
            callback=adjust_logging_level,
            help=_msg.TranslatedString(help_text),
            cls=TranslatedHelpOption,
        )(f)
    return f
