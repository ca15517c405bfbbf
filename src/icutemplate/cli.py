# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

# ruff: noqa: TRY400

"""Command-line interface for icutemplate."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import click

from icutemplate import _internals, callsites
from icutemplate._internals import cli_machinery
from icutemplate._internals import cli_messages as _msg

if TYPE_CHECKING:
    import pathlib
    from collections.abc import Sequence

__all__ = ('icutemplate',)

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION


@click.command(
    context_settings={'help_option_names': ['-h', '--help']},
    cls=cli_machinery.TopLevelCLIEntryPoint,
    help=(
        _msg.TranslatedString(_msg.Label.ICUTEMPLATE_01),
        _msg.TranslatedString(
            _msg.Label.ICUTEMPLATE_02,
            path_metavar=_msg.TranslatedString(_msg.Label.PATH_METAVAR),
        ),
        _msg.TranslatedString(_msg.Label.ICUTEMPLATE_03),
    ),
)
@click.option(
    '--function',
    'function_names',
    multiple=True,
    metavar=_msg.TranslatedString(_msg.Label.FUNCTION_METAVAR),
    help=_msg.TranslatedString(
        _msg.Label.FUNCTION_OPTION_HELP_TEXT,
        metavar=_msg.TranslatedString(_msg.Label.FUNCTION_METAVAR),
    ),
    cls=cli_machinery.TranslatedHelpOption,
)
@cli_machinery.standard_logging_options
@cli_machinery.version_option
@click.argument(
    'paths',
    metavar=_msg.TranslatedString(
        '{path_metavar}...',
        path_metavar=_msg.TranslatedString(_msg.Label.PATH_METAVAR),
    ),
    nargs=-1,
    required=True,
)
@click.pass_context
def icutemplate(
    ctx: click.Context,
    /,
    *,
    paths: Sequence[str],
    function_names: Sequence[str] = (),
) -> None:
    """Check ICU template declarations in Python source files.

    This is a [`click`][CLICK]-powered command-line interface function,
    and not intended for programmatic use.  Use the
    [`icutemplate.callsites`][] module directly instead.  (See also
    [`click.testing.CliRunner`][] for controlled, programmatic
    invocation.)

    [CLICK]: https://pypi.org/package/click/

    """
    logger = logging.getLogger(PROG_NAME)
    names = callsites.DECLARATION_FUNCTION_NAMES | frozenset(function_names)
    logger.debug(
        'Recognized declaration functions: %s', ', '.join(sorted(names))
    )
    declaration_count = 0
    problem_count = 0
    bad_files: set[str] = set()
    checked: set[pathlib.Path] = set()

    def report(message: _msg.TranslatedString, filename: str) -> None:
        nonlocal problem_count
        logger.error(message, extra={'color': ctx.color})
        problem_count += 1
        bad_files.add(filename)

    for path in paths:
        files = list(callsites.iter_python_files([path]))
        if not files and os.path.isdir(path):
            logger.warning(
                _msg.TranslatedString(
                    _msg.WarnMsgTemplate.NO_PYTHON_FILES, path=path
                ),
                extra={'color': ctx.color},
            )
        for filename in files:
            resolved = filename.resolve()
            if resolved in checked:
                logger.debug('Skipping %r, already checked', str(filename))
                continue
            checked.add(resolved)
            try:
                result = callsites.check_file(filename, function_names=names)
            except OSError as exc:
                report(
                    _msg.TranslatedString(
                        _msg.ErrMsgTemplate.CANNOT_READ_FILE,
                        path=str(filename),
                        error=exc.strerror or str(exc),
                    ),
                    str(filename),
                )
                continue
            except UnicodeDecodeError as exc:
                report(
                    _msg.TranslatedString(
                        _msg.ErrMsgTemplate.CANNOT_READ_FILE,
                        path=str(filename),
                        error=str(exc),
                    ),
                    str(filename),
                )
                continue
            except SyntaxError as exc:
                report(
                    _msg.TranslatedString(
                        _msg.ErrMsgTemplate.CANNOT_PARSE_FILE,
                        path=str(filename),
                        lineno=exc.lineno,
                        error=exc.msg,
                    )
                    if exc.lineno is not None
                    else _msg.TranslatedString(
                        _msg.ErrMsgTemplate.CANNOT_PARSE_FILE_ANYWHERE,
                        path=str(filename),
                        error=exc.msg,
                    ),
                    str(filename),
                )
                continue
            for problem in result.problems:
                report(
                    _msg.TranslatedString(
                        _msg.ErrMsgTemplate.INVALID_DECLARATION,
                        location=(
                            f'{problem.filename}:{problem.lineno}:'
                            f'{problem.col_offset + 1}'
                        ),
                        problem=problem.message,
                    ),
                    problem.filename,
                )
            count = len(result.call_sites) + sum(
                1 for p in result.problems if p.rule is None
            )
            declaration_count += count
            logger.info(
                _msg.TranslatedString(
                    _msg.InfoMsgTemplate.CHECKED_FILE,
                    declarations=_msg.TranslatedString(
                        _msg.Label.DECLARATION_COUNT, count=count
                    ),
                    path=str(filename),
                ),
                extra={'color': ctx.color},
            )
    if problem_count:
        logger.error(
            _msg.TranslatedString(
                _msg.ErrMsgTemplate.PROBLEMS_FOUND,
                problems=_msg.TranslatedString(
                    _msg.Label.PROBLEM_COUNT, count=problem_count
                ),
                files=_msg.TranslatedString(
                    _msg.Label.FILE_COUNT, count=len(bad_files)
                ),
            ),
            extra={'color': ctx.color},
        )
        ctx.exit(1)
    logger.info(
        _msg.TranslatedString(
            _msg.InfoMsgTemplate.ALL_DECLARATIONS_VALID,
            declarations=_msg.TranslatedString(
                _msg.Label.DECLARATION_COUNT, count=declaration_count
            ),
            files=_msg.TranslatedString(
                _msg.Label.FILE_COUNT, count=len(checked)
            ),
        ),
        extra={'color': ctx.color},
    )


if __name__ == '__main__':
    icutemplate()
