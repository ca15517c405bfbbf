# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: MIT

from __future__ import annotations

import contextlib
import logging
import sys
from typing import TYPE_CHECKING

import hypothesis
from hypothesis import strategies
from typing_extensions import NamedTuple, Self

from icutemplate import _types
from icutemplate._internals import cli_machinery

__all__ = ()

if TYPE_CHECKING:
    from collections.abc import Iterator

    import click.testing
    from typing_extensions import Any


class DeclarationTestCase(NamedTuple):
    template: Any
    options: Any
    comment: str
    rule: _types.ValidationRule | None


R = _types.ValidationRule

TEST_DECLARATIONS: list[DeclarationTestCase] = [
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'greets user', 'example': {'NAME': 'Jane'}},
        '',
        None,
    ),
    DeclarationTestCase('Hello', {'description': 'plain greeting'}, '', None),
    DeclarationTestCase(
        '{COUNT} files',
        {
            'description': 'file count',
            'meaning': 'noun',
            'example': {'COUNT': '3'},
            'original_code': {'COUNT': 'len(files)'},
        },
        '',
        None,
    ),
    DeclarationTestCase(
        '{A}{a}{_b1}',
        {'description': 'd', 'example': {'A': 'x', 'a': 'y', '_b1': 'z'}},
        '',
        None,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!', {'description': 'd', 'example': {}}, '', None
    ),
    DeclarationTestCase(
        'Hi!', {'description': 'd', 'meaning': ''}, '', None
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'd', 'meaning': None, 'example': None},
        '',
        None,
    ),
    DeclarationTestCase(
        'Hi, {$NAME}!',
        {'description': 'd'},
        'closure-style placeholder',
        R.CLOSURE_STYLE_PLACEHOLDER,
    ),
    DeclarationTestCase(
        '{$X}',
        {},
        'closure-style placeholder checked before the description',
        R.CLOSURE_STYLE_PLACEHOLDER,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'example': {'NAME': 'Jane'}},
        'no description',
        R.MISSING_DESCRIPTION,
    ),
    DeclarationTestCase(
        'Hi', {'description': ''}, 'empty description', R.MISSING_DESCRIPTION
    ),
    DeclarationTestCase(
        'Hi', {'description': 42}, 'non-string description',
        R.INVALID_DESCRIPTION,
    ),
    DeclarationTestCase(
        'Hi',
        {'description': 'd', 'meaning': 5},
        'non-string meaning',
        R.INVALID_MEANING,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'd', 'example': ['NAME']},
        'example is not a map',
        R.INVALID_PLACEHOLDER_MAP,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'd', 'example': {'USER': 'Jane'}},
        'example names an unknown placeholder',
        R.UNKNOWN_PLACEHOLDER,
    ),
    DeclarationTestCase(
        'Hi, {name}!',
        {'description': 'd', 'original_code': {'NAME': 'user.name'}},
        'placeholder names are case sensitive',
        R.UNKNOWN_PLACEHOLDER,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'd', 'example': {'NAME': 1}},
        'non-string example value',
        R.INVALID_PLACEHOLDER_VALUE,
    ),
    DeclarationTestCase(
        'Hi, {NAME}!',
        {'description': 'd', 'original_code': {'NAME': 1}},
        'non-string original code value',
        R.INVALID_PLACEHOLDER_VALUE,
    ),
    DeclarationTestCase(
        'Hi',
        {'description': 'd', 'foo': 1},
        'unknown option name',
        R.UNKNOWN_OPTION,
    ),
    DeclarationTestCase(
        42, {'description': 'd'}, 'template is not a string',
        R.TEMPLATE_NOT_A_STRING,
    ),
    DeclarationTestCase(
        'Hi', None, 'options is not a mapping', R.OPTIONS_NOT_A_MAPPING
    ),
]
"""Template declarations for testing.  An empty comment means valid."""


def is_valid_test_declaration(case: DeclarationTestCase, /) -> bool:
    """Return true if the test declaration is valid."""
    return not case.comment


def _test_declaration_ids(val: DeclarationTestCase) -> Any:  # pragma: no cover
    """pytest id function for DeclarationTestCase objects."""
    assert isinstance(val, DeclarationTestCase)
    return val.comment or repr(val.template)


placeholder_names = strategies.from_regex(
    r'[A-Za-z_][A-Za-z0-9_]{0,10}', fullmatch=True
)
"""Valid ICU placeholder names."""

template_texts = strategies.text(
    strategies.characters(exclude_characters='{}$'), max_size=20
)
"""Literal template text without any brace syntax."""


@strategies.composite
def icu_templates(
    draw: strategies.DrawFn,
    *,
    min_placeholders: int = 0,
) -> tuple[str, list[str]]:
    """Draw an ICU template, and the placeholder names within it."""
    names = draw(
        strategies.lists(
            placeholder_names, min_size=min_placeholders, max_size=5
        )
    )
    pieces = [draw(template_texts)]
    for name in names:
        pieces.extend([f'{{{name}}}', draw(template_texts)])
    return ''.join(pieces), names


hypothesis_settings_coverage_compatible = (
    hypothesis.settings(
        # Running under coverage with the Python tracer increases
        # running times 40-fold, on my machines.  Sadly, not every
        # Python version offers the C tracer, so sometimes the Python
        # tracer is used anyway.
        deadline=(
            40 * deadline
            if (deadline := hypothesis.settings().deadline) is not None
            else None
        ),
        suppress_health_check=(hypothesis.HealthCheck.too_slow,),
    )
    if sys.gettrace() is not None
    else hypothesis.settings()
)


@contextlib.contextmanager
def standard_cli_logging() -> Iterator[None]:
    """Set up standard CLI logging, as the entry point would.

    `CliRunner.invoke` calls the command's `main` method directly, and
    thus bypasses the logging setup.  Also undo the log level changes
    made by the `--debug`, `--verbose` and `--quiet` options.

    """
    handler = cli_machinery.StandardCLILogging.cli_handler
    logger = logging.getLogger(cli_machinery.StandardCLILogging.package_name)
    old_handler_level = handler.level
    old_logger_level = logger.level
    try:
        with (
            cli_machinery.StandardCLILogging.ensure_standard_logging(),
            cli_machinery.StandardCLILogging.ensure_standard_warnings_logging(),
        ):
            yield
    finally:
        handler.setLevel(old_handler_level)
        logger.setLevel(old_logger_level)


class ReadableResult(NamedTuple):
    """Helper class for formatting and testing click.testing.Result objects."""

    exception: BaseException | None
    exit_code: int
    output: str
    stderr: str

    @classmethod
    def parse(cls, r: click.testing.Result, /) -> Self:
        return cls(r.exception, r.exit_code, r.stdout or '', r.stderr or '')

    def clean_exit(
        self, *, output: str = '', empty_stderr: bool = False
    ) -> bool:
        """Return whether the invocation exited cleanly.

        Args:
            output:
                An expected output string.
            empty_stderr:
                If true, also require standard error to be empty.

        """
        return (
            (
                not self.exception
                or (
                    isinstance(self.exception, SystemExit)
                    and self.exit_code == 0
                )
            )
            and (not output or output in self.output)
            and (not empty_stderr or not self.stderr)
        )

    def error_exit(
        self, *, error: str | type[BaseException] = BaseException
    ) -> bool:
        """Return whether the invocation exited uncleanly.

        Args:
            error:
                An expected error message, or an expected exception
                type.

        """
        if isinstance(error, str):
            return (
                isinstance(self.exception, SystemExit)
                and self.exit_code > 0
                and (not error or error in self.stderr)
            )
        else:  # noqa: RET505
            return isinstance(self.exception, error)
