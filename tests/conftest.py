# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

import hypothesis
import pytest

import tests

if TYPE_CHECKING:
    from collections.abc import Iterator

# https://hypothesis.readthedocs.io/en/latest/settings.html#settings-profiles
hypothesis.settings.register_profile('ci', max_examples=1000)
hypothesis.settings.register_profile('dev', max_examples=10)
hypothesis.settings.register_profile(
    'debug', max_examples=10, verbosity=hypothesis.Verbosity.verbose
)
hypothesis.settings.register_profile(
    'flaky', deadline=datetime.timedelta(milliseconds=150)
)


# https://docs.pytest.org/en/stable/explanation/fixtures.html#a-note-about-fixture-cleanup
# https://github.com/pytest-dev/pytest/issues/5243#issuecomment-491522595
@pytest.fixture(scope='session', autouse=True)
def term_handler() -> Iterator[None]:  # pragma: no cover
    try:
        import signal  # noqa: PLC0415

        sigint_handler = signal.getsignal(signal.SIGINT)
    except (ImportError, OSError):
        return
    else:
        orig_term = signal.signal(signal.SIGTERM, sigint_handler)
        yield
        signal.signal(signal.SIGTERM, orig_term)


@pytest.fixture
def cli_logging() -> Iterator[None]:
    """Route the CLI's log records to standard error, as in production."""
    with tests.standard_cli_logging():
        yield


@pytest.fixture(params=tests.TEST_DECLARATIONS, ids=tests._test_declaration_ids)  # noqa: SLF001
def test_declaration(
    request: pytest.FixtureRequest,
) -> tests.DeclarationTestCase:
    """Each declaration from the shared test table."""
    return request.param
