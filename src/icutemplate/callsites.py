# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Static checks for `declare_icu_template` call sites.

The message extraction tool reads [`declare_icu_template`][icutemplate.messages.declare_icu_template]
calls straight from the source code, so their arguments must be
literals.  This module finds such calls in Python source, checks the
calling convention, and runs the template validator on each call site,
without executing any of the scanned code.

"""

from __future__ import annotations

import ast
import pathlib
from typing import TYPE_CHECKING, NamedTuple

from icutemplate import _types, messages

if TYPE_CHECKING:
    import os
    from collections.abc import Iterable, Iterator
    from collections.abc import Set as AbstractSet

__all__ = (
    'DECLARATION_FUNCTION_NAMES',
    'CheckResult',
    'check_call_site',
    'check_file',
    'check_source',
    'find_call_sites',
    'iter_python_files',
)

DECLARATION_FUNCTION_NAMES = frozenset({'declare_icu_template'})
"""Callee names recognized as message declarations by default."""

# Error messages
WRONG_ARGUMENT_COUNT = (
    'expected exactly two positional arguments (template and options), '
    'got {count}'
)
STARRED_ARGUMENTS = 'starred arguments cannot be read statically'
UNEXPECTED_KEYWORD = 'unexpected keyword argument {name!r}'
NON_LITERAL_ARGUMENT = '{which} argument is not a literal value'


class CheckResult(NamedTuple):
    """The outcome of checking one source file.

    Attributes:
        call_sites:
            All call sites with literal arguments.
        problems:
            All problems found, in source order.  Includes calling
            convention violations and failed validations.

    """

    call_sites: list[_types.CallSite]
    """"""
    problems: list[_types.CallSiteProblem]
    """"""


def _callee_name(node: ast.expr, /) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _iter_declaration_calls(
    tree: ast.AST,
    function_names: AbstractSet[str],
    /,
) -> Iterator[ast.Call]:
    calls = [
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and _callee_name(node.func) in function_names
    ]
    calls.sort(key=lambda node: (node.lineno, node.col_offset))
    yield from calls


def _literal(node: ast.expr, /) -> tuple[bool, object]:
    try:
        return True, ast.literal_eval(node)
    except (ValueError, TypeError):
        return False, None


def find_call_sites(
    source: str,
    /,
    *,
    filename: str = '<string>',
    function_names: Iterable[str] = DECLARATION_FUNCTION_NAMES,
) -> list[_types.CallSite | _types.CallSiteProblem]:
    """Find all ICU template declarations in `source`.

    A declaration is a call to a function named in `function_names`,
    either directly (`declare_icu_template(...)`) or as an attribute
    (`messages.declare_icu_template(...)`).  It must take exactly two
    positional arguments, both literals.  The only keyword argument
    accepted is `compiled`.

    Args:
        source:
            The Python source code.
        filename:
            The file name to report.
        function_names:
            The callee names to recognize.

    Returns:
        In source order, a [call site][icutemplate._types.CallSite] for
        each declaration with literal arguments, and a
        [problem][icutemplate._types.CallSiteProblem] for each
        declaration violating the calling convention.

    Raises:
        SyntaxError:
            `source` is not valid Python, or contains NUL bytes.

    """
    try:
        tree = ast.parse(source, filename=filename)
    except ValueError as exc:
        # Python 3.10 reports NUL bytes as a ValueError.
        raise SyntaxError(str(exc), (filename, None, None, None)) from exc
    results: list[_types.CallSite | _types.CallSiteProblem] = []
    for call in _iter_declaration_calls(tree, frozenset(function_names)):

        def problem(message: str, /, *, call: ast.Call = call) -> None:
            results.append(
                _types.CallSiteProblem(
                    filename, call.lineno, call.col_offset, message
                )
            )

        if any(isinstance(arg, ast.Starred) for arg in call.args) or any(
            kw.arg is None for kw in call.keywords
        ):
            problem(STARRED_ARGUMENTS)
            continue
        unexpected = [kw.arg for kw in call.keywords if kw.arg != 'compiled']
        if unexpected:
            problem(UNEXPECTED_KEYWORD.format(name=unexpected[0]))
            continue
        if len(call.args) != 2:  # noqa: PLR2004
            problem(WRONG_ARGUMENT_COUNT.format(count=len(call.args)))
            continue
        template_ok, template = _literal(call.args[0])
        if not template_ok:
            problem(NON_LITERAL_ARGUMENT.format(which='template'))
            continue
        options_ok, options = _literal(call.args[1])
        if not options_ok:
            problem(NON_LITERAL_ARGUMENT.format(which='options'))
            continue
        results.append(
            _types.CallSite(
                filename, call.lineno, call.col_offset, template, options
            )
        )
    return results


def check_call_site(
    site: _types.CallSite, /
) -> _types.CallSiteProblem | None:
    """Validate a single call site.

    Returns:
        A problem describing the first validation failure, or `None` if
        the call site is valid.

    """
    try:
        messages.assert_icu_template_parameters_are_valid(
            site.template, site.options
        )
    except messages.InvalidIcuTemplateError as exc:
        return _types.CallSiteProblem(
            site.filename, site.lineno, site.col_offset, str(exc), exc.rule
        )
    return None


def check_source(
    source: str,
    /,
    *,
    filename: str = '<string>',
    function_names: Iterable[str] = DECLARATION_FUNCTION_NAMES,
) -> CheckResult:
    """Find and validate all ICU template declarations in `source`.

    Args:
        source:
            The Python source code.
        filename:
            The file name to report.
        function_names:
            The callee names to recognize.

    Returns:
        The call sites found, and all problems, in source order.

    Raises:
        SyntaxError:
            `source` is not valid Python, or contains NUL bytes.

    """
    result = CheckResult([], [])
    for item in find_call_sites(
        source, filename=filename, function_names=function_names
    ):
        if isinstance(item, _types.CallSiteProblem):
            result.problems.append(item)
            continue
        result.call_sites.append(item)
        problem = check_call_site(item)
        if problem is not None:
            result.problems.append(problem)
    return result


def check_file(
    path: str | os.PathLike[str],
    /,
    *,
    function_names: Iterable[str] = DECLARATION_FUNCTION_NAMES,
) -> CheckResult:
    """Find and validate all ICU template declarations in a file.

    The file is read as UTF-8.

    Raises:
        OSError:
            The file cannot be read.
        UnicodeDecodeError:
            The file is not valid UTF-8.
        SyntaxError:
            The file is not valid Python, or contains NUL bytes.

    """
    path = pathlib.Path(path)
    source = path.read_text(encoding='utf-8')
    return check_source(
        source, filename=str(path), function_names=function_names
    )


def iter_python_files(
    paths: Iterable[str | os.PathLike[str]], /
) -> Iterator[pathlib.Path]:
    """Yield the given files, and all `*.py` files below given directories.

    Directory contents are yielded in sorted order.

    """
    for p in paths:
        path = pathlib.Path(p)
        if path.is_dir():
            yield from sorted(
                f for f in path.rglob('*.py') if f.is_file()
            )
        else:
            yield path
