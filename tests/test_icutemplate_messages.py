# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Test the ICU template validator."""

from __future__ import annotations

import pickle
import types

import hypothesis
import pytest
from hypothesis import strategies

import tests
from icutemplate import _types, messages


class TestStaticFunctionality:
    """Test the validator against fixed declarations."""

    def test_100_table_declarations(
        self,
        test_declaration: tests.DeclarationTestCase,
    ) -> None:
        """The validator accepts valid declarations and flags the rest."""
        template, options, _comment, rule = test_declaration
        if tests.is_valid_test_declaration(test_declaration):
            assert messages.declare_icu_template(template, options) is template
        else:
            with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
                messages.declare_icu_template(template, options)
            assert excinfo.value.rule == rule

    def test_101_compiled_passthrough(
        self,
        test_declaration: tests.DeclarationTestCase,
    ) -> None:
        """Compiled declarations are never checked."""
        template, options, *_ = test_declaration
        assert (
            messages.declare_icu_template(template, options, compiled=True)
            is template
        )

    @pytest.mark.parametrize(
        ['template', 'options', 'error_text'],
        [
            pytest.param(
                'Hi, {$NAME}!',
                {'description': 'd'},
                (
                    "closure-style placeholder '{$NAME}' found in "
                    "ICU template 'Hi, {$NAME}!'"
                ),
                id='closure-style',
            ),
            pytest.param(
                'Hi', {}, 'no description supplied', id='no-description'
            ),
            pytest.param(
                'Hi',
                {'description': ['a']},
                "invalid description: ['a']",
                id='bad-description',
            ),
            pytest.param(
                'Hi',
                {'description': 'd', 'meaning': 5},
                'invalid meaning: 5',
                id='bad-meaning',
            ),
            pytest.param(
                'Hi',
                {'description': 'd', 'original_code': 'x'},
                "invalid original_code map: 'x'",
                id='bad-map',
            ),
            pytest.param(
                'Hi, {NAME}!',
                {'description': 'd', 'example': {'USER': 'Jane'}},
                "example: unknown placeholder: 'USER'",
                id='unknown-placeholder',
            ),
            pytest.param(
                'Hi, {NAME}!',
                {'description': 'd', 'example': {'NAME': None}},
                'invalid example value for NAME: None',
                id='bad-value',
            ),
            pytest.param(
                'Hi',
                {'description': 'd', 'meanign': 'x'},
                "unknown option name: 'meanign'",
                id='unknown-option',
            ),
        ],
    )
    def test_110_error_messages(
        self,
        template: str,
        options: dict[str, object],
        error_text: str,
    ) -> None:
        """Validation failures carry readable error messages."""
        with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
            messages.declare_icu_template(template, options)
        assert str(excinfo.value) == error_text

    @pytest.mark.parametrize(
        ['options', 'rule'],
        [
            pytest.param(
                {'foo': 1, 'description': 5},
                _types.ValidationRule.INVALID_DESCRIPTION,
                id='description-before-unknown-option',
            ),
            pytest.param(
                {'description': 'd', 'meaning': 1, 'example': 'x'},
                _types.ValidationRule.INVALID_MEANING,
                id='meaning-before-example',
            ),
            pytest.param(
                {
                    'description': 'd',
                    'example': {'NAME': 'x'},
                    'original_code': {'OTHER': 'y'},
                },
                _types.ValidationRule.UNKNOWN_PLACEHOLDER,
                id='original-code-after-valid-example',
            ),
            pytest.param(
                {'description': 'd', 'example': {'NAME': 1}, 'foo': 'x'},
                _types.ValidationRule.INVALID_PLACEHOLDER_VALUE,
                id='example-before-unknown-option',
            ),
        ],
    )
    def test_111_first_failure_wins(
        self,
        options: dict[str, object],
        rule: _types.ValidationRule,
    ) -> None:
        """Only the first violation, in checking order, is reported."""
        with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
            messages.declare_icu_template('Hi, {NAME}!', options)
        assert excinfo.value.rule == rule

    def test_112_read_only_mapping(self) -> None:
        """Any mapping is accepted as options record."""
        options = types.MappingProxyType({
            'description': 'd',
            'example': types.MappingProxyType({'NAME': 'Jane'}),
        })
        assert messages.declare_icu_template('{NAME}', options) == '{NAME}'

    def test_113_options_are_not_modified(self) -> None:
        """Validation leaves the options record untouched."""
        options = {'description': 'd', 'example': {'NAME': 'Jane'}}
        messages.declare_icu_template('{NAME}', options)
        assert options == {'description': 'd', 'example': {'NAME': 'Jane'}}

    def test_120_error_is_an_assertion_error(self) -> None:
        """Validation failures can be caught as `AssertionError`."""
        with pytest.raises(AssertionError, match='no description'):
            messages.declare_icu_template('Hi', {})

    def test_121_error_is_picklable(self) -> None:
        """Validation failures survive pickling."""
        exc = messages.InvalidIcuTemplateError(
            _types.ValidationRule.UNKNOWN_OPTION, 'unknown option name: 1'
        )
        copied = pickle.loads(pickle.dumps(exc))  # noqa: S301
        assert copied.rule == exc.rule
        assert str(copied) == str(exc)

    @pytest.mark.parametrize(
        ['template', 'names'],
        [
            pytest.param('Hi', set(), id='none'),
            pytest.param('{A} {A} {b}', {'A', 'b'}, id='repeated'),
            pytest.param('{0} {1x} {a-b}', set(), id='not-identifiers'),
            pytest.param('{$X} {Y}', {'Y'}, id='closure-style'),
            pytest.param('{ A } {A}', {'A'}, id='whitespace'),
            pytest.param(
                '{count, plural, one {# item} other {# items}}',
                set(),
                id='plural-argument',
            ),
        ],
    )
    def test_130_gather_placeholder_names(
        self,
        template: str,
        names: set[str],
    ) -> None:
        """Placeholder names are gathered from simple ICU arguments."""
        assert messages.gather_icu_placeholder_names(template) == names


class TestHypotheses:
    """Test the validator against generated declarations."""

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(template_and_names=tests.icu_templates())
    def test_200_placeholder_names_are_found(
        self,
        template_and_names: tuple[str, list[str]],
    ) -> None:
        """Exactly the inserted placeholder names are gathered."""
        template, names = template_and_names
        assert messages.gather_icu_placeholder_names(template) == set(names)

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(
        template_and_names=tests.icu_templates(),
        description=strategies.text(min_size=1),
        data=strategies.data(),
    )
    def test_201_complete_examples_are_valid(
        self,
        template_and_names: tuple[str, list[str]],
        description: str,
        data: strategies.DataObject,
    ) -> None:
        """Examples for any subset of the placeholders are accepted."""
        template, names = template_and_names
        example_names = data.draw(
            strategies.sets(strategies.sampled_from(names))
            if names
            else strategies.just(set())
        )
        options = {
            'description': description,
            'example': {name: f'<{name}>' for name in example_names},
        }
        assert messages.declare_icu_template(template, options) is template
        # Validation is idempotent.
        assert messages.declare_icu_template(template, options) is template

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(
        template_and_names=tests.icu_templates(),
        name=tests.placeholder_names,
    )
    def test_202_foreign_example_names_are_rejected(
        self,
        template_and_names: tuple[str, list[str]],
        name: str,
    ) -> None:
        """Examples for placeholders absent from the template are errors."""
        template, names = template_and_names
        hypothesis.assume(name not in names)
        with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
            messages.declare_icu_template(
                template, {'description': 'd', 'example': {name: 'x'}}
            )
        assert excinfo.value.rule == _types.ValidationRule.UNKNOWN_PLACEHOLDER

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(
        template_and_names=tests.icu_templates(),
        legacy_name=strategies.text(
            strategies.characters(exclude_characters='}'), min_size=1
        ),
        position=strategies.integers(min_value=0),
    )
    def test_203_closure_style_placeholders_are_rejected(
        self,
        template_and_names: tuple[str, list[str]],
        legacy_name: str,
        position: int,
    ) -> None:
        """Closure-style placeholders anywhere in the template are errors."""
        template, _names = template_and_names
        position %= len(template) + 1
        template = (
            template[:position] + f'{{${legacy_name}}}' + template[position:]
        )
        with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
            messages.declare_icu_template(
                template, {'description': 'valid description'}
            )
        assert (
            excinfo.value.rule
            == _types.ValidationRule.CLOSURE_STYLE_PLACEHOLDER
        )

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(
        template=strategies.one_of(strategies.none(), strategies.text()),
        options=strategies.one_of(
            strategies.none(),
            strategies.dictionaries(strategies.text(), strategies.integers()),
        ),
    )
    def test_204_compiled_mode_accepts_anything(
        self,
        template: str,
        options: dict[str, int],
    ) -> None:
        """Compiled declarations pass through unchecked."""
        assert (
            messages.declare_icu_template(template, options, compiled=True)
            is template
        )

    @tests.hypothesis_settings_coverage_compatible
    @hypothesis.given(
        template_and_names=tests.icu_templates(),
        key=strategies.text(min_size=1).filter(
            lambda k: k not in _types.VALID_OPTIONS
        ),
    )
    def test_205_unknown_options_are_rejected(
        self,
        template_and_names: tuple[str, list[str]],
        key: str,
    ) -> None:
        """Any option name beyond the four known ones is an error."""
        template, _names = template_and_names
        with pytest.raises(messages.InvalidIcuTemplateError) as excinfo:
            messages.declare_icu_template(
                template, {'description': 'd', key: 'x'}
            )
        assert excinfo.value.rule == _types.ValidationRule.UNKNOWN_OPTION
