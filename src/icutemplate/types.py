# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Common typing declarations for the parent module."""

from __future__ import annotations

import icutemplate
from icutemplate._types import (
    VALID_OPTIONS,
    IcuTemplateOptions,
    PlaceholderMap,
    ValidationRule,
    is_icu_template_options,
)

__author__ = icutemplate.__author__
__version__ = icutemplate.__version__

__all__ = (
    'VALID_OPTIONS',
    'IcuTemplateOptions',
    'PlaceholderMap',
    'ValidationRule',
    'is_icu_template_options',
)
