# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""icutemplate internals.

Warning:
    Non-public package (implementation detail).  Subject to change
    without notice, including removal.

"""

import icutemplate

__all__ = ()

PROG_NAME = icutemplate.__distribution_name__
VERSION = icutemplate.__version__
AUTHOR = icutemplate.__author__
