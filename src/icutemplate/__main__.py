# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib
"""Run [`icutemplate.cli.icutemplate`][] on import."""

import sys

if __name__ == '__main__':
    from icutemplate.cli import icutemplate

    sys.exit(icutemplate())
