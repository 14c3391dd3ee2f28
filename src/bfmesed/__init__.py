# -*- coding: utf-8 -*-
"""
bfmesed - BFME2 Savegame Editor.

------------------------------------------------------------------------------
This file is part of bfmesed - BFME2 Savegame Editor.
Released under the MIT License.

@created     02.09.2026
@modified    19.10.2026
------------------------------------------------------------------------------
"""
