# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2025 Recidiviz, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""Helpers for working with command line parameters."""
from typing import Optional


def str_to_bool(bool_str: str, arg_key: Optional[str] = None) -> bool:
    bool_str_lower = bool_str.strip().lower()
    if bool_str_lower in ("true", "yes", "1"):
        return True
    if bool_str_lower in ("false", "no", "0"):
        return False

    raise ValueError(f"Unexpected value {bool_str} for bool param {arg_key}")
