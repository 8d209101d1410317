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
"""Tests for params.py"""
import unittest

from parameterized import parameterized

from recidivcalc.utils.params import str_to_bool


class TestStrToBool(unittest.TestCase):
    """Tests for str_to_bool"""

    @parameterized.expand(
        [
            ("true", "true", True),
            ("upper_case", "TRUE", True),
            ("yes", "yes", True),
            ("one", "1", True),
            ("false", "False", False),
            ("no", " no ", False),
            ("zero", "0", False),
        ]
    )
    def test_str_to_bool(self, _name: str, bool_str: str, expected: bool) -> None:
        self.assertEqual(expected, str_to_bool(bool_str))

    def test_invalid(self) -> None:
        with self.assertRaisesRegex(
            ValueError, "Unexpected value maybe for bool param output_json"
        ):
            str_to_bool("maybe", arg_key="output_json")
