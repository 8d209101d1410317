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
"""Tests for YAMLDict."""
import datetime
import unittest

from recidivcalc.utils.yaml_dict import YAMLDict


class TestYAMLDict(unittest.TestCase):
    """Tests for YAMLDict."""

    def test_pop_optionals_no_field(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={"my_key": "my_value"})
        self.assertIsNone(yaml_dict.pop_optional("missing_key", str))
        self.assertIsNone(yaml_dict.pop_dict_optional("missing_key"))
        self.assertIsNone(yaml_dict.pop_date_optional("missing_key"))
        self.assertEqual([], yaml_dict.pop_dicts_optional("missing_key"))
        self.assertTrue(yaml_dict.pop_bool_optional("missing_key", default=True))

    def test_pop_optional_none_value(self) -> None:
        yaml_dict = YAMLDict(
            raw_yaml={"a": None, "b": None, "c": None, "d": None, "e": None}
        )
        self.assertIsNone(yaml_dict.pop_optional("a", str))
        self.assertIsNone(yaml_dict.pop_dict_optional("b"))
        self.assertIsNone(yaml_dict.pop_date_optional("c"))
        self.assertEqual([], yaml_dict.pop_dicts_optional("d"))
        self.assertFalse(yaml_dict.pop_bool_optional("e", default=False))
        yaml_dict.assert_fully_read("test dict")

    def test_pop_none_value_throws(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={"my_key": None})
        with self.assertRaisesRegex(
            ValueError, r"The field \[my_key\] must be of type \[<class 'str'>\]"
        ):
            _ = yaml_dict.pop("my_key", str)

        yaml_dict = YAMLDict(raw_yaml={"my_key": None})
        with self.assertRaisesRegex(
            ValueError, r"The field \[my_key\] must be of type \[<class 'dict'>\]"
        ):
            _ = yaml_dict.pop_dict("my_key")

        yaml_dict = YAMLDict(raw_yaml={"my_key": None})
        with self.assertRaisesRegex(
            ValueError, r"The field \[my_key\] must be of type \[<class 'list'>\]"
        ):
            _ = yaml_dict.pop_dicts("my_key")

    def test_pop_missing_field_throws(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={})
        with self.assertRaisesRegex(KeyError, r"Expected nonnull \[my_key\]"):
            _ = yaml_dict.pop("my_key", str)

    def test_pop_wrong_type_throws(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={"my_key": 1})
        with self.assertRaisesRegex(
            ValueError, r"expected type \[<class 'str'>\] but received: <class 'int'>"
        ):
            _ = yaml_dict.pop_optional("my_key", str)

    def test_pop_nested(self) -> None:
        yaml_dict = YAMLDict(
            raw_yaml={
                "nested": {"key": "value"},
                "nested_list": [{"key": 1}, {"key": 2}],
                "list": ["a", "b"],
            }
        )

        self.assertEqual(YAMLDict({"key": "value"}), yaml_dict.pop_dict("nested"))
        self.assertEqual(
            [1, 2],
            [d.pop("key", int) for d in yaml_dict.pop_dicts("nested_list")],
        )
        self.assertEqual(["a", "b"], yaml_dict.pop_list("list", str))
        self.assertEqual(0, len(yaml_dict))

    def test_pop_dicts_with_non_dict_throws(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={"nested_list": [{"key": 1}, "not a dict"]})
        with self.assertRaisesRegex(ValueError, r"The field \[nested_list\]"):
            _ = yaml_dict.pop_dicts("nested_list")

    def test_pop_date_optional(self) -> None:
        yaml_dict = YAMLDict(
            raw_yaml={
                "date": datetime.date(2020, 1, 1),
                "datetime": datetime.datetime(2020, 1, 1, 10, 30),
                "str": "2020-01-01",
                "empty": "",
                "invalid": "01.01.2020",
            }
        )

        self.assertEqual(datetime.date(2020, 1, 1), yaml_dict.pop_date_optional("date"))
        self.assertEqual(
            datetime.date(2020, 1, 1), yaml_dict.pop_date_optional("datetime")
        )
        self.assertEqual(datetime.date(2020, 1, 1), yaml_dict.pop_date_optional("str"))
        self.assertIsNone(yaml_dict.pop_date_optional("empty"))
        with self.assertRaisesRegex(ValueError, "YYYY-MM-DD"):
            yaml_dict.pop_date_optional("invalid")

    def test_assert_fully_read(self) -> None:
        yaml_dict = YAMLDict(raw_yaml={"b": 1, "a": 2})
        with self.assertRaisesRegex(
            ValueError, r"Found unexpected fields in my context: \['a', 'b'\]"
        ):
            yaml_dict.assert_fully_read("my context")
