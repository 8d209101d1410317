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
"""Functionality for working with objects parsed from YAML."""
import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

from recidivcalc.common.date import as_date, parse_opt_iso_date

T = TypeVar("T")


class YAMLDict:
    """Wraps a dict parsed from YAML and provides type safety when accessing items
    within the dict. Fields are popped as they are read, so that any fields left over
    once a dict has been fully read can be reported as unexpected."""

    def __init__(self, raw_yaml: Dict[str, Any]):
        self.raw_yaml = raw_yaml

    @classmethod
    def from_path(cls, yaml_path: str) -> "YAMLDict":
        with open(yaml_path, encoding="utf-8") as yaml_file:
            loaded_raw_yaml = yaml.safe_load(yaml_file)
            if not isinstance(loaded_raw_yaml, dict):
                raise ValueError(
                    f"Expected YAML file to contain a top-level dictionary, but "
                    f"received: {type(loaded_raw_yaml)} at path [{yaml_path}]."
                )
            return YAMLDict(loaded_raw_yaml)

    @classmethod
    def _assert_type(cls, field: str, value: Any, value_type: Type[T]) -> T:
        if value is None or not isinstance(value, value_type):
            raise ValueError(
                f"The field [{field}] must be of type [{value_type}]. Invalid "
                f"[{field}] value, expected type [{value_type}] but received: "
                f"{type(value)}"
            )
        return value

    def pop(self, field: str, value_type: Type[T]) -> T:
        """Returns the object at the given key |field| after popping it from the
        YAMLDict. Throws if the value is nonnull but the type is not the expected
        |value_type|, or if the field does not exist, or if the value at that field is
        None.
        """
        try:
            value = self.raw_yaml.pop(field)
        except KeyError as e:
            raise KeyError(
                f"Expected nonnull [{field}] in input: {self.raw_yaml}"
            ) from e
        return self._assert_type(field, value, value_type)

    def pop_optional(self, field: str, value_type: Type[T]) -> Optional[T]:
        """Returns the object at the given key |field| after popping it from the
        YAMLDict. Will return None if the field does not exist or if the value at that
        field is None. Throws if the value is nonnull but the type is not the expected
        |value_type|.
        """
        value = self.raw_yaml.pop(field, None)
        if value is None:
            return None
        return self._assert_type(field, value, value_type)

    def pop_bool_optional(self, field: str, default: bool) -> bool:
        value = self.pop_optional(field, bool)
        return default if value is None else value

    def pop_date_optional(self, field: str) -> Optional[datetime.date]:
        """Pops a date field. YAML parses unquoted ISO dates into date objects, while
        quoted dates stay strings; both are accepted. Empty strings are treated as
        unset."""
        value = self.raw_yaml.pop(field, None)
        if value is None:
            return None
        if isinstance(value, str):
            return parse_opt_iso_date(value)
        return as_date(self._assert_type(field, value, datetime.date))

    def pop_dict(self, field: str) -> "YAMLDict":
        """Returns the dictionary at the given key |field| after popping it from the
        YAMLDict. Throws if the value is nonnull but the type is not a dictionary, or
        if the field does not exist, or if the value at that field is None.
        """
        return YAMLDict(self.pop(field, dict))

    def pop_dict_optional(self, field: str) -> Optional["YAMLDict"]:
        raw_yaml = self.pop_optional(field, dict)
        return YAMLDict(raw_yaml) if raw_yaml is not None else None

    @classmethod
    def _transform_dicts(cls, field: str, raw_yamls: List) -> List["YAMLDict"]:
        dicts = []
        for raw_yaml in raw_yamls:
            raw_yaml = cls._assert_type(field, raw_yaml, dict)
            dicts.append(YAMLDict(raw_yaml))
        return dicts

    def pop_dicts(self, field: str) -> List["YAMLDict"]:
        """Returns the list of dictionaries at the given key |field| after popping it
        from the YAMLDict. Throws if the value is nonnull but the type is not a
        list, if any of the list values are not dictionaries, if the field does not
        exist, or if the value at that field is None.
        """
        return self._transform_dicts(field, self.pop(field, list))

    def pop_dicts_optional(self, field: str) -> List["YAMLDict"]:
        """Same as pop_dicts(), but returns an empty list if the field does not exist
        or is None."""
        raw_yamls = self.pop_optional(field, list)
        if raw_yamls is None:
            return []
        return self._transform_dicts(field, raw_yamls)

    def pop_list(self, field: str, list_values_type: Type[T]) -> List[T]:
        """Returns the list at the given key |field| after popping it from the
        YAMLDict. Throws if the value is nonnull but the type is not a list, if any of
        the list values are not the expected |list_values_type|, if the field does not
        exist, or if the value at that field is None.
        """
        raw_values = self.pop(field, list)
        return [
            self._assert_type(field, raw_val, list_values_type)
            for raw_val in raw_values
        ]

    def assert_fully_read(self, context: str) -> None:
        """Throws if any fields remain in the dictionary after it has been read."""
        if self.raw_yaml:
            raise ValueError(
                f"Found unexpected fields in {context}: {sorted(self.raw_yaml)}"
            )

    def __len__(self) -> int:
        return len(self.raw_yaml)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, YAMLDict):
            return False

        return self.get() == other.get()

    def __repr__(self) -> str:
        return str(self.get())

    def get(self) -> Dict[str, Any]:
        """Returns the underlying raw dictionary representation of the YAML."""
        return self.raw_yaml
