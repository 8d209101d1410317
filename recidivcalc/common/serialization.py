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
"""Helper functions to serialize and deserialize the attrs types of the
calculation, e.g. to emit an assessment as JSON."""

import datetime
import importlib
from enum import Enum
from typing import Any, Dict

import attr
import cattr


def date_to_serializable(d: datetime.date) -> str:
    return d.isoformat()


def serializable_to_date(date_str: str) -> datetime.date:
    return datetime.date.fromisoformat(date_str)


def _build_converter() -> cattr.Converter:
    converter = cattr.Converter()
    converter.register_unstructure_hook(datetime.date, date_to_serializable)
    converter.register_structure_hook(
        datetime.date, lambda date_str, _: serializable_to_date(date_str)
    )
    converter.register_unstructure_hook(Enum, lambda e: e.value)
    return converter


_CONVERTER = _build_converter()


def attr_to_json_dict(attr_obj: Any) -> Dict[str, Any]:
    """Converts an attr-defined object to a JSON dict. Dates are written as ISO
    strings and enums as their values. The resulting dict should be unstructured
    using |attr_from_json_dict| below, which uses the __module__ and __classname__
    fields to reconstruct the object using the same Converter used to unstructure
    it here."""
    if not attr.has(attr_obj.__class__):
        raise TypeError(f"Expected an attrs object, found [{type(attr_obj)}].")
    attr_dict = _CONVERTER.unstructure(attr_obj)
    attr_dict["__classname__"] = attr_obj.__class__.__name__
    attr_dict["__module__"] = attr_obj.__module__
    return attr_dict


def attr_from_json_dict(attr_dict: Dict[str, Any]) -> Any:
    """Converts a JSON dict created by |attr_to_json_dict| above into the attr
    object it was originally created from."""
    attr_dict = dict(attr_dict)
    module = importlib.import_module(attr_dict.pop("__module__"))
    cls = getattr(module, attr_dict.pop("__classname__"))
    return _CONVERTER.structure(attr_dict, cls)
