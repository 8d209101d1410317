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
"""Constants related to an offence."""
from enum import Enum
from typing import Dict, List


class OffenceCategory(Enum):
    """The statutory gravity category of an offence."""

    MINOR = "MINOR"
    MEDIUM = "MEDIUM"
    SERIOUS = "SERIOUS"
    ESPECIALLY_SERIOUS = "ESPECIALLY_SERIOUS"

    @property
    def severity_rank(self) -> int:
        return _OFFENCE_CATEGORY_SEVERITY_ORDER.index(self)

    @property
    def is_serious_or_above(self) -> bool:
        return self in (OffenceCategory.SERIOUS, OffenceCategory.ESPECIALLY_SERIOUS)

    @classmethod
    def get_enum_description(cls) -> str:
        return "The gravity category the criminal code assigns to an offence."

    @classmethod
    def get_value_descriptions(cls) -> Dict["OffenceCategory", str]:
        return _OFFENCE_CATEGORY_VALUE_DESCRIPTIONS


# Ordered from least to most severe.
_OFFENCE_CATEGORY_SEVERITY_ORDER: List[OffenceCategory] = [
    OffenceCategory.MINOR,
    OffenceCategory.MEDIUM,
    OffenceCategory.SERIOUS,
    OffenceCategory.ESPECIALLY_SERIOUS,
]

_OFFENCE_CATEGORY_VALUE_DESCRIPTIONS: Dict[OffenceCategory, str] = {
    OffenceCategory.MINOR: "Offence of minor gravity.",
    OffenceCategory.MEDIUM: "Offence of medium gravity.",
    OffenceCategory.SERIOUS: "Serious offence.",
    OffenceCategory.ESPECIALLY_SERIOUS: "Especially serious offence.",
}


def most_severe_category(categories: List[OffenceCategory]) -> OffenceCategory:
    """Returns the most severe of the given categories, or MEDIUM if the list is
    empty."""
    if not categories:
        return OffenceCategory.MEDIUM
    return max(categories, key=lambda category: category.severity_rank)


class MensRea(Enum):
    """The form of guilt with which an offence was committed."""

    INTENTIONAL = "INTENTIONAL"
    NEGLIGENT = "NEGLIGENT"

    @classmethod
    def get_enum_description(cls) -> str:
        return "Whether an offence was committed intentionally or through negligence."

    @classmethod
    def get_value_descriptions(cls) -> Dict["MensRea", str]:
        return _MENS_REA_VALUE_DESCRIPTIONS


_MENS_REA_VALUE_DESCRIPTIONS: Dict[MensRea, str] = {
    MensRea.INTENTIONAL: "Committed with direct or indirect intent.",
    MensRea.NEGLIGENT: "Committed through negligence or recklessness.",
}
