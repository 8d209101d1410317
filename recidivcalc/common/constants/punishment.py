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
"""Constants related to a punishment imposed by a conviction or by a consolidation
of sentences."""
from enum import Enum
from typing import Dict


class PunishmentType(Enum):
    """Kinds of main and additional punishment."""

    FINE = "FINE"
    DEPRIVATION_OF_RIGHT = "DEPRIVATION_OF_RIGHT"
    DEPRIVATION_OF_TITLE = "DEPRIVATION_OF_TITLE"
    COMPULSORY_WORKS = "COMPULSORY_WORKS"
    CORRECTIONAL_WORKS = "CORRECTIONAL_WORKS"
    RESTRICTION_OF_MILITARY_SERVICE = "RESTRICTION_OF_MILITARY_SERVICE"
    RESTRICTION_OF_FREEDOM = "RESTRICTION_OF_FREEDOM"
    FORCED_LABOUR = "FORCED_LABOUR"
    ARREST = "ARREST"
    DISCIPLINARY_MILITARY_UNIT = "DISCIPLINARY_MILITARY_UNIT"
    IMPRISONMENT = "IMPRISONMENT"
    LIFE_IMPRISONMENT = "LIFE_IMPRISONMENT"

    @property
    def is_imprisonment(self) -> bool:
        return self in (PunishmentType.IMPRISONMENT, PunishmentType.LIFE_IMPRISONMENT)

    @property
    def can_be_additional(self) -> bool:
        return self in _ADDITIONAL_PUNISHMENT_TYPES

    @classmethod
    def get_enum_description(cls) -> str:
        return "The kind of punishment imposed by a court."

    @classmethod
    def get_value_descriptions(cls) -> Dict["PunishmentType", str]:
        return _PUNISHMENT_TYPE_VALUE_DESCRIPTIONS


_ADDITIONAL_PUNISHMENT_TYPES = {
    PunishmentType.FINE,
    PunishmentType.DEPRIVATION_OF_RIGHT,
    PunishmentType.DEPRIVATION_OF_TITLE,
    PunishmentType.RESTRICTION_OF_FREEDOM,
}

_PUNISHMENT_TYPE_VALUE_DESCRIPTIONS: Dict[PunishmentType, str] = {
    PunishmentType.FINE: "Monetary fine.",
    PunishmentType.DEPRIVATION_OF_RIGHT: "Deprivation of the right to hold certain"
    " positions or engage in certain activities.",
    PunishmentType.DEPRIVATION_OF_TITLE: "Deprivation of a special, military or"
    " honorary title, class rank or state awards.",
    PunishmentType.COMPULSORY_WORKS: "Unpaid socially useful work in free time.",
    PunishmentType.CORRECTIONAL_WORKS: "Work with a portion of wages withheld by the"
    " state.",
    PunishmentType.RESTRICTION_OF_MILITARY_SERVICE: "Restriction in military"
    " service.",
    PunishmentType.RESTRICTION_OF_FREEDOM: "Restriction of freedom under the"
    " supervision of a probation authority.",
    PunishmentType.FORCED_LABOUR: "Forced labour at a correctional centre.",
    PunishmentType.ARREST: "Short-term arrest.",
    PunishmentType.DISCIPLINARY_MILITARY_UNIT: "Detention in a disciplinary"
    " military unit.",
    PunishmentType.IMPRISONMENT: "Imprisonment for a fixed term.",
    PunishmentType.LIFE_IMPRISONMENT: "Imprisonment for life.",
}
