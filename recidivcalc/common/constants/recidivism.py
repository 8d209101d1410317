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
"""Constants related to recidivism assessments of a new offence."""
from enum import Enum
from typing import Dict


class RecidivismType(Enum):
    """The recidivism classification of a new offence under art. 18 CC RF."""

    NO_RECIDIVISM = "NO_RECIDIVISM"
    SIMPLE = "SIMPLE"
    DANGEROUS = "DANGEROUS"
    ESPECIALLY_DANGEROUS = "ESPECIALLY_DANGEROUS"

    @property
    def is_recidivism(self) -> bool:
        return self != RecidivismType.NO_RECIDIVISM

    @property
    def label(self) -> str:
        return _RECIDIVISM_TYPE_LABELS[self]

    @classmethod
    def get_enum_description(cls) -> str:
        return "The kind of recidivism established for a new offence, if any."

    @classmethod
    def get_value_descriptions(cls) -> Dict["RecidivismType", str]:
        return _RECIDIVISM_TYPE_LABELS


_RECIDIVISM_TYPE_LABELS: Dict[RecidivismType, str] = {
    RecidivismType.NO_RECIDIVISM: "No recidivism",
    RecidivismType.SIMPLE: "Simple recidivism",
    RecidivismType.DANGEROUS: "Dangerous recidivism",
    RecidivismType.ESPECIALLY_DANGEROUS: "Especially dangerous recidivism",
}

# Statutory justifications attached to each branch of the classification.
NEGLIGENT_NEW_OFFENCE_JUSTIFICATION = (
    "The new offence was committed through negligence (part 1 of art. 18 CC RF)."
)
NO_ELIGIBLE_CONVICTIONS_JUSTIFICATION = (
    "There are no active convictions for intentional offences of medium or greater"
    " gravity."
)
TWO_SERIOUS_IMPRISONMENTS_JUSTIFICATION = (
    "Two or more prior serious intentional offences with real imprisonment"
    " (part 3 of art. 18 CC RF)."
)
ESPECIALLY_SERIOUS_AFTER_SEVERE_JUSTIFICATION = (
    "Especially serious new offence with prior serious or especially serious"
    " convictions (part 3 of art. 18 CC RF)."
)
TWO_MEDIUM_IMPRISONMENTS_JUSTIFICATION = (
    "Two or more prior intentional offences of medium gravity with imprisonment"
    " (part 2 of art. 18 CC RF)."
)
SERIOUS_AFTER_SEVERE_JUSTIFICATION = (
    "Serious new offence with a prior serious or especially serious conviction"
    " (part 2 of art. 18 CC RF)."
)
SIMPLE_RECIDIVISM_JUSTIFICATION = (
    "An active conviction for an intentional offence exists (part 1 of art. 18"
    " CC RF)."
)


class EligibilityReason(Enum):
    """Why a prior conviction node does or does not count toward recidivism for a
    given new offence."""

    ACCEPTED = "ACCEPTED"
    EXPUNGED = "EXPUNGED"
    JUVENILE = "JUVENILE"
    NEGLIGENT = "NEGLIGENT"
    MINOR_CATEGORY = "MINOR_CATEGORY"
    SUSPENSION_NOT_CANCELLED = "SUSPENSION_NOT_CANCELLED"
    DEFERMENT_NOT_CANCELLED = "DEFERMENT_NOT_CANCELLED"
    MERGED_INTO_CONSOLIDATION = "MERGED_INTO_CONSOLIDATION"

    @property
    def description(self) -> str:
        return _ELIGIBILITY_REASON_DESCRIPTIONS[self]

    @classmethod
    def get_enum_description(cls) -> str:
        return "The reason a prior conviction was accepted or rejected."

    @classmethod
    def get_value_descriptions(cls) -> Dict["EligibilityReason", str]:
        return _ELIGIBILITY_REASON_DESCRIPTIONS


_ELIGIBILITY_REASON_DESCRIPTIONS: Dict[EligibilityReason, str] = {
    EligibilityReason.ACCEPTED: "Counts toward recidivism.",
    EligibilityReason.EXPUNGED: "Not counted: the conviction was expunged by the date"
    " of the new offence.",
    EligibilityReason.JUVENILE: "Not counted: the offence was committed under the age"
    " of 18.",
    EligibilityReason.NEGLIGENT: "Not counted: the offence was not intentional.",
    EligibilityReason.MINOR_CATEGORY: "Not counted: offence of minor gravity.",
    EligibilityReason.SUSPENSION_NOT_CANCELLED: "Not counted: the suspended sentence"
    " was not cancelled.",
    EligibilityReason.DEFERMENT_NOT_CANCELLED: "Not counted: the deferment was not"
    " cancelled.",
    EligibilityReason.MERGED_INTO_CONSOLIDATION: "Merged into a later consolidation;"
    " evaluated through the consolidated node.",
}


class ChainRole(Enum):
    """The position of a node within the consolidation graph."""

    # A conviction that was never consolidated.
    STANDALONE = "STANDALONE"
    # The result of a consolidation that was not absorbed any further.
    CONSOLIDATION_RESULT = "CONSOLIDATION_RESULT"
    # The primary child of the consolidation that absorbed it.
    PRIMARY_ABSORBED = "PRIMARY_ABSORBED"
    # A non-primary child of the consolidation that absorbed it.
    ABSORBED = "ABSORBED"

    @property
    def is_root(self) -> bool:
        return self in (ChainRole.STANDALONE, ChainRole.CONSOLIDATION_RESULT)
