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
"""Constants related to the consolidation of several sentences into one."""
from enum import Enum
from typing import Dict


class ConsolidationBasis(Enum):
    """The statutory basis under which sentences were consolidated."""

    # Part 5 of art. 69: cumulative sentencing for offences committed before the
    # earlier verdict.
    CUMULATIVE = "CUMULATIVE"
    # Art. 70: cumulation of verdicts after a suspended sentence was revoked.
    SUSPENSION_REVOCATION = "SUSPENSION_REVOCATION"
    # Art. 70 together with art. 74.
    SUSPENSION_AND_DEFERMENT_REVOCATION = "SUSPENSION_AND_DEFERMENT_REVOCATION"

    @property
    def citation(self) -> str:
        return _CONSOLIDATION_BASIS_CITATIONS[self]

    @property
    def revokes_suspension(self) -> bool:
        """Whether absorbing a suspended sentence under this basis cancels the
        suspension without a separately recorded cancellation date."""
        return self in (
            ConsolidationBasis.SUSPENSION_REVOCATION,
            ConsolidationBasis.SUSPENSION_AND_DEFERMENT_REVOCATION,
        )

    @property
    def revokes_deferment(self) -> bool:
        return self == ConsolidationBasis.SUSPENSION_AND_DEFERMENT_REVOCATION

    @classmethod
    def get_enum_description(cls) -> str:
        return "The legal mechanism by which sentences were merged into one."

    @classmethod
    def get_value_descriptions(cls) -> Dict["ConsolidationBasis", str]:
        return _CONSOLIDATION_BASIS_VALUE_DESCRIPTIONS


_CONSOLIDATION_BASIS_CITATIONS: Dict[ConsolidationBasis, str] = {
    ConsolidationBasis.CUMULATIVE: "part 5 of art. 69 CC RF",
    ConsolidationBasis.SUSPENSION_REVOCATION: "art. 70 CC RF",
    ConsolidationBasis.SUSPENSION_AND_DEFERMENT_REVOCATION: "arts. 70 and 74 CC RF",
}

_CONSOLIDATION_BASIS_VALUE_DESCRIPTIONS: Dict[ConsolidationBasis, str] = {
    ConsolidationBasis.CUMULATIVE: "Cumulative sentencing where the offences were"
    " committed before the earlier verdict. Absorbed sentences have no expungement"
    " date of their own.",
    ConsolidationBasis.SUSPENSION_REVOCATION: "Cumulation of verdicts for an offence"
    " committed after a suspended sentence. The suspension of absorbed sentences is"
    " cancelled.",
    ConsolidationBasis.SUSPENSION_AND_DEFERMENT_REVOCATION: "Cumulation of verdicts"
    " with revocation of both a suspended sentence and a deferment of serving it.",
}
