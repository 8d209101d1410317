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
"""The result of assessing the recidivism of one new offence, with the per-node
audit trail that justifies it."""
import datetime
from typing import List, Optional

import attr

from recidivcalc.calculator.consolidation.effective_punishment import (
    ExpungementDateSource,
)
from recidivcalc.common.constants.recidivism import (
    ChainRole,
    EligibilityReason,
    RecidivismType,
)
from recidivcalc.models.entities import Offence

UNDETERMINED_DATE_DISPLAY = "undetermined"
GOVERNED_DATE_DISPLAY = "see consolidated node"


@attr.s(frozen=True, kw_only=True)
class NodeAuditEntry:
    """How one node of the consolidation graph was treated in an assessment."""

    node_id: str = attr.ib()
    node_label: str = attr.ib()

    expungement_date: Optional[datetime.date] = attr.ib()
    expungement_source: ExpungementDateSource = attr.ib()

    # Whether the record was active on the date of the new offence.
    is_active: bool = attr.ib()

    eligible: bool = attr.ib()
    reason: EligibilityReason = attr.ib()

    chain_role: ChainRole = attr.ib()
    consumed_by_operation_id: Optional[str] = attr.ib()
    governing_root_node_id: str = attr.ib()

    requires_review: bool = attr.ib()

    @property
    def expungement_date_display(self) -> str:
        if self.expungement_date is not None:
            return self.expungement_date.isoformat()
        if self.expungement_source == ExpungementDateSource.GOVERNING_CONSOLIDATION:
            return GOVERNED_DATE_DISPLAY
        return UNDETERMINED_DATE_DISPLAY

    @property
    def reason_description(self) -> str:
        return self.reason.description

    @property
    def is_root(self) -> bool:
        return self.chain_role.is_root


@attr.s(frozen=True, kw_only=True)
class RecidivismAssessment:
    """The recidivism assessment of a single new offence."""

    new_offence: Offence = attr.ib()

    recidivism_type: RecidivismType = attr.ib()
    justification: str = attr.ib()

    # Root nodes that counted toward recidivism, in node order.
    eligible_node_ids: List[str] = attr.ib(factory=list)

    # One entry per node of the consolidation graph, in node order.
    audit_entries: List[NodeAuditEntry] = attr.ib(factory=list)

    @property
    def has_recidivism(self) -> bool:
        return self.recidivism_type.is_recidivism

    @property
    def requires_review(self) -> bool:
        """Whether any evaluated node was counted as active only because its
        expungement date could not be determined."""
        return any(entry.requires_review for entry in self.audit_entries)

    def audit_entry_for_node(self, node_id: str) -> NodeAuditEntry:
        for entry in self.audit_entries:
            if entry.node_id == node_id:
                return entry
        raise KeyError(f"No audit entry for node [{node_id}].")
