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
"""Decides whether a root node of the consolidation graph counts toward recidivism
for a new offence committed on a given date."""
import datetime
import logging
from typing import Optional

import attr

from recidivcalc.calculator.consolidation.effective_punishment import (
    effective_punishment,
)
from recidivcalc.calculator.consolidation.node_graph import NodeGraph, base_node_id
from recidivcalc.calculator.expungement.expungement_calculator import (
    NodeExpungement,
    calculate_node_expungement,
)
from recidivcalc.common.constants.offence import MensRea, OffenceCategory
from recidivcalc.common.constants.recidivism import EligibilityReason
from recidivcalc.common.date import is_strictly_before
from recidivcalc.models.entities import Conviction


@attr.s(frozen=True, kw_only=True)
class NodeEligibility:
    """The eligibility verdict for a single root node."""

    node_id: str = attr.ib()
    eligible: bool = attr.ib()
    reason: EligibilityReason = attr.ib()
    expungement: NodeExpungement = attr.ib()

    # Whether the record was still active on the date of the new offence.
    is_active: bool = attr.ib()

    # Set when the node was treated as active only because data needed to decide
    # that was missing.
    requires_review: bool = attr.ib(default=False)


def is_record_active(
    expungement_date: Optional[datetime.date],
    new_offence_date: Optional[datetime.date],
) -> bool:
    """A record is active if the new offence was committed strictly before the
    expungement date. Undetermined dates are conservatively treated as active."""
    if expungement_date is None or new_offence_date is None:
        return True
    return is_strictly_before(new_offence_date, expungement_date)


def check_node_eligibility(
    graph: NodeGraph,
    node_id: str,
    new_offence_date: Optional[datetime.date],
    expungement: Optional[NodeExpungement] = None,
) -> NodeEligibility:
    """Checks whether the given root node counts toward recidivism for a new offence
    committed on |new_offence_date|.

    Conditions are checked in statutory priority order and the first one that fails
    determines the reason:
      1. the record is active on the new offence date;
      2. no underlying offence was committed as a juvenile;
      3. no underlying offence was negligent;
      4. no underlying offence is of minor gravity;
      5. a suspended sentence was cancelled, either explicitly or by absorption into
         a revoking consolidation;
      6. a deferment was cancelled.

    Consumed nodes are never eligible on their own; they are represented by their
    governing root node.
    """
    if expungement is None:
        expungement = calculate_node_expungement(graph, node_id)

    def _verdict(
        reason: EligibilityReason, is_active: bool = True
    ) -> NodeEligibility:
        return NodeEligibility(
            node_id=node_id,
            eligible=reason == EligibilityReason.ACCEPTED,
            reason=reason,
            expungement=expungement,
            is_active=is_active,
            requires_review=is_active
            and (expungement.is_undetermined or new_offence_date is None),
        )

    if graph.is_consumed(node_id):
        return NodeEligibility(
            node_id=node_id,
            eligible=False,
            reason=EligibilityReason.MERGED_INTO_CONSOLIDATION,
            expungement=expungement,
            is_active=is_record_active(
                expungement.expungement_date, new_offence_date
            ),
        )

    if not is_record_active(expungement.expungement_date, new_offence_date):
        return _verdict(EligibilityReason.EXPUNGED, is_active=False)

    offences = graph.underlying_offences(node_id)
    if any(offence.juvenile for offence in offences):
        return _verdict(EligibilityReason.JUVENILE)
    if any(offence.mens_rea == MensRea.NEGLIGENT for offence in offences):
        return _verdict(EligibilityReason.NEGLIGENT)
    if any(offence.category == OffenceCategory.MINOR for offence in offences):
        return _verdict(EligibilityReason.MINOR_CATEGORY)

    punishment = effective_punishment(graph, node_id)
    if punishment.main_suspended and not punishment.suspension_cancelled:
        return _verdict(EligibilityReason.SUSPENSION_NOT_CANCELLED)
    if punishment.deferment and not punishment.deferment_cancelled:
        return _verdict(EligibilityReason.DEFERMENT_NOT_CANCELLED)

    if graph.get_node(node_id).is_virtual:
        for conviction in graph.underlying_convictions(node_id):
            reason = _absorbed_conviction_rejection_reason(graph, conviction)
            if reason is not None:
                logging.debug(
                    "Underlying conviction [%s] of node [%s] rejected: %s",
                    conviction.conviction_id,
                    node_id,
                    reason.value,
                )
                return _verdict(reason)

    return _verdict(EligibilityReason.ACCEPTED)


def _absorbed_conviction_rejection_reason(
    graph: NodeGraph, conviction: Conviction
) -> Optional[EligibilityReason]:
    """Returns why a conviction absorbed into a consolidation keeps the consolidated
    node from counting, if it does. Absorption by a revoking operation cancels a
    suspension (and, for a revocation of both, a deferment) of the absorbed
    sentence."""
    punishment = conviction.punishment
    consuming_operation = graph.consuming_operation(
        base_node_id(conviction.conviction_id)
    )
    revokes_suspension = (
        consuming_operation is not None
        and consuming_operation.legal_basis.revokes_suspension
    )
    revokes_deferment = (
        consuming_operation is not None
        and consuming_operation.legal_basis.revokes_deferment
    )

    if (
        punishment.main_suspended
        and not punishment.suspension_cancelled
        and not revokes_suspension
    ):
        return EligibilityReason.SUSPENSION_NOT_CANCELLED
    if (
        punishment.deferment
        and not punishment.deferment_cancelled
        and not revokes_deferment
    ):
        return EligibilityReason.DEFERMENT_NOT_CANCELLED
    return None
