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
"""Resolves which punishment governs each node of a consolidation graph.

A BASE node is governed by its conviction's own punishment and a VIRTUAL node by the
merged punishment of its operation. Absorbed nodes are the exception:

  - A node absorbed under a suspension revocation keeps its own expungement term
    (its own offences and pre-2013 status), but the term starts when the merged
    punishment of the revoking operation was served.
  - A node absorbed under cumulative sentencing has no expungement date of its own.
    Only the date of the consolidated result applies.
"""
from enum import Enum
from typing import Optional

import attr

from recidivcalc.calculator.consolidation.node_graph import NodeGraph
from recidivcalc.models.entities import Punishment


class ExpungementDateSource(Enum):
    """Where the expungement date of a node comes from."""

    # The conviction's own punishment.
    OWN_PUNISHMENT = "OWN_PUNISHMENT"
    # The merged punishment of the node's own consolidation operation.
    MERGED_PUNISHMENT = "MERGED_PUNISHMENT"
    # The merged punishment of the revoking operation that absorbed the node, with
    # the node's own term length.
    REVOKING_CONSOLIDATION = "REVOKING_CONSOLIDATION"
    # None: the node was absorbed by cumulative sentencing.
    GOVERNING_CONSOLIDATION = "GOVERNING_CONSOLIDATION"


@attr.s(frozen=True, kw_only=True)
class ExpungementDateInputs:
    """The inputs of an expungement date calculation for one node."""

    source: ExpungementDateSource = attr.ib()

    # Supplies the served-through date, the suspension flag and the punishment kind.
    # None when the node has no expungement date of its own.
    punishment: Optional[Punishment] = attr.ib()

    # The node whose offences and convictions supply the juvenile flag, the
    # category and the pre-2013 status.
    term_node_id: str = attr.ib()


def effective_punishment(graph: NodeGraph, node_id: str) -> Punishment:
    """Returns the punishment that governs the node as a whole: the conviction's own
    punishment for a BASE node, the merged punishment for a VIRTUAL node."""
    node = graph.get_node(node_id)
    if node.is_base:
        return graph.conviction_for_node(node_id).punishment
    return graph.operation_for_node(node_id).merged_punishment


def expungement_date_inputs(graph: NodeGraph, node_id: str) -> ExpungementDateInputs:
    """Returns the inputs from which the node's expungement date is calculated,
    taking the operation that absorbed the node into account."""
    consuming_operation = graph.consuming_operation(node_id)
    if consuming_operation is None:
        node = graph.get_node(node_id)
        return ExpungementDateInputs(
            source=(
                ExpungementDateSource.OWN_PUNISHMENT
                if node.is_base
                else ExpungementDateSource.MERGED_PUNISHMENT
            ),
            punishment=effective_punishment(graph, node_id),
            term_node_id=node_id,
        )

    if consuming_operation.legal_basis.revokes_suspension:
        return ExpungementDateInputs(
            source=ExpungementDateSource.REVOKING_CONSOLIDATION,
            punishment=consuming_operation.merged_punishment,
            term_node_id=node_id,
        )

    return ExpungementDateInputs(
        source=ExpungementDateSource.GOVERNING_CONSOLIDATION,
        punishment=None,
        term_node_id=node_id,
    )
