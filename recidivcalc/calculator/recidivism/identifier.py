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
"""Identifies recidivism for each new offence of a person.

This contains the top-level logic tying the calculation together: the consolidation
graph is built once from the person's convictions and consolidation operations, and
then every new offence is assessed against it independently:

  1. every root node of the graph is checked for eligibility on the date of the new
     offence;
  2. each eligible node contributes its most severe offence and its governing
     punishment to the classification;
  3. every node of the graph, consumed or not, gets an audit entry explaining how it
     was treated.
"""
import logging
from typing import Dict, Iterable, List, Optional

from recidivcalc.calculator.consolidation.effective_punishment import (
    effective_punishment,
)
from recidivcalc.calculator.consolidation.node_graph import NodeGraph, build_node_graph
from recidivcalc.calculator.expungement.expungement_calculator import (
    NodeExpungement,
    calculate_node_expungement,
)
from recidivcalc.calculator.recidivism.assessment import (
    NodeAuditEntry,
    RecidivismAssessment,
)
from recidivcalc.calculator.recidivism.classifier import (
    EligiblePrior,
    classify_recidivism,
)
from recidivcalc.calculator.recidivism.eligibility import (
    NodeEligibility,
    check_node_eligibility,
)
from recidivcalc.models.entities import ConsolidationOperation, Conviction, Offence


def assess_new_offences(
    new_offences: Iterable[Offence],
    convictions: Iterable[Conviction],
    operations: Iterable[ConsolidationOperation],
) -> List[RecidivismAssessment]:
    """Assesses the recidivism of each new offence, in order, against the given
    prior convictions and consolidation operations.

    Raises a ConsolidationGraphError if the operations do not form a valid
    consolidation graph.
    """
    graph = build_node_graph(convictions, operations)
    expungements = calculate_graph_expungements(graph)
    return [
        assess_new_offence(new_offence, graph, expungements)
        for new_offence in new_offences
    ]


def calculate_graph_expungements(graph: NodeGraph) -> Dict[str, NodeExpungement]:
    """Expungement of every node of the graph, keyed by node id. Expungement dates
    do not depend on the new offence, so they are shared between assessments."""
    return {
        node_id: calculate_node_expungement(graph, node_id)
        for node_id in graph.nodes_by_id
    }


def assess_new_offence(
    new_offence: Offence,
    graph: NodeGraph,
    expungements: Optional[Dict[str, NodeExpungement]] = None,
) -> RecidivismAssessment:
    """Assesses the recidivism of a single new offence against a built graph. The
    graph is only read, so it can be shared between assessments. Expungements are
    calculated here unless |expungements| already holds them."""
    if expungements is None:
        expungements = calculate_graph_expungements(graph)

    eligibilities = [
        check_node_eligibility(
            graph, node_id, new_offence.offence_date, expungements[node_id]
        )
        for node_id in graph.nodes_by_id
    ]

    eligible_priors = [
        _eligible_prior_for_node(graph, eligibility.node_id)
        for eligibility in eligibilities
        if eligibility.eligible
    ]

    classification = classify_recidivism(new_offence, eligible_priors)

    logging.info(
        "Assessed new offence [%s] on [%s]: %s with [%s] eligible prior node(s).",
        new_offence.offence_id,
        new_offence.offence_date,
        classification.recidivism_type.value,
        len(eligible_priors),
    )

    return RecidivismAssessment(
        new_offence=new_offence,
        recidivism_type=classification.recidivism_type,
        justification=classification.justification,
        eligible_node_ids=[prior.node_id for prior in eligible_priors],
        audit_entries=[
            _audit_entry(graph, eligibility) for eligibility in eligibilities
        ],
    )


def representative_offence(graph: NodeGraph, node_id: str) -> Offence:
    """The most severe offence underlying the node. Ties go to the offence declared
    first."""
    return max(
        graph.underlying_offences(node_id),
        key=lambda offence: offence.category.severity_rank,
    )


def _eligible_prior_for_node(graph: NodeGraph, node_id: str) -> EligiblePrior:
    return EligiblePrior(
        node_id=node_id,
        offence=representative_offence(graph, node_id),
        punishment=effective_punishment(graph, node_id),
    )


def _audit_entry(graph: NodeGraph, eligibility: NodeEligibility) -> NodeAuditEntry:
    node_id = eligibility.node_id
    return NodeAuditEntry(
        node_id=node_id,
        node_label=graph.node_label(node_id),
        expungement_date=eligibility.expungement.expungement_date,
        expungement_source=eligibility.expungement.source,
        is_active=eligibility.is_active,
        eligible=eligibility.eligible,
        reason=eligibility.reason,
        chain_role=graph.chain_role(node_id),
        consumed_by_operation_id=graph.consumed_by.get(node_id),
        governing_root_node_id=graph.governing_root_node_id(node_id),
        requires_review=eligibility.requires_review,
    )
