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
"""Builds and traverses the graph of prior convictions and the consolidation
operations that merge their sentences.

Every conviction is represented by a BASE node and every consolidation operation by
a VIRTUAL node holding the operation's result. Children of an operation are
"consumed" by it: they are represented from then on by the operation's result node.
Nodes that are not consumed are roots, and only roots are evaluated independently.

The graph is an arena of immutable records addressed by node id, plus a consumed-by
index from node id to the id of the operation that absorbed it. Parent and child
relations are always id lookups, so a graph can be rebuilt, compared and shared
freely between evaluations.
"""
import datetime
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

import attr

from recidivcalc.common.constants.offence import OffenceCategory, most_severe_category
from recidivcalc.common.constants.recidivism import ChainRole
from recidivcalc.common.date import format_opt_date
from recidivcalc.models.entities import ConsolidationOperation, Conviction, Offence

BASE_NODE_ID_PREFIX = "conviction:"
VIRTUAL_NODE_ID_PREFIX = "consolidation:"

MIN_CONSOLIDATION_CHILDREN = 2


class ConsolidationGraphError(ValueError):
    """Raised when convictions and consolidation operations do not form a valid
    consolidation graph."""


class NodeType(Enum):
    BASE = "BASE"
    VIRTUAL = "VIRTUAL"


def base_node_id(conviction_id: str) -> str:
    return f"{BASE_NODE_ID_PREFIX}{conviction_id}"


def virtual_node_id(operation_id: str) -> str:
    return f"{VIRTUAL_NODE_ID_PREFIX}{operation_id}"


@attr.s(frozen=True, kw_only=True)
class Node:
    """A node of the consolidation graph."""

    node_id: str = attr.ib()
    node_type: NodeType = attr.ib()

    # The id of the wrapped conviction (BASE) or operation (VIRTUAL).
    record_id: str = attr.ib()

    # The verdict date of the conviction, or for VIRTUAL nodes the verdict date of
    # the primary child, resolved through any chain of consolidations.
    verdict_date: Optional[datetime.date] = attr.ib(default=None)

    @property
    def is_base(self) -> bool:
        return self.node_type == NodeType.BASE

    @property
    def is_virtual(self) -> bool:
        return self.node_type == NodeType.VIRTUAL


@attr.s(frozen=True, kw_only=True)
class NodeGraph:
    """The consolidation graph built from a person's convictions and consolidation
    operations. Use build_node_graph() to construct one."""

    convictions: List[Conviction] = attr.ib()
    operations: List[ConsolidationOperation] = attr.ib()

    # Nodes in insertion order: BASE nodes in conviction order, then VIRTUAL nodes
    # in operation order.
    nodes_by_id: Dict[str, Node] = attr.ib()

    # Maps the id of every consumed node to the id of the operation consuming it.
    consumed_by: Dict[str, str] = attr.ib()

    _convictions_by_id: Dict[str, Conviction] = attr.ib()
    _operations_by_id: Dict[str, ConsolidationOperation] = attr.ib()

    # Lookups

    def get_node(self, node_id: str) -> Node:
        if node_id not in self.nodes_by_id:
            raise KeyError(f"No node with id [{node_id}] in the consolidation graph.")
        return self.nodes_by_id[node_id]

    def get_conviction(self, conviction_id: str) -> Conviction:
        return self._convictions_by_id[conviction_id]

    def get_operation(self, operation_id: str) -> ConsolidationOperation:
        return self._operations_by_id[operation_id]

    def conviction_for_node(self, node_id: str) -> Conviction:
        node = self.get_node(node_id)
        if not node.is_base:
            raise ValueError(f"Node [{node_id}] does not wrap a conviction.")
        return self._convictions_by_id[node.record_id]

    def operation_for_node(self, node_id: str) -> ConsolidationOperation:
        node = self.get_node(node_id)
        if not node.is_virtual:
            raise ValueError(f"Node [{node_id}] does not wrap a consolidation.")
        return self._operations_by_id[node.record_id]

    # Ownership

    def is_consumed(self, node_id: str) -> bool:
        return node_id in self.consumed_by

    def consuming_operation(self, node_id: str) -> Optional[ConsolidationOperation]:
        """Returns the operation that absorbed the given node, if any."""
        operation_id = self.consumed_by.get(node_id)
        if operation_id is None:
            return None
        return self._operations_by_id[operation_id]

    def root_node_ids(self) -> List[str]:
        """Returns the ids of all nodes not absorbed by any operation, in node
        insertion order."""
        return [
            node_id for node_id in self.nodes_by_id if node_id not in self.consumed_by
        ]

    def available_node_ids(self) -> List[str]:
        """Returns the ids of the nodes that may still be consolidated by a new
        operation. A node can be consumed at most once, so these are the roots."""
        return self.root_node_ids()

    def governing_root_node_id(self, node_id: str) -> str:
        """Returns the id of the root node that represents the given node: the node
        itself if it is a root, otherwise the root at the end of its chain of
        consolidations."""
        current_node_id = self.get_node(node_id).node_id
        while current_node_id in self.consumed_by:
            current_node_id = virtual_node_id(self.consumed_by[current_node_id])
        return current_node_id

    def chain_role(self, node_id: str) -> ChainRole:
        node = self.get_node(node_id)
        operation = self.consuming_operation(node_id)
        if operation is None:
            return (
                ChainRole.STANDALONE if node.is_base else ChainRole.CONSOLIDATION_RESULT
            )
        if operation.primary_node_id == node_id:
            return ChainRole.PRIMARY_ABSORBED
        return ChainRole.ABSORBED

    # Traversal

    def underlying_convictions(self, node_id: str) -> List[Conviction]:
        """Returns the convictions underlying the given node. For a BASE node this is
        its own conviction; for a VIRTUAL node, the underlying convictions of each
        child, concatenated in declared child order."""
        node = self.get_node(node_id)
        if node.is_base:
            return [self._convictions_by_id[node.record_id]]

        convictions: List[Conviction] = []
        for child_node_id in self._operations_by_id[node.record_id].child_node_ids:
            convictions.extend(self.underlying_convictions(child_node_id))
        return convictions

    def underlying_offences(self, node_id: str) -> List[Offence]:
        return [
            offence
            for conviction in self.underlying_convictions(node_id)
            for offence in conviction.offences
        ]

    def max_category(self, node_id: str) -> OffenceCategory:
        """The most severe category among all offences underlying the node."""
        return most_severe_category(
            [offence.category for offence in self.underlying_offences(node_id)]
        )

    def is_pre_2013(self, node_id: str) -> bool:
        return any(
            conviction.pre_2013 for conviction in self.underlying_convictions(node_id)
        )

    def node_label(self, node_id: str) -> str:
        """Returns a human-readable label for the node, e.g.
        "Conviction #2 of 2015-04-01" or
        "Consolidated (part 5 of art. 69 CC RF), primary: Conviction #2 of 2015-04-01".
        """
        node = self.get_node(node_id)
        if node.is_base:
            conviction_number = (
                [c.conviction_id for c in self.convictions].index(node.record_id) + 1
            )
            verdict_date = format_opt_date(node.verdict_date)
            date_str = f" of {verdict_date}" if verdict_date else ""
            return f"Conviction #{conviction_number}{date_str}"

        operation = self._operations_by_id[node.record_id]
        return (
            f"Consolidated ({operation.legal_basis.citation}), "
            f"primary: {self.node_label(operation.primary_node_id)}"
        )

    # Mutations. Each returns a new graph and leaves this one untouched.

    def with_operation(self, operation: ConsolidationOperation) -> "NodeGraph":
        """Returns a new graph with the given operation added, raising a
        ConsolidationGraphError if the operation is not valid against this graph."""
        return build_node_graph(self.convictions, self.operations + [operation])

    def without_operation(self, operation_id: str) -> "NodeGraph":
        """Returns a new graph without the given operation. An operation whose result
        has been consolidated further cannot be removed until the later operation is
        removed."""
        if operation_id not in self._operations_by_id:
            raise ConsolidationGraphError(
                f"Cannot remove unknown consolidation operation [{operation_id}]."
            )
        result_node_id = virtual_node_id(operation_id)
        if result_node_id in self.consumed_by:
            raise ConsolidationGraphError(
                f"Cannot remove consolidation operation [{operation_id}]: its result "
                f"is consumed by operation [{self.consumed_by[result_node_id]}]."
            )
        return build_node_graph(
            self.convictions,
            [op for op in self.operations if op.operation_id != operation_id],
        )

    def without_conviction(self, conviction_id: str) -> "NodeGraph":
        """Returns a new graph without the given conviction. A conviction referenced
        by a consolidation operation cannot be removed."""
        if conviction_id not in self._convictions_by_id:
            raise ConsolidationGraphError(
                f"Cannot remove unknown conviction [{conviction_id}]."
            )
        node_id = base_node_id(conviction_id)
        if node_id in self.consumed_by:
            raise ConsolidationGraphError(
                f"Cannot remove conviction [{conviction_id}]: it is consumed by "
                f"operation [{self.consumed_by[node_id]}]."
            )
        return build_node_graph(
            [c for c in self.convictions if c.conviction_id != conviction_id],
            self.operations,
        )


def build_node_graph(
    convictions: Iterable[Conviction], operations: Iterable[ConsolidationOperation]
) -> NodeGraph:
    """Builds the consolidation graph for the given convictions and operations.

    Operations may be given in any order: an operation may consume the result of an
    operation that is listed after it. Raises a ConsolidationGraphError if any
    operation is structurally invalid, if a node would be consumed twice, or if the
    operations form a cycle.
    """
    convictions = list(convictions)
    operations = list(operations)

    convictions_by_id: Dict[str, Conviction] = {}
    for conviction in convictions:
        if conviction.conviction_id in convictions_by_id:
            raise ConsolidationGraphError(
                f"Found duplicate conviction id [{conviction.conviction_id}]."
            )
        convictions_by_id[conviction.conviction_id] = conviction

    operations_by_id: Dict[str, ConsolidationOperation] = {}
    for operation in operations:
        if operation.operation_id in operations_by_id:
            raise ConsolidationGraphError(
                f"Found duplicate consolidation operation id "
                f"[{operation.operation_id}]."
            )
        operations_by_id[operation.operation_id] = operation

    known_node_ids: Set[str] = {base_node_id(c_id) for c_id in convictions_by_id}
    known_node_ids.update(virtual_node_id(op_id) for op_id in operations_by_id)

    consumed_by: Dict[str, str] = {}
    for operation in operations:
        _validate_operation(operation, known_node_ids)
        for child_node_id in operation.child_node_ids:
            if child_node_id in consumed_by:
                raise ConsolidationGraphError(
                    f"Node [{child_node_id}] cannot be consolidated by operation "
                    f"[{operation.operation_id}]: it is already consumed by operation "
                    f"[{consumed_by[child_node_id]}]."
                )
            consumed_by[child_node_id] = operation.operation_id

    _check_acyclic(operations_by_id)

    nodes_by_id: Dict[str, Node] = {}
    for conviction in convictions:
        node_id = base_node_id(conviction.conviction_id)
        nodes_by_id[node_id] = Node(
            node_id=node_id,
            node_type=NodeType.BASE,
            record_id=conviction.conviction_id,
            verdict_date=conviction.verdict_date,
        )
    for operation in operations:
        node_id = virtual_node_id(operation.operation_id)
        nodes_by_id[node_id] = Node(
            node_id=node_id,
            node_type=NodeType.VIRTUAL,
            record_id=operation.operation_id,
            verdict_date=_resolve_verdict_date(
                node_id, convictions_by_id, operations_by_id
            ),
        )

    logging.debug(
        "Built consolidation graph with [%s] nodes, [%s] of which are consumed.",
        len(nodes_by_id),
        len(consumed_by),
    )

    return NodeGraph(
        convictions=convictions,
        operations=operations,
        nodes_by_id=nodes_by_id,
        consumed_by=consumed_by,
        convictions_by_id=convictions_by_id,
        operations_by_id=operations_by_id,
    )


def _validate_operation(
    operation: ConsolidationOperation, known_node_ids: Set[str]
) -> None:
    """Checks the structure of a single operation against the set of existing
    node ids."""
    operation_id = operation.operation_id
    child_node_ids = operation.child_node_ids

    if len(set(child_node_ids)) != len(child_node_ids):
        raise ConsolidationGraphError(
            f"Consolidation operation [{operation_id}] lists the same child more than "
            f"once: {child_node_ids}."
        )
    if len(child_node_ids) < MIN_CONSOLIDATION_CHILDREN:
        raise ConsolidationGraphError(
            f"Consolidation operation [{operation_id}] must consolidate at least "
            f"{MIN_CONSOLIDATION_CHILDREN} nodes, found {len(child_node_ids)}."
        )
    if operation.primary_node_id not in child_node_ids:
        raise ConsolidationGraphError(
            f"Primary node [{operation.primary_node_id}] of consolidation operation "
            f"[{operation_id}] is not one of its children: {child_node_ids}."
        )
    for child_node_id in child_node_ids:
        if child_node_id == virtual_node_id(operation_id):
            raise ConsolidationGraphError(
                f"Consolidation operation [{operation_id}] cannot consume its own "
                f"result."
            )
        if child_node_id not in known_node_ids:
            raise ConsolidationGraphError(
                f"Consolidation operation [{operation_id}] references unknown node "
                f"[{child_node_id}]."
            )


def _check_acyclic(operations_by_id: Dict[str, ConsolidationOperation]) -> None:
    """Raises if following operation results into the operations that consume them
    ever leads back to the starting operation."""
    visiting: Set[str] = set()
    visited: Set[str] = set()

    def _visit(operation_id: str, path: List[str]) -> None:
        if operation_id in visited:
            return
        if operation_id in visiting:
            cycle = path[path.index(operation_id) :] + [operation_id]
            raise ConsolidationGraphError(
                f"Consolidation operations form a cycle: {' -> '.join(cycle)}."
            )
        visiting.add(operation_id)
        for child_node_id in operations_by_id[operation_id].child_node_ids:
            if child_node_id.startswith(VIRTUAL_NODE_ID_PREFIX):
                child_operation_id = child_node_id[len(VIRTUAL_NODE_ID_PREFIX) :]
                _visit(child_operation_id, path + [operation_id])
        visiting.remove(operation_id)
        visited.add(operation_id)

    for operation_id in operations_by_id:
        _visit(operation_id, [])


def _resolve_verdict_date(
    node_id: str,
    convictions_by_id: Dict[str, Conviction],
    operations_by_id: Dict[str, ConsolidationOperation],
) -> Optional[datetime.date]:
    """Follows primary children down to a conviction and returns its verdict date.
    Only called once the graph is known to be acyclic."""
    while node_id.startswith(VIRTUAL_NODE_ID_PREFIX):
        operation_id = node_id[len(VIRTUAL_NODE_ID_PREFIX) :]
        node_id = operations_by_id[operation_id].primary_node_id
    return convictions_by_id[node_id[len(BASE_NODE_ID_PREFIX) :]].verdict_date
