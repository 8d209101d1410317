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
"""Calculates the date on which a conviction record is expunged (art. 86 CC RF).

The term runs from the date the punishment was served and depends on whether any
offence was committed as a juvenile, whether the sentence was suspended, the kind of
the main punishment and the gravity of the most severe underlying offence.
"""
import datetime
import logging
from typing import List, Optional

import attr

from recidivcalc.calculator.consolidation.effective_punishment import (
    ExpungementDateSource,
    expungement_date_inputs,
)
from recidivcalc.calculator.consolidation.node_graph import NodeGraph
from recidivcalc.common.constants.offence import OffenceCategory
from recidivcalc.common.date import add_months, add_years
from recidivcalc.models.entities import Offence, Punishment

# Expungement terms for offences committed as a juvenile.
JUVENILE_NON_IMPRISONMENT_TERM_MONTHS = 6
JUVENILE_SERIOUS_IMPRISONMENT_TERM_YEARS = 3
JUVENILE_IMPRISONMENT_TERM_YEARS = 1

NON_IMPRISONMENT_TERM_YEARS = 1

# Imprisonment terms by category, for offences committed after / before the
# December 2013 amendment.
_IMPRISONMENT_TERM_YEARS = {
    OffenceCategory.MINOR: 3,
    OffenceCategory.MEDIUM: 3,
    OffenceCategory.SERIOUS: 8,
    OffenceCategory.ESPECIALLY_SERIOUS: 10,
}
_PRE_2013_IMPRISONMENT_TERM_YEARS = {
    OffenceCategory.MINOR: 3,
    OffenceCategory.MEDIUM: 3,
    OffenceCategory.SERIOUS: 6,
    OffenceCategory.ESPECIALLY_SERIOUS: 8,
}


@attr.s(frozen=True, kw_only=True)
class NodeExpungement:
    """The expungement date of a single node of the consolidation graph."""

    node_id: str = attr.ib()

    # None if the date is undetermined or the node has no date of its own.
    expungement_date: Optional[datetime.date] = attr.ib()

    source: ExpungementDateSource = attr.ib()

    @property
    def is_undetermined(self) -> bool:
        """True if the node should have a date of its own but the data needed to
        compute it is missing."""
        return (
            self.expungement_date is None
            and self.source != ExpungementDateSource.GOVERNING_CONSOLIDATION
        )


def imprisonment_term_years(category: OffenceCategory, pre_2013: bool) -> int:
    if pre_2013:
        return _PRE_2013_IMPRISONMENT_TERM_YEARS[category]
    return _IMPRISONMENT_TERM_YEARS[category]


def calculate_expungement_date(
    punishment: Punishment,
    offences: List[Offence],
    max_category: OffenceCategory,
    pre_2013: bool,
) -> Optional[datetime.date]:
    """Returns the expungement date for a punishment imposed for the given offences,
    or None if the punishment has no served-through date.

    The first matching rule wins:
      1. Juvenile offences: 6 months after a non-imprisonment punishment, 3 years
         after imprisonment for a serious or especially serious offence, 1 year
         after any other imprisonment.
      2. Suspended sentence: expunged once the probation period has been served.
      3. Non-imprisonment punishment: 1 year.
      4. Imprisonment: 3, 8 or 10 years by category (6 and 8 years for serious and
         especially serious offences committed before 2013).
    """
    served_date = punishment.served_through_date
    if served_date is None:
        return None

    is_imprisonment = punishment.main_kind.is_imprisonment

    if any(offence.juvenile for offence in offences):
        if not is_imprisonment:
            return add_months(served_date, JUVENILE_NON_IMPRISONMENT_TERM_MONTHS)
        if max_category.is_serious_or_above:
            return add_years(served_date, JUVENILE_SERIOUS_IMPRISONMENT_TERM_YEARS)
        return add_years(served_date, JUVENILE_IMPRISONMENT_TERM_YEARS)

    if punishment.main_suspended:
        return served_date

    if not is_imprisonment:
        return add_years(served_date, NON_IMPRISONMENT_TERM_YEARS)

    return add_years(served_date, imprisonment_term_years(max_category, pre_2013))


def calculate_node_expungement(graph: NodeGraph, node_id: str) -> NodeExpungement:
    """Calculates the expungement date of any node in the graph, including nodes
    absorbed by later consolidations."""
    inputs = expungement_date_inputs(graph, node_id)

    if inputs.punishment is None:
        return NodeExpungement(
            node_id=node_id, expungement_date=None, source=inputs.source
        )

    expungement_date = calculate_expungement_date(
        punishment=inputs.punishment,
        offences=graph.underlying_offences(inputs.term_node_id),
        max_category=graph.max_category(inputs.term_node_id),
        pre_2013=graph.is_pre_2013(inputs.term_node_id),
    )

    if expungement_date is None:
        # Consumed nodes are reported through their governing root node.
        log = logging.debug if graph.is_consumed(node_id) else logging.warning
        log(
            "Could not determine expungement date for node [%s]: no served-through "
            "date on the governing punishment.",
            node_id,
        )

    return NodeExpungement(
        node_id=node_id, expungement_date=expungement_date, source=inputs.source
    )
