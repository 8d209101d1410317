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
"""Python representations of the records a recidivism assessment is computed from:
offences, punishments, prior convictions and the consolidation operations that merge
several sentences into one.

All records are immutable. Calculations derive everything else (nodes, expungement
dates, eligibility) from these records and never modify them.
"""
import datetime
from typing import List, Optional

import attr

from recidivcalc.common import attr_validators
from recidivcalc.common.constants.consolidation import ConsolidationBasis
from recidivcalc.common.constants.offence import MensRea, OffenceCategory
from recidivcalc.common.constants.punishment import PunishmentType
from recidivcalc.common.date import later_of


@attr.s(frozen=True, kw_only=True)
class ArticleReference:
    """A reference to an article of the criminal code, optionally narrowed to a part
    and a point of that part."""

    article_id: str = attr.ib(validator=attr_validators.is_non_empty_str)
    part: Optional[str] = attr.ib(default=None, validator=attr_validators.is_opt_str)
    point: Optional[str] = attr.ib(default=None, validator=attr_validators.is_opt_str)

    def __str__(self) -> str:
        part = f" part {self.part}" if self.part else ""
        point = f" point {self.point}" if self.point else ""
        return f"art. {self.article_id}{part}{point}"


@attr.s(frozen=True, kw_only=True)
class Offence:
    """A single offence, either one of the offences of a prior conviction or a new
    offence whose recidivism is being assessed."""

    offence_id: str = attr.ib(validator=attr_validators.is_non_empty_str)

    # The date the offence was committed. Required for new offences.
    offence_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    article_reference: Optional[ArticleReference] = attr.ib(
        default=None, validator=attr_validators.is_opt(ArticleReference)
    )

    category: OffenceCategory = attr.ib(
        default=OffenceCategory.MEDIUM,
        validator=attr.validators.instance_of(OffenceCategory),
    )

    mens_rea: MensRea = attr.ib(
        default=MensRea.INTENTIONAL, validator=attr.validators.instance_of(MensRea)
    )

    # Whether the offence was committed before the age of 18.
    juvenile: bool = attr.ib(default=False, validator=attr_validators.is_bool)

    @property
    def is_intentional(self) -> bool:
        return self.mens_rea == MensRea.INTENTIONAL


@attr.s(frozen=True, kw_only=True)
class Punishment:
    """The punishment imposed by a conviction, or the merged punishment imposed by a
    consolidation of sentences."""

    main_kind: PunishmentType = attr.ib(
        default=PunishmentType.IMPRISONMENT,
        validator=attr.validators.instance_of(PunishmentType),
    )

    # Whether the main punishment was actually served, as opposed to suspended.
    main_actually_served: bool = attr.ib(
        default=True, validator=attr_validators.is_bool
    )

    main_suspended: bool = attr.ib(default=False, validator=attr_validators.is_bool)
    suspension_cancelled_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    deferment: bool = attr.ib(default=False, validator=attr_validators.is_bool)
    deferment_cancelled_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    # Date of release on parole, which ends the main punishment early.
    parole_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )
    main_served_through_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    additional_kind: Optional[PunishmentType] = attr.ib(
        default=None, validator=attr_validators.is_opt(PunishmentType)
    )
    additional_served_through_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    @property
    def served_through_date(self) -> Optional[datetime.date]:
        """The date the punishment was fully served: the parole date if the person
        was paroled, otherwise the end of the main punishment, pushed back by an
        additional punishment that ended later. None if the main punishment end is
        unknown."""
        main_end_date = self.parole_date or self.main_served_through_date
        if main_end_date is None:
            return None
        return later_of(main_end_date, self.additional_served_through_date)

    @property
    def suspension_cancelled(self) -> bool:
        return self.main_suspended and self.suspension_cancelled_date is not None

    @property
    def deferment_cancelled(self) -> bool:
        return self.deferment and self.deferment_cancelled_date is not None

    @property
    def is_real_imprisonment(self) -> bool:
        """Whether the person was actually deprived of liberty: an imprisonment
        that was served, or a suspended imprisonment whose suspension was
        cancelled."""
        if not self.main_kind.is_imprisonment:
            return False
        if self.main_suspended:
            return self.suspension_cancelled
        return self.main_actually_served


@attr.s(frozen=True, kw_only=True)
class Conviction:
    """A prior conviction: one verdict covering one or more offences and imposing a
    single punishment."""

    conviction_id: str = attr.ib(validator=attr_validators.is_non_empty_str)

    verdict_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )
    # The date the verdict entered into legal force.
    effective_date: Optional[datetime.date] = attr.ib(
        default=None, validator=attr_validators.is_opt_date
    )

    # Offences committed before the December 2013 amendment are subject to shorter
    # expungement terms for serious and especially serious offences.
    pre_2013: bool = attr.ib(default=False, validator=attr_validators.is_bool)

    offences: List[Offence] = attr.ib(
        factory=list, validator=attr_validators.is_non_empty_list_of(Offence)
    )

    punishment: Punishment = attr.ib(
        factory=Punishment, validator=attr.validators.instance_of(Punishment)
    )


@attr.s(frozen=True, kw_only=True)
class ConsolidationOperation:
    """Merges the sentences of two or more nodes (convictions or the results of
    earlier consolidations) into one controlling sentence.

    The structural invariants of an operation (number of children, membership of the
    primary node, references to existing nodes) are checked when the consolidation
    graph is built.
    """

    operation_id: str = attr.ib(validator=attr_validators.is_non_empty_str)

    legal_basis: ConsolidationBasis = attr.ib(
        validator=attr.validators.instance_of(ConsolidationBasis)
    )

    # Ids of the consolidated nodes, in declared order.
    child_node_ids: List[str] = attr.ib(validator=attr_validators.is_list_of(str))

    # The node whose verdict the consolidated sentence is attached to.
    primary_node_id: str = attr.ib(validator=attr_validators.is_non_empty_str)

    merged_punishment: Punishment = attr.ib(
        factory=Punishment, validator=attr.validators.instance_of(Punishment)
    )
