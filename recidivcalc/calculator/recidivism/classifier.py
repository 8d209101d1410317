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
"""Classifies the recidivism of a new offence under art. 18 CC RF, given the prior
conviction nodes that count toward recidivism."""
from typing import List

import attr

from recidivcalc.common.constants.offence import OffenceCategory
from recidivcalc.common.constants.recidivism import (
    ESPECIALLY_SERIOUS_AFTER_SEVERE_JUSTIFICATION,
    NEGLIGENT_NEW_OFFENCE_JUSTIFICATION,
    NO_ELIGIBLE_CONVICTIONS_JUSTIFICATION,
    SERIOUS_AFTER_SEVERE_JUSTIFICATION,
    SIMPLE_RECIDIVISM_JUSTIFICATION,
    TWO_MEDIUM_IMPRISONMENTS_JUSTIFICATION,
    TWO_SERIOUS_IMPRISONMENTS_JUSTIFICATION,
    RecidivismType,
)
from recidivcalc.models.entities import Offence, Punishment


@attr.s(frozen=True, kw_only=True)
class EligiblePrior:
    """One eligible prior conviction node, represented by its most severe offence
    and the punishment that governs it."""

    node_id: str = attr.ib()
    offence: Offence = attr.ib()
    punishment: Punishment = attr.ib()

    @property
    def category(self) -> OffenceCategory:
        return self.offence.category

    @property
    def is_real_imprisonment(self) -> bool:
        return self.punishment.is_real_imprisonment


@attr.s(frozen=True, kw_only=True)
class RecidivismClassification:
    recidivism_type: RecidivismType = attr.ib()
    justification: str = attr.ib()


def classify_recidivism(
    new_offence: Offence, eligible_priors: List[EligiblePrior]
) -> RecidivismClassification:
    """Applies the statutory decision tree to a new offence. The first matching
    branch wins:

      1. A negligent new offence never constitutes recidivism.
      2. Without eligible priors there is no recidivism.
      3. Especially dangerous: a serious new offence after two serious offences
         punished with real imprisonment, or an especially serious new offence after
         two such serious offences or one serious or especially serious offence
         punished with real imprisonment.
      4. Dangerous: a serious new offence after two medium offences and two real
         imprisonments, or after any serious or especially serious offence.
      5. Simple recidivism otherwise.
    """
    if not new_offence.is_intentional:
        return RecidivismClassification(
            recidivism_type=RecidivismType.NO_RECIDIVISM,
            justification=NEGLIGENT_NEW_OFFENCE_JUSTIFICATION,
        )

    if not eligible_priors:
        return RecidivismClassification(
            recidivism_type=RecidivismType.NO_RECIDIVISM,
            justification=NO_ELIGIBLE_CONVICTIONS_JUSTIFICATION,
        )

    severe_priors = [p for p in eligible_priors if p.category.is_serious_or_above]
    medium_priors = [
        p for p in eligible_priors if p.category == OffenceCategory.MEDIUM
    ]
    real_imprisonment_priors = [p for p in eligible_priors if p.is_real_imprisonment]
    heavy_imprisonment_priors = [
        p for p in real_imprisonment_priors if p.category == OffenceCategory.SERIOUS
    ]
    severe_imprisonment_priors = [
        p for p in real_imprisonment_priors if p.category.is_serious_or_above
    ]

    new_category = new_offence.category

    if new_category == OffenceCategory.SERIOUS and len(heavy_imprisonment_priors) >= 2:
        return RecidivismClassification(
            recidivism_type=RecidivismType.ESPECIALLY_DANGEROUS,
            justification=TWO_SERIOUS_IMPRISONMENTS_JUSTIFICATION,
        )

    if new_category == OffenceCategory.ESPECIALLY_SERIOUS and (
        len(heavy_imprisonment_priors) >= 2 or len(severe_imprisonment_priors) >= 1
    ):
        return RecidivismClassification(
            recidivism_type=RecidivismType.ESPECIALLY_DANGEROUS,
            justification=ESPECIALLY_SERIOUS_AFTER_SEVERE_JUSTIFICATION,
        )

    if (
        new_category == OffenceCategory.SERIOUS
        and len(medium_priors) >= 2
        and len(real_imprisonment_priors) >= 2
    ):
        return RecidivismClassification(
            recidivism_type=RecidivismType.DANGEROUS,
            justification=TWO_MEDIUM_IMPRISONMENTS_JUSTIFICATION,
        )

    if new_category == OffenceCategory.SERIOUS and severe_priors:
        return RecidivismClassification(
            recidivism_type=RecidivismType.DANGEROUS,
            justification=SERIOUS_AFTER_SEVERE_JUSTIFICATION,
        )

    return RecidivismClassification(
        recidivism_type=RecidivismType.SIMPLE,
        justification=SIMPLE_RECIDIVISM_JUSTIFICATION,
    )
