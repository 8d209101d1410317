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
"""Tests for eligibility.py"""
import datetime
import unittest
from typing import Optional

from parameterized import parameterized

from recidivcalc.calculator.consolidation.node_graph import build_node_graph
from recidivcalc.calculator.recidivism.eligibility import (
    check_node_eligibility,
    is_record_active,
)
from recidivcalc.common.constants.consolidation import ConsolidationBasis
from recidivcalc.common.constants.offence import MensRea, OffenceCategory
from recidivcalc.common.constants.recidivism import EligibilityReason
from recidivcalc.models.entities import Offence, Punishment
from recidivcalc.tests.calculator.calculator_test_utils import (
    chain_graph,
    make_conviction,
    make_imprisonment,
    make_offence,
    make_operation,
)

_NEW_OFFENCE_DATE = datetime.date(2020, 1, 1)


class TestIsRecordActive(unittest.TestCase):
    """Tests for is_record_active"""

    def test_is_record_active(self) -> None:
        self.assertTrue(
            is_record_active(datetime.date(2020, 1, 2), datetime.date(2020, 1, 1))
        )
        self.assertFalse(
            is_record_active(datetime.date(2020, 1, 1), datetime.date(2020, 1, 1))
        )
        self.assertFalse(
            is_record_active(datetime.date(2019, 12, 31), datetime.date(2020, 1, 1))
        )

    def test_undetermined_dates_are_active(self) -> None:
        self.assertTrue(is_record_active(None, datetime.date(2020, 1, 1)))
        self.assertTrue(is_record_active(datetime.date(2020, 1, 1), None))


class TestCheckNodeEligibility(unittest.TestCase):
    """Tests for check_node_eligibility"""

    def test_accepted(self) -> None:
        graph = build_node_graph(
            [make_conviction("x", category=OffenceCategory.SERIOUS)], []
        )
        eligibility = check_node_eligibility(graph, "conviction:x", _NEW_OFFENCE_DATE)

        self.assertTrue(eligibility.eligible)
        self.assertEqual(EligibilityReason.ACCEPTED, eligibility.reason)
        self.assertTrue(eligibility.is_active)
        self.assertFalse(eligibility.requires_review)
        self.assertEqual(
            datetime.date(2023, 1, 1), eligibility.expungement.expungement_date
        )

    def test_expunged(self) -> None:
        graph = build_node_graph([make_conviction("x")], [])
        eligibility = check_node_eligibility(
            graph, "conviction:x", datetime.date(2018, 1, 1)
        )

        self.assertFalse(eligibility.eligible)
        self.assertEqual(EligibilityReason.EXPUNGED, eligibility.reason)
        self.assertFalse(eligibility.is_active)

    @parameterized.expand(
        [
            (
                "juvenile",
                make_offence("o", juvenile=True, mens_rea=MensRea.NEGLIGENT),
                EligibilityReason.JUVENILE,
            ),
            (
                "negligent",
                make_offence(
                    "o", mens_rea=MensRea.NEGLIGENT, category=OffenceCategory.MINOR
                ),
                EligibilityReason.NEGLIGENT,
            ),
            (
                "minor",
                make_offence("o", category=OffenceCategory.MINOR),
                EligibilityReason.MINOR_CATEGORY,
            ),
        ]
    )
    def test_rejected_offence(
        self, _name: str, offence: Offence, expected_reason: EligibilityReason
    ) -> None:
        graph = build_node_graph(
            [
                make_conviction(
                    "x",
                    offences=[
                        make_offence("serious", category=OffenceCategory.SERIOUS),
                        offence,
                    ],
                    punishment=make_imprisonment(datetime.date(2019, 1, 1)),
                )
            ],
            [],
        )
        eligibility = check_node_eligibility(graph, "conviction:x", _NEW_OFFENCE_DATE)

        self.assertFalse(eligibility.eligible)
        self.assertEqual(expected_reason, eligibility.reason)
        self.assertTrue(eligibility.is_active)

    @parameterized.expand(
        [
            ("before_served", datetime.date(2020, 1, 1)),
            ("on_served", datetime.date(2021, 1, 1)),
            ("after_served", datetime.date(2030, 1, 1)),
            ("no_date", None),
        ]
    )
    def test_suspended_not_cancelled(
        self, _name: str, new_offence_date: Optional[datetime.date]
    ) -> None:
        for category in OffenceCategory:
            if category == OffenceCategory.MINOR:
                continue
            graph = build_node_graph(
                [
                    make_conviction(
                        "x",
                        category=category,
                        punishment=make_imprisonment(
                            datetime.date(2021, 1, 1), main_suspended=True
                        ),
                    )
                ],
                [],
            )
            eligibility = check_node_eligibility(
                graph, "conviction:x", new_offence_date
            )
            self.assertFalse(eligibility.eligible)
            if eligibility.is_active:
                self.assertEqual(
                    EligibilityReason.SUSPENSION_NOT_CANCELLED, eligibility.reason
                )
            else:
                self.assertEqual(EligibilityReason.EXPUNGED, eligibility.reason)
            self.assertEqual(
                new_offence_date is None
                or new_offence_date < datetime.date(2021, 1, 1),
                eligibility.is_active,
            )

    def test_suspension_cancelled(self) -> None:
        graph = build_node_graph(
            [
                make_conviction(
                    "x",
                    punishment=make_imprisonment(
                        datetime.date(2021, 1, 1),
                        main_suspended=True,
                        suspension_cancelled_date=datetime.date(2018, 1, 1),
                    ),
                )
            ],
            [],
        )
        eligibility = check_node_eligibility(graph, "conviction:x", _NEW_OFFENCE_DATE)
        self.assertTrue(eligibility.eligible)

    def test_deferment_not_cancelled(self) -> None:
        graph = build_node_graph(
            [
                make_conviction(
                    "x",
                    punishment=make_imprisonment(
                        datetime.date(2019, 1, 1), deferment=True
                    ),
                )
            ],
            [],
        )
        eligibility = check_node_eligibility(graph, "conviction:x", _NEW_OFFENCE_DATE)

        self.assertFalse(eligibility.eligible)
        self.assertEqual(EligibilityReason.DEFERMENT_NOT_CANCELLED, eligibility.reason)

    def test_undetermined_date_requires_review(self) -> None:
        graph = build_node_graph([make_conviction("x", punishment=Punishment())], [])
        with self.assertLogs(level="WARNING"):
            eligibility = check_node_eligibility(
                graph, "conviction:x", _NEW_OFFENCE_DATE
            )

        self.assertTrue(eligibility.eligible)
        self.assertTrue(eligibility.is_active)
        self.assertTrue(eligibility.requires_review)

    def test_consumed_node(self) -> None:
        graph = chain_graph()
        for node_id in ("conviction:1", "conviction:3", "consolidation:B"):
            eligibility = check_node_eligibility(graph, node_id, _NEW_OFFENCE_DATE)
            self.assertFalse(eligibility.eligible)
            self.assertEqual(
                EligibilityReason.MERGED_INTO_CONSOLIDATION, eligibility.reason
            )

    def test_revocation_cancels_absorbed_suspension(self) -> None:
        graph = chain_graph()
        eligibility = check_node_eligibility(
            graph, "consolidation:A", datetime.date(2026, 1, 1)
        )
        self.assertTrue(eligibility.eligible)

    def test_cumulation_keeps_absorbed_suspension(self) -> None:
        graph = build_node_graph(
            [
                make_conviction(
                    "x",
                    punishment=make_imprisonment(
                        datetime.date(2018, 1, 1), main_suspended=True
                    ),
                ),
                make_conviction("y"),
            ],
            [make_operation("op", ["conviction:y", "conviction:x"])],
        )
        eligibility = check_node_eligibility(
            graph, "consolidation:op", _NEW_OFFENCE_DATE
        )

        self.assertFalse(eligibility.eligible)
        self.assertEqual(EligibilityReason.SUSPENSION_NOT_CANCELLED, eligibility.reason)

    @parameterized.expand(
        [
            (
                "suspension_revocation",
                ConsolidationBasis.SUSPENSION_REVOCATION,
                EligibilityReason.DEFERMENT_NOT_CANCELLED,
            ),
            (
                "suspension_and_deferment_revocation",
                ConsolidationBasis.SUSPENSION_AND_DEFERMENT_REVOCATION,
                EligibilityReason.ACCEPTED,
            ),
        ]
    )
    def test_absorbed_deferment(
        self,
        _name: str,
        legal_basis: ConsolidationBasis,
        expected_reason: EligibilityReason,
    ) -> None:
        graph = build_node_graph(
            [
                make_conviction(
                    "x",
                    punishment=make_imprisonment(
                        datetime.date(2018, 1, 1), deferment=True
                    ),
                ),
                make_conviction("y"),
            ],
            [
                make_operation(
                    "op", ["conviction:y", "conviction:x"], legal_basis=legal_basis
                )
            ],
        )
        eligibility = check_node_eligibility(
            graph, "consolidation:op", _NEW_OFFENCE_DATE
        )
        self.assertEqual(expected_reason, eligibility.reason)
