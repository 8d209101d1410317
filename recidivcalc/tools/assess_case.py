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
"""Assesses the recidivism of every new offence in a YAML case file and reports the
classification along with how each prior conviction and consolidation was treated.

Run with the following command:

    python -m recidivcalc.tools.assess_case \
     --case_file_path [PATH_TO_CASE_FILE] \
     [--skip_article_validation true] \
     [--output_json true]
"""
import argparse
import json
import logging
import sys
from typing import List, Tuple

from recidivcalc.calculator.recidivism.assessment import RecidivismAssessment
from recidivcalc.calculator.recidivism.identifier import assess_new_offences
from recidivcalc.common.case_file import load_case_file
from recidivcalc.common.date import format_opt_date
from recidivcalc.common.serialization import attr_to_json_dict
from recidivcalc.utils.params import str_to_bool


def parse_arguments(argv: List[str]) -> Tuple[argparse.Namespace, List[str]]:
    """Parses the arguments needed to call the desired function."""
    parser = argparse.ArgumentParser()

    parser.add_argument(
        "--case_file_path",
        dest="case_file_path",
        type=str,
        required=True,
    )

    parser.add_argument(
        "--skip_article_validation",
        dest="skip_article_validation",
        type=str_to_bool,
        default=False,
    )

    parser.add_argument(
        "--output_json",
        dest="output_json",
        type=str_to_bool,
        default=False,
    )

    return parser.parse_known_args(argv)


def format_assessment_report(assessment: RecidivismAssessment) -> str:
    """Renders a human-readable report of a single assessment."""
    new_offence = assessment.new_offence
    lines = [
        f"New offence [{new_offence.offence_id}] of "
        f"{format_opt_date(new_offence.offence_date, default='?')} "
        f"({new_offence.category.value}, {new_offence.mens_rea.value}): "
        f"{assessment.recidivism_type.label}",
        f"  {assessment.justification}",
    ]
    for entry in assessment.audit_entries:
        if not entry.is_root:
            status = f"merged into {entry.governing_root_node_id}"
        elif entry.eligible:
            status = "counted"
        else:
            status = "not counted"
        lines.append(
            f"  - {entry.node_label} [{entry.chain_role.value}]: {status} "
            f"({entry.reason_description}); expungement date: "
            f"{entry.expungement_date_display}"
        )
    if assessment.requires_review:
        lines.append(
            "  Manual review required: an expungement date could not be determined."
        )
    return "\n".join(lines)


def assess_case(
    case_file_path: str, skip_article_validation: bool, output_json: bool
) -> List[RecidivismAssessment]:
    case_file = load_case_file(
        case_file_path, validate_article_references=not skip_article_validation
    )
    assessments = assess_new_offences(
        case_file.new_offences, case_file.convictions, case_file.operations
    )

    if output_json:
        print(
            json.dumps(
                [attr_to_json_dict(assessment) for assessment in assessments],
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        for assessment in assessments:
            logging.info("%s", format_assessment_report(assessment))

    return assessments


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    known_args, _ = parse_arguments(sys.argv)

    assess_case(
        known_args.case_file_path,
        known_args.skip_article_validation,
        known_args.output_json,
    )
