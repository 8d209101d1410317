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
"""Loads the records of a single person's case from a YAML case file.

A case file looks like:

    birth_date: 1970-01-01
    new_offences:
      - offence_id: new-1
        offence_date: 2026-01-01
        article: {article_id: "228.1", part: "3", point: б}
        category: ESPECIALLY_SERIOUS
        mens_rea: INTENTIONAL
    convictions:
      - conviction_id: conv-1
        verdict_date: 2015-01-01
        effective_date: 2015-02-01
        pre_2013: false
        offences:
          - offence_id: conv-1-offence-1
            category: SERIOUS
        punishment:
          main_kind: IMPRISONMENT
          main_served_through_date: 2018-01-01
    consolidation_operations:
      - operation_id: op-1
        legal_basis: CUMULATIVE
        child_node_ids: [conviction:conv-1, conviction:conv-2]
        primary_node_id: conviction:conv-1
        merged_punishment: {...}

Enum fields take the enum values. Omitted optional fields take the defaults of the
corresponding entities, except that an offence's `juvenile` flag is derived from
`birth_date` and the offence date when it is omitted.
"""
import datetime
import logging
from enum import Enum
from typing import List, Optional, Type, TypeVar

import attr

from recidivcalc.calculator.consolidation.node_graph import build_node_graph
from recidivcalc.common.constants.consolidation import ConsolidationBasis
from recidivcalc.common.constants.offence import MensRea, OffenceCategory
from recidivcalc.common.constants.punishment import PunishmentType
from recidivcalc.common.criminal_code import (
    CriminalCodeCatalogue,
    get_criminal_code_catalogue,
)
from recidivcalc.common.date import age_on_date
from recidivcalc.models.entities import (
    ArticleReference,
    ConsolidationOperation,
    Conviction,
    Offence,
    Punishment,
)
from recidivcalc.utils.yaml_dict import YAMLDict

EnumT = TypeVar("EnumT", bound=Enum)

AGE_OF_MAJORITY = 18


class CaseFileError(ValueError):
    """Raised when a case file cannot be parsed into valid records."""


@attr.s(frozen=True, kw_only=True)
class CaseFile:
    """All records of one person's case."""

    birth_date: Optional[datetime.date] = attr.ib(default=None)
    new_offences: List[Offence] = attr.ib(factory=list)
    convictions: List[Conviction] = attr.ib(factory=list)
    operations: List[ConsolidationOperation] = attr.ib(factory=list)


def load_case_file(
    case_file_path: str, validate_article_references: bool = True
) -> CaseFile:
    """Loads and validates the case file at the given path.

    Raises a CaseFileError if the file is malformed, if an article reference names a
    part or point that a catalogued article does not have (when
    |validate_article_references| is set), or if the consolidation operations do not
    form a valid consolidation graph.
    """
    try:
        case_yaml = YAMLDict.from_path(case_file_path)
    except (OSError, ValueError) as e:
        raise CaseFileError(f"Could not read case file [{case_file_path}]: {e}") from e

    catalogue = get_criminal_code_catalogue() if validate_article_references else None
    case_file = parse_case_file(case_yaml, catalogue)

    logging.info(
        "Loaded case file [%s] with [%s] new offence(s), [%s] conviction(s) and [%s] "
        "consolidation operation(s).",
        case_file_path,
        len(case_file.new_offences),
        len(case_file.convictions),
        len(case_file.operations),
    )
    return case_file


def parse_case_file(
    case_yaml: YAMLDict, catalogue: Optional[CriminalCodeCatalogue] = None
) -> CaseFile:
    """Parses the records of a case from an already loaded YAML dictionary. Article
    references are validated against |catalogue| if one is provided."""
    try:
        birth_date = case_yaml.pop_date_optional("birth_date")
        new_offences = [
            _parse_offence(offence_yaml, birth_date, catalogue)
            for offence_yaml in case_yaml.pop_dicts_optional("new_offences")
        ]
        convictions = [
            _parse_conviction(conviction_yaml, birth_date, catalogue)
            for conviction_yaml in case_yaml.pop_dicts_optional("convictions")
        ]
        operations = [
            _parse_operation(operation_yaml)
            for operation_yaml in case_yaml.pop_dicts_optional(
                "consolidation_operations"
            )
        ]
        case_yaml.assert_fully_read("case file")

        # Surfaces structural problems with the operations at load time.
        build_node_graph(convictions, operations)
    except (KeyError, TypeError, ValueError) as e:
        raise CaseFileError(f"Invalid case file: {e}") from e

    for offence in new_offences:
        if offence.offence_date is None:
            raise CaseFileError(
                f"New offence [{offence.offence_id}] must have an offence_date."
            )

    return CaseFile(
        birth_date=birth_date,
        new_offences=new_offences,
        convictions=convictions,
        operations=operations,
    )


def _parse_enum(raw_value: str, enum_cls: Type[EnumT], field: str) -> EnumT:
    try:
        return enum_cls(raw_value.upper())
    except ValueError as e:
        raise ValueError(
            f"Invalid value [{raw_value}] for field [{field}]; expected one of "
            f"{[member.value for member in enum_cls]}."
        ) from e


def _parse_opt_enum(
    raw_value: Optional[str], enum_cls: Type[EnumT], field: str, default: EnumT
) -> EnumT:
    if raw_value is None:
        return default
    return _parse_enum(raw_value, enum_cls, field)


def _parse_article_reference(
    article_yaml: Optional[YAMLDict], catalogue: Optional[CriminalCodeCatalogue]
) -> Optional[ArticleReference]:
    if article_yaml is None:
        return None
    # Article ids and parts such as 228.1 or 2 are read by YAML as numbers.
    article_id = article_yaml.pop("article_id", (str, int, float))
    part = article_yaml.pop_optional("part", (str, int, float))
    point = article_yaml.pop_optional("point", str)
    article_yaml.assert_fully_read("article reference")

    reference = ArticleReference(
        article_id=str(article_id),
        part=str(part) if part is not None else None,
        point=point,
    )
    if catalogue is not None:
        catalogue.validate_article_reference(reference)
    return reference


def _is_juvenile_offence(
    birth_date: Optional[datetime.date], offence_date: Optional[datetime.date]
) -> bool:
    if birth_date is None or offence_date is None:
        return False
    return age_on_date(birth_date, offence_date) < AGE_OF_MAJORITY


def _parse_offence(
    offence_yaml: YAMLDict,
    birth_date: Optional[datetime.date],
    catalogue: Optional[CriminalCodeCatalogue],
) -> Offence:
    offence_id = offence_yaml.pop("offence_id", str)
    offence_date = offence_yaml.pop_date_optional("offence_date")
    article_reference = _parse_article_reference(
        offence_yaml.pop_dict_optional("article"), catalogue
    )
    category = _parse_opt_enum(
        offence_yaml.pop_optional("category", str),
        OffenceCategory,
        "category",
        default=OffenceCategory.MEDIUM,
    )
    mens_rea = _parse_opt_enum(
        offence_yaml.pop_optional("mens_rea", str),
        MensRea,
        "mens_rea",
        default=MensRea.INTENTIONAL,
    )
    juvenile = offence_yaml.pop_optional("juvenile", bool)
    if juvenile is None:
        juvenile = _is_juvenile_offence(birth_date, offence_date)
    offence_yaml.assert_fully_read(f"offence [{offence_id}]")

    return Offence(
        offence_id=offence_id,
        offence_date=offence_date,
        article_reference=article_reference,
        category=category,
        mens_rea=mens_rea,
        juvenile=juvenile,
    )


def _parse_punishment(punishment_yaml: Optional[YAMLDict]) -> Punishment:
    if punishment_yaml is None:
        return Punishment()

    main_kind = _parse_opt_enum(
        punishment_yaml.pop_optional("main_kind", str),
        PunishmentType,
        "main_kind",
        default=PunishmentType.IMPRISONMENT,
    )
    raw_additional_kind = punishment_yaml.pop_optional("additional_kind", str)
    additional_kind = (
        _parse_enum(raw_additional_kind, PunishmentType, "additional_kind")
        if raw_additional_kind
        else None
    )
    if additional_kind is not None and not additional_kind.can_be_additional:
        raise ValueError(
            f"Punishment [{additional_kind.value}] cannot be imposed as an additional "
            f"punishment."
        )
    punishment = Punishment(
        main_kind=main_kind,
        main_actually_served=punishment_yaml.pop_bool_optional(
            "main_actually_served", default=True
        ),
        main_suspended=punishment_yaml.pop_bool_optional(
            "main_suspended", default=False
        ),
        suspension_cancelled_date=punishment_yaml.pop_date_optional(
            "suspension_cancelled_date"
        ),
        deferment=punishment_yaml.pop_bool_optional("deferment", default=False),
        deferment_cancelled_date=punishment_yaml.pop_date_optional(
            "deferment_cancelled_date"
        ),
        parole_date=punishment_yaml.pop_date_optional("parole_date"),
        main_served_through_date=punishment_yaml.pop_date_optional(
            "main_served_through_date"
        ),
        additional_kind=additional_kind,
        additional_served_through_date=punishment_yaml.pop_date_optional(
            "additional_served_through_date"
        ),
    )
    punishment_yaml.assert_fully_read("punishment")
    return punishment


def _parse_conviction(
    conviction_yaml: YAMLDict,
    birth_date: Optional[datetime.date],
    catalogue: Optional[CriminalCodeCatalogue],
) -> Conviction:
    conviction_id = conviction_yaml.pop("conviction_id", str)
    conviction = Conviction(
        conviction_id=conviction_id,
        verdict_date=conviction_yaml.pop_date_optional("verdict_date"),
        effective_date=conviction_yaml.pop_date_optional("effective_date"),
        pre_2013=conviction_yaml.pop_bool_optional("pre_2013", default=False),
        offences=[
            _parse_offence(offence_yaml, birth_date, catalogue)
            for offence_yaml in conviction_yaml.pop_dicts("offences")
        ],
        punishment=_parse_punishment(conviction_yaml.pop_dict_optional("punishment")),
    )
    conviction_yaml.assert_fully_read(f"conviction [{conviction_id}]")
    return conviction


def _parse_operation(operation_yaml: YAMLDict) -> ConsolidationOperation:
    operation_id = operation_yaml.pop("operation_id", str)
    operation = ConsolidationOperation(
        operation_id=operation_id,
        legal_basis=_parse_enum(
            operation_yaml.pop("legal_basis", str), ConsolidationBasis, "legal_basis"
        ),
        child_node_ids=operation_yaml.pop_list("child_node_ids", str),
        primary_node_id=operation_yaml.pop("primary_node_id", str),
        merged_punishment=_parse_punishment(
            operation_yaml.pop_dict_optional("merged_punishment")
        ),
    )
    operation_yaml.assert_fully_read(f"consolidation operation [{operation_id}]")
    return operation
