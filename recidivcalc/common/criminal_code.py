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
"""
Common utility functions for looking up articles of the criminal code.

The `data_sets/criminal_code_articles.csv` file lists, for each article of the
special part of the criminal code, its title, its parts and the points of each part
(separated by `;`). The catalogue is only used to validate the article references of
offences that are entered by hand. Articles it does not list are accepted
without validation. It plays no part in the recidivism calculation.
"""
import logging
import os
from typing import Dict, List, Optional

import attr
import pandas as pd

from recidivcalc.models.entities import ArticleReference

_CRIMINAL_CODE_ARTICLES_CSV_PATH = os.path.join(
    os.path.dirname(__file__), "data_sets", "criminal_code_articles.csv"
)

_POINTS_SEPARATOR = ";"

_CATALOGUE: Optional["CriminalCodeCatalogue"] = None


class InvalidArticleReferenceError(ValueError):
    """Raised when an offence references an article, part or point that does not
    exist in the criminal code."""


@attr.s(frozen=True, kw_only=True)
class CriminalCodeArticle:
    article_id: str = attr.ib()
    title: str = attr.ib()

    # Parts in numeric order. Empty for articles without parts.
    parts: List[str] = attr.ib(factory=list)

    points_by_part: Dict[str, List[str]] = attr.ib(factory=dict)


def _numeric_sort_key(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return float("inf")


class CriminalCodeCatalogue:
    """Lookup of the articles, parts and points of the criminal code."""

    def __init__(self, articles_df: pd.DataFrame) -> None:
        articles: Dict[str, CriminalCodeArticle] = {}
        for article_id, article_rows in articles_df.groupby("article_id", sort=False):
            points_by_part = {
                row.part: [
                    point.strip()
                    for point in row.points.split(_POINTS_SEPARATOR)
                    if point.strip()
                ]
                for row in article_rows.itertuples()
                if row.part
            }
            articles[article_id] = CriminalCodeArticle(
                article_id=article_id,
                title=article_rows["article_title"].iloc[0],
                parts=sorted(points_by_part, key=_numeric_sort_key),
                points_by_part={
                    part: points for part, points in points_by_part.items() if points
                },
            )
        self._articles_by_id = {
            article_id: articles[article_id]
            for article_id in sorted(articles, key=_numeric_sort_key)
        }

    @classmethod
    def from_csv(cls, csv_path: str) -> "CriminalCodeCatalogue":
        articles_df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        articles_df["article_id"] = articles_df["article_id"].str.lstrip("'")
        return cls(articles_df)

    def article_ids(self) -> List[str]:
        return list(self._articles_by_id)

    def get_article(self, article_id: str) -> Optional[CriminalCodeArticle]:
        return self._articles_by_id.get(article_id)

    def parts_for_article(self, article_id: str) -> List[str]:
        article = self.get_article(article_id)
        return article.parts if article else []

    def points_for_article_part(self, article_id: str, part: str) -> List[str]:
        article = self.get_article(article_id)
        if not article:
            return []
        return article.points_by_part.get(part, [])

    def validate_article_reference(self, reference: ArticleReference) -> None:
        """Throws an InvalidArticleReferenceError if the part of a catalogued article
        or the point of the part does not exist. Articles missing from the catalogue
        are accepted as given, with a warning."""
        article = self.get_article(reference.article_id)
        if article is None:
            logging.warning(
                "Criminal code article [%s] is not in the catalogue; reference [%s] "
                "not validated.",
                reference.article_id,
                reference,
            )
            return
        if reference.part is None:
            if reference.point is not None:
                raise InvalidArticleReferenceError(
                    f"A point cannot be given without a part: [{reference}]."
                )
            return
        if reference.part not in article.parts:
            raise InvalidArticleReferenceError(
                f"Article [{reference.article_id}] has no part [{reference.part}]; "
                f"expected one of {article.parts}."
            )
        if reference.point is not None and reference.point not in (
            article.points_by_part.get(reference.part, [])
        ):
            raise InvalidArticleReferenceError(
                f"Part [{reference.part}] of article [{reference.article_id}] has no "
                f"point [{reference.point}]."
            )


def get_criminal_code_catalogue() -> CriminalCodeCatalogue:
    global _CATALOGUE

    if _CATALOGUE is None:
        _CATALOGUE = CriminalCodeCatalogue.from_csv(_CRIMINAL_CODE_ARTICLES_CSV_PATH)

    return _CATALOGUE
