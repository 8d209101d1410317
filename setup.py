# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2019 Recidiviz, Inc.
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
"""Packaging for the recidivcalc recidivism calculation engine.

The criminal code article catalogue and the test case files are data files and
must be listed in package_data to be installed alongside the code.
"""
import setuptools

REQUIRED_PACKAGES = [
    "attrs",
    "cattrs",
    "pandas",
    "python-dateutil",
    "PyYAML",
]

TEST_PACKAGES = [
    "parameterized",
    "pytest",
]

setuptools.setup(
    name="recidivcalc",
    version="1.0.0",
    python_requires=">=3.9",
    install_requires=REQUIRED_PACKAGES,
    extras_require={"tests": TEST_PACKAGES},
    packages=setuptools.find_packages(include=["recidivcalc", "recidivcalc.*"]),
    package_data={
        "recidivcalc.common": ["data_sets/*.csv"],
        "recidivcalc.tests": ["fixtures/*.yaml"],
    },
)
