# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

"""
Normalization of PEP-503 (HTML) and PEP-691 (JSON) simple repository project
pages into a single model, suitable for use in package index clients
"""

from ._version import version as __version__  # noqa
from .model import ProjectInfo  # noqa
from .parser import (  # noqa
    parse_html_project_list,
    parse_html_project_page,
    parse_json_project_list,
    parse_json_project_page,
    parse_project_list,
    parse_project_page,
)

__all__ = [
    "__version__",
    "ProjectInfo",
    "parse_html_project_list",
    "parse_html_project_page",
    "parse_json_project_list",
    "parse_json_project_page",
    "parse_project_list",
    "parse_project_page",
]
