# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import enum

from . import errors


class Format(enum.Enum):
    JSON_V1 = "application/vnd.pypi.simple.v1+json"
    HTML_V1 = "application/vnd.pypi.simple.v1+html"
    HTML_LEGACY = "text/html"


# PEP-691: the JSON format is preferred, with the HTML formats as fallbacks.
DEFAULT_ACCEPT = ", ".join(
    [
        Format.JSON_V1.value,
        f"{Format.HTML_V1.value};q=0.2",
        f"{Format.HTML_LEGACY.value};q=0.01",
    ],
)


def classify_content_type(content_type: str) -> Format:
    """
    Determine the format of a page from the content-type it was served with.

    A missing content-type is treated as legacy HTML, as many static indexes
    don't set it.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return Format.HTML_LEGACY
    try:
        return Format(media_type)
    except ValueError:
        raise errors.UnsupportedSerialization(content_type) from None
