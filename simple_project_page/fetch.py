# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

"""
Retrieval of project pages over HTTP

This is a thin layer on top of :mod:`parser`: the page is downloaded, and
handed to the parser matching the content-type of the response, with the
final URL of the response (after redirects) as the base of relative links.
"""

from __future__ import annotations

from datetime import timedelta
import logging
import typing

import httpx

from . import content_negotiation, errors, model, parser

logger = logging.getLogger(__name__)


async def _fetch_simple_page(
    page_url: str,
    *,
    http_client: httpx.AsyncClient,
    timeout: timedelta,
    accept: str,
) -> typing.Tuple[bytes, str, str]:
    """Retrieves a simple page from the given url.
    Returns the body, the content type received and the final URL.
    """
    headers = {"Accept": accept}
    logger.debug("Fetching %s", page_url)
    try:
        response = await http_client.get(
            url=page_url,
            headers=headers,
            timeout=timeout.total_seconds(),
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        # If the status_code is 404, the source repository is working correctly, but
        # the requested page is not available. Any other 4xx or 5xx error code is
        # treated as a source repository misbehaviour
        if isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
            raise errors.PageNotFoundError(url=page_url) from e
        # This code path also includes connection failures or timeouts.
        raise errors.SourceRepositoryUnavailable() from e
    content_type: str = response.headers.get("content-type", "")
    return response.content, content_type, str(response.url)


async def fetch_project_page(
    page_url: str,
    *,
    http_client: httpx.AsyncClient,
    timeout: timedelta = timedelta(seconds=15),
    accept: str = content_negotiation.DEFAULT_ACCEPT,
) -> model.ProjectInfo:
    body, content_type, final_url = await _fetch_simple_page(
        page_url,
        http_client=http_client,
        timeout=timeout,
        accept=accept,
    )
    return parser.parse_project_page(body, final_url, content_type)


async def fetch_project_list(
    page_url: str,
    *,
    http_client: httpx.AsyncClient,
    timeout: timedelta = timedelta(seconds=15),
    accept: str = content_negotiation.DEFAULT_ACCEPT,
) -> typing.List[str]:
    body, content_type, _ = await _fetch_simple_page(
        page_url,
        http_client=http_client,
        timeout=timeout,
        accept=accept,
    )
    return parser.parse_project_list(body, content_type)
