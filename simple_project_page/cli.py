# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

import argparse
import asyncio
import logging
from pathlib import Path
import sys
import typing
from urllib.parse import urlparse

import httpx

from . import errors, fetch
from .config import Config
from .parser import parse_project_list, parse_project_page
from .serializer import SerializerJsonV1

logger = logging.getLogger(__name__)


def is_url(url: str) -> bool:
    return urlparse(url).scheme in ("http", "https")


def configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.description = "Normalize a Python package index project page"

    parser.add_argument(
        "source",
        help="URL of the page, or path to a page saved on disk",
    )
    parser.add_argument(
        "--source-url",
        help="URL against which relative links are resolved (local files only)",
    )
    parser.add_argument(
        "--content-type",
        help="Content type of the page (local files only, guessed from the suffix)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="The page is a project list, print the project names",
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")


def _guess_content_type(path: Path) -> str:
    if path.suffix == ".json":
        return "application/vnd.pypi.simple.v1+json"
    return "text/html"


async def _fetch(args: argparse.Namespace, config: Config) -> str:
    serializer = SerializerJsonV1()
    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        if args.list:
            names = await fetch.fetch_project_list(
                args.source,
                http_client=http_client,
                timeout=config.timeout,
                accept=config.accept,
            )
            return serializer.serialize_project_list(names)
        project_info = await fetch.fetch_project_page(
            args.source,
            http_client=http_client,
            timeout=config.timeout,
            accept=config.accept,
        )
        return serializer.serialize_project_info(project_info)


def _read(path: Path, args: argparse.Namespace) -> str:
    serializer = SerializerJsonV1()
    content_type: str = args.content_type or _guess_content_type(path)
    with path.open("rb") as page:
        if args.list:
            names = parse_project_list(page, content_type)
            return serializer.serialize_project_list(names)
        source_url: str = args.source_url or path.resolve().as_uri()
        project_info = parse_project_page(page, source_url, content_type)
    return serializer.serialize_project_info(project_info)


def handler(args: argparse.Namespace) -> int:
    config = Config.from_file(args.config) if args.config else Config()
    logging.basicConfig(level=config.log_level)

    try:
        if is_url(args.source):
            output = asyncio.run(_fetch(args, config))
        else:
            output = _read(Path(args.source), args)
    except (
        OSError,
        ValueError,
        LookupError,
        errors.SourceRepositoryUnavailable,
    ) as e:
        # The parser errors are all ValueErrors, PageNotFoundError is a LookupError.
        logger.error("Unable to process %s: %s", args.source, e)
        return 1
    print(output)
    return 0


def main(argv: typing.Optional[typing.Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser()
    configure_parser(parser)
    args = parser.parse_args(argv)
    try:
        exit_code = handler(args)
    except errors.InvalidConfigurationError as e:
        parser.error(str(e))
    sys.exit(exit_code)
