# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import json
import logging
import typing

from . import content_negotiation, errors, html_parser, model, utils
from .packaging import parse_artifact_name

if typing.TYPE_CHECKING:
    from .utils import Page

logger = logging.getLogger(__name__)


def parse_html_project_page(page: Page, url: str) -> model.ProjectInfo:
    """
    Parse a PEP-503 project page.

    Parameters
    ----------
    page:
        The page, as text, as UTF-8 encoded bytes, or as an iterable of bytes
        chunks which are fed to the parser as they come.
    url:
        The absolute URL the page was retrieved from. Relative links are
        resolved against it, unless the page declares a ``<base>``.

    Raises
    ------
    errors.InvalidSourceURLError
        If ``url`` isn't an absolute URL.
    errors.UnreadablePageError
        If the page isn't valid UTF-8.
    """
    utils.validate_source_url(url)
    parser = html_parser.ProjectInfoHTMLParser(url)
    for text in utils.iter_decoded(page):
        parser.feed(text)
    parser.close()
    project_info = parser.project_info
    logger.debug("Parsed %d files from %s", len(project_info.files), url)
    return project_info


def parse_html_project_list(page: Page) -> typing.List[str]:
    """Return the text of every link of a PEP-503 project list, in document order"""
    parser = html_parser.AnchorTextHTMLParser()
    for text in utils.iter_decoded(page):
        parser.feed(text)
    parser.close()
    return parser.names


def _loads(page: typing.Union[str, bytes]) -> typing.Any:
    try:
        return json.loads(page)
    except UnicodeDecodeError as e:
        raise errors.UnreadablePageError(f"the page is not valid UTF-8 ({e})") from e
    except json.JSONDecodeError as e:
        raise errors.UnreadablePageError(f"the page is not valid JSON ({e})") from e


def _expect_mapping(value: typing.Any, path: str) -> typing.Mapping[str, typing.Any]:
    if not isinstance(value, dict):
        raise errors.StructuralDecodeError(path, "expected an object")
    return value


def _expect_str(value: typing.Any, path: str) -> str:
    if not isinstance(value, str):
        raise errors.StructuralDecodeError(path, "expected a string")
    return value


def _required(
    mapping: typing.Mapping[str, typing.Any],
    key: str,
    path: str,
) -> typing.Any:
    try:
        return mapping[key]
    except KeyError:
        raise errors.StructuralDecodeError(
            f"{path}.{key}",
            "missing required field",
        ) from None


def _decode_hashes(value: typing.Any, path: str) -> model.ArtifactHashes:
    # PEP-691: hashes: A dictionary mapping a hash name to a hex encoded digest of the file.
    #          Multiple hashes can be included [...] the dictionary MAY be empty.
    # Hash names we don't know about are ignored.
    hashes = _expect_mapping(value, path)
    digests: typing.Dict[str, bytes] = {}
    for hash_name in utils.DIGEST_SIZES:
        if hash_name not in hashes:
            continue
        hash_path = f"{path}.{hash_name}"
        hash_value = _expect_str(hashes[hash_name], hash_path)
        digest = utils.decode_hex_digest(hash_name, hash_value)
        if digest is None:
            raise errors.StructuralDecodeError(
                hash_path,
                f"expected a hex encoded {hash_name} digest",
            )
        digests[hash_name] = digest
    return model.ArtifactHashes(**digests)


def _decode_dist_info_metadata(
    value: typing.Any,
    path: str,
) -> model.DistInfoMetadata:
    # PEP-691: Where this is present, it MUST be either a boolean to indicate
    #          if the file has an associated metadata file, or a dictionary mapping hash
    #          names to a hex encoded digest of the metadata's hash.
    if value is None or isinstance(value, bool):
        return model.DistInfoMetadata.from_raw(value)
    if isinstance(value, dict):
        return model.DistInfoMetadata.from_raw(_decode_hashes(value, path))
    raise errors.StructuralDecodeError(
        path,
        "expected a boolean or an object of hashes",
    )


def _decode_yanked(value: typing.Any, path: str) -> model.Yanked:
    # PEP-691: either a boolean to indicate if the file has been yanked, or a non empty,
    #          but otherwise arbitrary, string to indicate that a file
    #          has been yanked with a specific reason.
    if value is None or isinstance(value, (bool, str)):
        return model.Yanked.from_raw(value)
    raise errors.StructuralDecodeError(path, "expected a boolean or a string")


def _decode_file(
    value: typing.Any,
    path: str,
    url: typing.Optional[str],
) -> model.ArtifactInfo:
    file = _expect_mapping(value, path)

    filename_path = f"{path}.filename"
    filename = _expect_str(_required(file, "filename", path), filename_path)
    try:
        artifact_name = parse_artifact_name(filename)
    except errors.InvalidArtifactNameError as e:
        raise errors.StructuralDecodeError(filename_path, str(e)) from e

    url_path = f"{path}.url"
    file_url = _expect_str(_required(file, "url", path), url_path)
    try:
        if url is None:
            utils.validate_source_url(file_url)
        file_url = utils.resolve_url(file_url, url or file_url)
    except ValueError as e:
        raise errors.StructuralDecodeError(url_path, str(e)) from e

    hashes = _decode_hashes(_required(file, "hashes", path), f"{path}.hashes")

    requires_python = file.get("requires-python")
    if requires_python is not None:
        _expect_str(requires_python, f"{path}.requires-python")

    # PEP-714: Clients consuming the JSON representation of the Simple API MUST
    #          read the PEP 658 metadata from the key core-metadata if it is present.
    #          They MAY optionally use the legacy dist-info-metadata if it is present
    #          but core-metadata is not.
    metadata_key = "core-metadata" if "core-metadata" in file else "dist-info-metadata"

    return model.ArtifactInfo(
        filename=artifact_name,
        url=file_url,
        hashes=None if hashes.is_empty() else hashes,
        requires_python=requires_python,
        dist_info_metadata=_decode_dist_info_metadata(
            file.get(metadata_key),
            f"{path}.{metadata_key}",
        ),
        yanked=_decode_yanked(file.get("yanked"), f"{path}.yanked"),
    )


def _decode_meta(value: typing.Any, path: str) -> model.Meta:
    meta = _expect_mapping(value, path)
    api_version = _expect_str(
        _required(meta, "api-version", path),
        f"{path}.api-version",
    )
    return model.Meta(version=api_version)


def parse_json_project_page(
    page: typing.Union[str, bytes],
    url: typing.Optional[str] = None,
) -> model.ProjectInfo:
    """
    Parse a PEP-691 JSON project page.

    When ``url`` is given, relative file URLs are resolved against it.
    Otherwise all file URLs must be absolute.

    Raises
    ------
    errors.UnreadablePageError
        If the page isn't valid JSON.
    errors.StructuralDecodeError
        If a field is missing or has an invalid value. The ``field_path``
        of the error locates the field, e.g. ``$.files[2].yanked``.
    """
    if url is not None:
        utils.validate_source_url(url)
    page_dict = _expect_mapping(_loads(page), "$")

    meta = model.Meta()
    if "meta" in page_dict:
        meta = _decode_meta(page_dict["meta"], "$.meta")

    files = _required(page_dict, "files", "$")
    if not isinstance(files, list):
        raise errors.StructuralDecodeError("$.files", "expected a list")

    return model.ProjectInfo(
        meta=meta,
        files=tuple(
            _decode_file(file, f"$.files[{i}]", url) for i, file in enumerate(files)
        ),
    )


def parse_json_project_list(page: typing.Union[str, bytes]) -> typing.List[str]:
    """Return the name of every project of a PEP-691 project list, in document order"""
    page_dict = _expect_mapping(_loads(page), "$")
    projects = _required(page_dict, "projects", "$")
    if not isinstance(projects, list):
        raise errors.StructuralDecodeError("$.projects", "expected a list")
    names: typing.List[str] = []
    for i, project in enumerate(projects):
        path = f"$.projects[{i}]"
        project_dict = _expect_mapping(project, path)
        name = _required(project_dict, "name", path)
        names.append(_expect_str(name, f"{path}.name"))
    return names


def parse_project_page(
    page: Page,
    url: str,
    content_type: str,
) -> model.ProjectInfo:
    """Parse a project page with the parser matching the content-type it was served with"""
    page_format = content_negotiation.classify_content_type(content_type)
    if page_format == content_negotiation.Format.JSON_V1:
        return parse_json_project_page(_as_bytes(page), url)
    return parse_html_project_page(page, url)


def parse_project_list(page: Page, content_type: str) -> typing.List[str]:
    page_format = content_negotiation.classify_content_type(content_type)
    if page_format == content_negotiation.Format.JSON_V1:
        return parse_json_project_list(_as_bytes(page))
    return parse_html_project_list(page)


def _as_bytes(page: Page) -> typing.Union[str, bytes]:
    # The JSON document has to be materialised as a whole.
    if isinstance(page, (str, bytes, bytearray)):
        return page
    return b"".join(page)
