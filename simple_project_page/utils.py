# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import binascii
import codecs
import json
import pathlib
import typing
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from . import errors

if typing.TYPE_CHECKING:
    from ._typing_compat import TypeAlias

    Page: TypeAlias = typing.Union[str, bytes, typing.Iterable[bytes]]

# Digest sizes, in bytes, of the hash algorithms we are able to decode.
DIGEST_SIZES: typing.Dict[str, int] = {
    "sha256": 32,
    "md5": 16,
}

# Characters which are left untouched when quoting the path of a URL. "%" is
# included so that already escaped URLs are not escaped twice.
_PATH_SAFE_CHARS = "/%:@!$&'()*+,;=~"

# Leading and trailing C0 controls and spaces are dropped from links, other
# (Unicode) whitespace is part of the link.
_URL_STRIP_CHARS = "".join(map(chr, range(0x21)))


def url_absolutizer(url: str, url_base: str) -> str:
    """Converts a relative url into an absolute one"""
    if not urlsplit(url).scheme:
        return urljoin(url_base, url)
    return url


def validate_source_url(url: str) -> str:
    """Check that the given URL can act as the base of a page"""
    try:
        split_url = urlsplit(url)
    except ValueError as e:
        raise errors.InvalidSourceURLError(url) from e
    if not split_url.scheme:
        raise errors.InvalidSourceURLError(url)
    if not split_url.netloc and split_url.scheme != "file":
        raise errors.InvalidSourceURLError(url)
    return url


def resolve_url(url: str, url_base: str) -> str:
    """
    Resolve a (possibly relative) link against the given base.

    The path of the result is percent-encoded, since indexes do not always
    escape the URLs they serve. Raises ValueError if the link cannot be parsed.
    """
    absolute_url = url_absolutizer(url.strip(_URL_STRIP_CHARS), url_base)
    scheme, netloc, path, query, fragment = urlsplit(absolute_url)
    if not scheme:
        raise ValueError(f"Unable to resolve '{url}' to an absolute URL")
    return urlunsplit(
        (scheme, netloc, quote(path, safe=_PATH_SAFE_CHARS), query, fragment),
    )


def decode_hex_digest(algorithm: str, hex_digest: str) -> typing.Optional[bytes]:
    """
    Decode a hex encoded digest of one of the supported algorithms.

    Returns None for unknown algorithms and for values which are not a valid
    digest of the expected length.
    """
    digest_size = DIGEST_SIZES.get(algorithm)
    if digest_size is None or len(hex_digest) != digest_size * 2:
        return None
    try:
        return binascii.unhexlify(hex_digest)
    except (binascii.Error, ValueError):
        return None


def iter_decoded(page: Page) -> typing.Iterator[str]:
    """
    Yield the text of the given page, decoding bytes as UTF-8 incrementally.

    A page may be given as text, as bytes, or as an iterable of bytes chunks
    (for example a file opened in binary mode).
    """
    if isinstance(page, str):
        yield page
        return
    chunks: typing.Iterable[bytes]
    if isinstance(page, (bytes, bytearray, memoryview)):
        chunks = (bytes(page),)
    else:
        chunks = page
    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    try:
        for chunk in chunks:
            yield decoder.decode(chunk)
        yield decoder.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise errors.UnreadablePageError(f"the page is not valid UTF-8 ({e})") from e


def load_config_json(json_file: pathlib.Path) -> typing.Dict[typing.Any, typing.Any]:
    try:
        json_config = json.loads(json_file.read_text())
    except json.JSONDecodeError as e:
        raise errors.InvalidConfigurationError("Invalid json file") from e
    except FileNotFoundError as e:
        raise errors.InvalidConfigurationError("Configuration file not found") from e
    if not isinstance(json_config, dict):
        raise errors.InvalidConfigurationError(
            f"Invalid configuration file. {str(json_file)} must contain a dictionary.",
        )
    return json_config
