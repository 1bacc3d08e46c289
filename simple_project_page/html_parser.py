# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import enum
import html.parser
import logging
import typing
from urllib.parse import unquote, urlsplit

from . import model, utils
from ._typing_compat import override
from .packaging import parse_artifact_name

if typing.TYPE_CHECKING:
    from ._typing_compat import TypeAlias

    Attributes: TypeAlias = typing.List[typing.Tuple[str, typing.Optional[str]]]

logger = logging.getLogger(__name__)

REPOSITORY_VERSION_META_NAME = "pypi:repository-version"


# Sentinel for attributes which are not present on a tag, as opposed to
# attributes which are present without a value (html.parser gives None).
class _Missing(enum.Enum):
    MISSING = enum.auto()


_MISSING: typing.Final = _Missing.MISSING


def get_attr(
    attrs: Attributes,
    name: str,
) -> typing.Union[str, None, _Missing]:
    """
    Return the value of the first attribute with the given name.

    Returns ``_MISSING`` if the attribute is not present at all, and ``None``
    if the attribute is present without a value (e.g. ``<a data-yanked>``).
    """
    for attr_name, value in attrs:
        if attr_name == name:
            return value
    return _MISSING


def get_str_attr(attrs: Attributes, name: str) -> typing.Optional[str]:
    value = get_attr(attrs, name)
    return value if isinstance(value, str) else None


def parse_fragment_hash(fragment: str) -> typing.Optional[model.ArtifactHashes]:
    # PEP-503: The URL SHOULD include a hash in the form of a URL fragment with
    #          the following syntax: #<hashname>=<hashvalue>
    # Only sha256 is recognised in this position.
    hash_name, sep, hash_value = fragment.partition("=")
    if not sep or hash_name != "sha256":
        return None
    digest = utils.decode_hex_digest(hash_name, hash_value)
    if digest is None:
        return None
    return model.ArtifactHashes(sha256=digest)


def parse_attribute_hash(value: str) -> typing.Optional[model.ArtifactHashes]:
    # PEP-658: The repository SHOULD provide the hash of the Core Metadata file
    #          as the data-dist-info-metadata attribute's value using
    #          the syntax <hashname>=<hashvalue>
    hash_name, sep, hash_value = value.partition("=")
    if not sep:
        return None
    digest = utils.decode_hex_digest(hash_name, hash_value)
    if digest is None:
        return None
    return model.ArtifactHashes(**{hash_name: digest})


def parse_dist_info_metadata(attrs: Attributes) -> model.DistInfoMetadata:
    # PEP-714: Clients consuming any of the HTML representations of the Simple API MUST
    #          read the PEP 658 metadata from the key data-core-metadata if it is present.
    #          They MAY optionally use the legacy data-dist-info-metadata if it is present
    #          but data-core-metadata is not.
    value = get_attr(attrs, "data-core-metadata")
    if value is _MISSING:
        value = get_attr(attrs, "data-dist-info-metadata")
    if value is _MISSING:
        return model.DistInfoMetadata.from_raw(None)
    if not isinstance(value, str) or value == "true":
        return model.DistInfoMetadata.from_raw(True)
    # A value which doesn't follow the <hashname>=<hashvalue> recommendation
    # still indicates that the metadata exists.
    return model.DistInfoMetadata.from_raw(parse_attribute_hash(value) or True)


def parse_yanked(attrs: Attributes) -> model.Yanked:
    value = get_attr(attrs, "data-yanked")
    if value is _MISSING:
        return model.Yanked.from_raw(None)
    # A valueless attribute carries the same (empty) reason as data-yanked="".
    return model.Yanked.from_raw(value or "")


class ProjectInfoHTMLParser(html.parser.HTMLParser):
    """Build a :class:`model.ProjectInfo` from a PEP-503 project page

    The document is consumed in a single forward pass, and only three kinds
    of tag are interpreted: the repository-version ``<meta>``, ``<base>`` and
    ``<a>``. Everything else, including text, comments and end tags, is
    ignored. No tree is ever built.

    The base URL is mutable during the pass. A link is resolved against the
    base in effect when its tag is read, so links preceding a ``<base>`` tag
    are resolved against the URL of the page itself. As in HTML, only the
    first ``<base>`` tag is honoured.

    Links which can't be turned into an :class:`model.ArtifactInfo` (for
    example because the last path segment isn't a distribution filename)
    are dropped without interrupting the pass.
    """

    def __init__(self, url: str, *, convert_charrefs: bool = True) -> None:
        super().__init__(convert_charrefs=convert_charrefs)
        self.base = url
        self.base_fixed = False
        self.meta = model.Meta()
        self.files: typing.List[model.ArtifactInfo] = []

    @property
    def project_info(self) -> model.ProjectInfo:
        return model.ProjectInfo(meta=self.meta, files=tuple(self.files))

    @override
    def handle_starttag(self, tag: str, attrs: Attributes) -> None:
        if tag == "meta":
            self._handle_meta(attrs)
        elif tag == "base":
            self._handle_base(attrs)
        elif tag == "a":
            href = get_str_attr(attrs, "href")
            if href is not None:
                artifact = self.try_parse_link(href, attrs)
                if artifact is not None:
                    self.files.append(artifact)

    def _handle_meta(self, attrs: Attributes) -> None:
        if get_str_attr(attrs, "name") != REPOSITORY_VERSION_META_NAME:
            return
        version = get_str_attr(attrs, "content")
        if version is not None:
            self.meta = model.Meta(version=version)

    def _handle_base(self, attrs: Attributes) -> None:
        if self.base_fixed:
            return
        self.base_fixed = True
        href = get_str_attr(attrs, "href")
        if href is None:
            return
        try:
            self.base = utils.resolve_url(href, self.base)
        except ValueError:
            logger.debug("Ignoring unresolvable base URL %r", href)
            return
        logger.debug("Base URL set to %s", self.base)

    def try_parse_link(
        self,
        href: str,
        attrs: Attributes,
    ) -> typing.Optional[model.ArtifactInfo]:
        try:
            url = utils.resolve_url(href, self.base)
            split_url = urlsplit(url)
            filename = parse_artifact_name(unquote(split_url.path.rsplit("/", 1)[-1]))
        except ValueError as e:
            # Includes errors.InvalidArtifactNameError.
            logger.debug("Skipping link %r: %s", href, e)
            return None

        return model.ArtifactInfo(
            filename=filename,
            url=url,
            hashes=parse_fragment_hash(split_url.fragment),
            requires_python=get_str_attr(attrs, "data-requires-python"),
            dist_info_metadata=parse_dist_info_metadata(attrs),
            yanked=parse_yanked(attrs),
        )


class AnchorTextHTMLParser(html.parser.HTMLParser):
    """Collect the text content of every ``<a>`` element of a document

    Used for the project list page, where the anchor text is the name of a
    project. Text of nested elements is included. An ``<a>`` start tag closes
    an anchor which is still open, and an anchor left open at the end of the
    document is still collected.
    """

    def __init__(self, *, convert_charrefs: bool = True) -> None:
        super().__init__(convert_charrefs=convert_charrefs)
        self.names: typing.List[str] = []
        self._current_text: typing.Optional[typing.List[str]] = None

    @override
    def handle_starttag(self, tag: str, attrs: Attributes) -> None:
        if tag == "a":
            self._finish_anchor()
            self._current_text = []

    @override
    def handle_startendtag(self, tag: str, attrs: Attributes) -> None:
        # <a/> is not a void element in HTML, so it opens an anchor.
        self.handle_starttag(tag, attrs)

    @override
    def handle_endtag(self, tag: str) -> None:
        if tag == "a":
            self._finish_anchor()

    @override
    def handle_data(self, data: str) -> None:
        if self._current_text is not None:
            self._current_text.append(data)

    @override
    def close(self) -> None:
        super().close()
        self._finish_anchor()

    def _finish_anchor(self) -> None:
        if self._current_text is not None:
            self.names.append("".join(self._current_text))
            self._current_text = None
