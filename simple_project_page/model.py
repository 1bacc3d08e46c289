# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

"""
Canonical model of a Simple package index project page

Essential reading (in order):

 * https://peps.python.org/pep-0503/  (html simple index)
 * https://peps.python.org/pep-0629/  (simple index versioning)
 * https://peps.python.org/pep-0691/  (json simple index)
 * https://peps.python.org/pep-0592/  (yank)
 * https://peps.python.org/pep-0658/  (metadata files)
 * https://peps.python.org/pep-0714/  (core-metadata rename)

Both the HTML and the JSON representation of a project page are parsed into
the same model. The wire formats encode some fields by shape (a boolean, a
string or a mapping in JSON; the presence and value of an attribute in HTML),
and those shapes are collapsed here into plain records, so that consumers of
the model never need to know which representation was parsed.

Direct PEP quotes in the comments look like:

    PEP-XXXX: Some directly copy & pasted text from the PEP.

"""

from __future__ import annotations

import dataclasses
import typing

from .packaging import ArtifactName


@dataclasses.dataclass(frozen=True)
class ArtifactHashes:
    """
    Digests of a file, restricted to the algorithms we know how to decode.

    PEP-503: The URL SHOULD include a hash in the form of a URL fragment with
             the following syntax: #<hashname>=<hashvalue>
    PEP-691: hashes: A dictionary mapping a hash name to a hex encoded digest of the file.

    In theory every algorithm of ``hashlib`` may be used by an index, but only
    sha256 and md5 are retained. The digests are stored decoded (raw bytes).
    """

    sha256: typing.Optional[bytes] = None
    md5: typing.Optional[bytes] = None

    def is_empty(self) -> bool:
        return self.sha256 is None and self.md5 is None


@dataclasses.dataclass(frozen=True)
class DistInfoMetadata:
    """Availability of the Core Metadata file of a distribution (PEP-658)

    PEP-658: The metadata file is available at {file_url}.metadata
    PEP-691: Where this is present, it MUST be either a boolean to indicate
             if the file has an associated metadata file, or a dictionary mapping hash
             names to a hex encoded digest of the metadata's hash.
    """

    available: bool = False
    hashes: ArtifactHashes = ArtifactHashes()

    def __post_init__(self) -> None:
        if not self.available and not self.hashes.is_empty():
            raise ValueError("Metadata hashes given for unavailable metadata")

    @classmethod
    def from_raw(
        cls,
        raw: typing.Union[bool, ArtifactHashes, None],
    ) -> DistInfoMetadata:
        """Collapse the three possible encodings of the metadata field.

        An absent field means no metadata, a boolean states the availability
        and a set of hashes implies the metadata is available.
        """
        if raw is None:
            return cls()
        if isinstance(raw, bool):
            return cls(available=raw)
        return cls(available=True, hashes=raw)


@dataclasses.dataclass(frozen=True)
class Yanked:
    """The yank status of a file (PEP-592)

    PEP-691: either a boolean to indicate if the file has been yanked, or a non empty,
             but otherwise arbitrary, string to indicate that a file
             has been yanked with a specific reason.
    PEP-592: The value of the data-yanked attribute [in HTML], if present, is an
             arbitrary string that represents the reason for why the file has been yanked.
    """

    yanked: bool = False
    reason: typing.Optional[str] = None

    def __post_init__(self) -> None:
        if self.reason is not None and not self.yanked:
            raise ValueError("A yank reason was given for a file which is not yanked")

    @classmethod
    def from_raw(cls, raw: typing.Union[bool, str, None]) -> Yanked:
        if raw is None:
            return cls()
        if isinstance(raw, bool):
            return cls(yanked=raw)
        # Note that the string "false" is a valid yank reason in both JSON and HTML.
        return cls(yanked=True, reason=raw)


@dataclasses.dataclass(frozen=True)
class ArtifactInfo:
    """A single distribution file listed on a project page"""

    filename: ArtifactName
    # Absolute, resolved against the base URL in effect when the link was read.
    url: str
    hashes: typing.Optional[ArtifactHashes] = None

    # PEP-503: A repository MAY include a data-requires-python attribute on a file link.
    # The value is kept verbatim, it is not validated as a specifier set.
    requires_python: typing.Optional[str] = None

    dist_info_metadata: DistInfoMetadata = DistInfoMetadata()
    yanked: Yanked = Yanked()


@dataclasses.dataclass(frozen=True)
class Meta:
    """Responses metadata defined in PEP-629:
    https://peps.python.org/pep-0629/
    """

    version: str = "1.0"


@dataclasses.dataclass(frozen=True)
class ProjectInfo:
    """The normalized content of a project page

    The order of ``files`` is the document order of the page. Consumers may
    give preference to the files listed first.
    """

    meta: Meta = Meta()
    files: typing.Tuple[ArtifactInfo, ...] = ()
