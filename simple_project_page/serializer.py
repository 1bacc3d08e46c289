# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

from functools import singledispatch
import json
import typing

from . import model
from .packaging import SDistName, WheelName


@singledispatch
def to_json_serializable(obj: typing.Any) -> typing.Any:
    """
    A function which can turn an object into a JSON serializable structure.

    Nested types can remain in a non-serializable state, so long as it can
    also be converted via to_json_serializable too.
    """
    raise TypeError("No JSON serializer override registered")


@to_json_serializable.register(WheelName)
@to_json_serializable.register(SDistName)
def _(obj: typing.Union[WheelName, SDistName]) -> str:
    return str(obj)


@to_json_serializable.register
def _(obj: model.ArtifactHashes) -> typing.Dict[str, str]:
    hashes = {"sha256": obj.sha256, "md5": obj.md5}
    return {
        name: digest.hex() for name, digest in hashes.items() if digest is not None
    }


class SerializerJsonV1:
    """Render a :class:`model.ProjectInfo` as a PEP-691 JSON project page

    The output can be read back with :func:`parser.parse_json_project_page`.
    """

    def serialize_project_info(self, page: model.ProjectInfo) -> str:
        project_page_dict = {
            "meta": {"api-version": page.meta.version},
            "files": [self._standardize_file(file) for file in page.files],
        }
        return json.dumps(project_page_dict, default=to_json_serializable)

    def serialize_project_list(self, names: typing.Sequence[str]) -> str:
        list_dict = {
            "meta": {"api-version": "1.0"},
            "projects": [{"name": name} for name in names],
        }
        return json.dumps(list_dict)

    def _standardize_file(
        self,
        file: model.ArtifactInfo,
    ) -> typing.Dict[str, typing.Any]:
        file_dict: typing.Dict[str, typing.Any] = {
            "filename": file.filename,
            "url": file.url,
            "hashes": file.hashes or model.ArtifactHashes(),
        }
        if file.requires_python is not None:
            file_dict["requires-python"] = file.requires_python
        # From PEP-714: The PEP 658 metadata, when used in the PEP 691
        # JSON representation of the Simple API, MUST be emitted using
        # the key core-metadata, with the supported values remaining the same.
        metadata = file.dist_info_metadata
        if metadata.available:
            file_dict["core-metadata"] = (
                metadata.hashes if not metadata.hashes.is_empty() else True
            )
        # According to PEP 691, if the reason is not specified, the value of the
        # yanked key is set to True.
        if file.yanked.reason is not None:
            file_dict["yanked"] = file.yanked.reason
        elif file.yanked.yanked:
            file_dict["yanked"] = True
        return file_dict
