# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import dataclasses
import enum
import posixpath
import typing

import packaging.tags
import packaging.utils
import packaging.version

from . import errors

SDIST_EXTENSIONS = (".zip", ".tar.gz", ".tar.bz2", ".tar.xz", ".tar.Z", ".tar")


def split_sdist_filename(path: str) -> typing.Tuple[str, str]:
    """
    Like os.path.splitext, but take off .tar too.
    Standard functions like splitext or pathlib suffixes
    will fail to extract the extension of sdists
    like numpy-1.0.0.tar.gz
    """
    base, ext = posixpath.splitext(path)
    if base.lower().endswith(".tar"):
        ext = base[-4:] + ext
        base = base[:-4]
    return base, ext


class PackageFormat(enum.Enum):
    WHEEL = "wheel"
    SDIST = "sdist"
    OTHER = "other format"


def extract_package_format(filename: str) -> PackageFormat:
    _, file_format = split_sdist_filename(filename)
    if file_format == ".whl":
        return PackageFormat.WHEEL
    if file_format in SDIST_EXTENSIONS:
        return PackageFormat.SDIST
    # .egg files and other legacy formats are OTHER
    return PackageFormat.OTHER


@dataclasses.dataclass(frozen=True)
class WheelName:
    filename: str
    distribution: packaging.utils.NormalizedName
    version: packaging.version.Version
    build_tag: packaging.utils.BuildTag
    tags: typing.FrozenSet[packaging.tags.Tag]

    def __str__(self) -> str:
        return self.filename


@dataclasses.dataclass(frozen=True)
class SDistName:
    filename: str
    distribution: packaging.utils.NormalizedName
    version: packaging.version.Version
    # The archive extension, for example ".tar.gz".
    format: str

    def __str__(self) -> str:
        return self.filename


ArtifactName = typing.Union[WheelName, SDistName]


def _parse_wheel_name(filename: str) -> WheelName:
    try:
        name, version, build_tag, tags = packaging.utils.parse_wheel_filename(filename)
    except (
        packaging.utils.InvalidWheelFilename,
        packaging.version.InvalidVersion,
    ) as e:
        raise errors.InvalidArtifactNameError(filename) from e
    return WheelName(
        filename=filename,
        distribution=name,
        version=version,
        build_tag=build_tag,
        tags=tags,
    )


def _parse_sdist_name(filename: str) -> SDistName:
    stem, file_format = split_sdist_filename(filename)
    # The project name may itself contain dashes, the version never does.
    name, sep, version = stem.rpartition("-")
    if not sep:
        raise errors.InvalidArtifactNameError(filename)
    try:
        distribution = packaging.utils.canonicalize_name(name, validate=True)
        parsed_version = packaging.version.Version(version)
    except (
        packaging.utils.InvalidName,
        packaging.version.InvalidVersion,
    ) as e:
        raise errors.InvalidArtifactNameError(filename) from e
    return SDistName(
        filename=filename,
        distribution=distribution,
        version=parsed_version,
        format=file_format,
    )


def parse_artifact_name(filename: str) -> ArtifactName:
    """
    Decompose the filename of a wheel or of a source distribution.

    Raises :class:`errors.InvalidArtifactNameError` for anything else,
    including legacy formats such as eggs.
    """
    package_format = extract_package_format(filename)
    if package_format == PackageFormat.WHEEL:
        return _parse_wheel_name(filename)
    if package_format == PackageFormat.SDIST:
        return _parse_sdist_name(filename)
    raise errors.InvalidArtifactNameError(filename)
