# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations


class InvalidSourceURLError(ValueError):
    msg_format = "Source URL '{url}' is not an absolute URL"

    def __init__(self, url: str, *args: object) -> None:
        msg = self.msg_format.format(url=url)
        super().__init__(msg, *args)
        self.url = url


class UnreadablePageError(ValueError):
    """The page could not be tokenized at all (bad encoding or invalid JSON)."""

    msg_format = "Unable to read the page: {reason}"

    def __init__(self, reason: str, *args: object) -> None:
        msg = self.msg_format.format(reason=reason)
        super().__init__(msg, *args)


class StructuralDecodeError(ValueError):
    msg_format = "Invalid value at '{field_path}': {reason}"

    def __init__(self, field_path: str, reason: str, *args: object) -> None:
        msg = self.msg_format.format(field_path=field_path, reason=reason)
        super().__init__(msg, *args)
        self.field_path = field_path
        self.reason = reason


class InvalidArtifactNameError(ValueError):
    msg_format = "'{filename}' is not a valid distribution filename"

    def __init__(self, filename: str, *args: object) -> None:
        msg = self.msg_format.format(filename=filename)
        super().__init__(msg, *args)
        self.filename = filename


class UnsupportedSerialization(ValueError):
    msg_format = "Unsupported format '{format_name}'."

    def __init__(self, format_name: str, *args: object) -> None:
        msg = self.msg_format.format(format_name=format_name)
        super().__init__(msg, *args)


class PageNotFoundError(LookupError):
    msg_format = "Page '{url}' was not found in the configured source"

    def __init__(self, url: str, *args: object) -> None:
        msg = self.msg_format.format(url=url)
        super().__init__(msg, *args)


class SourceRepositoryUnavailable(Exception):
    pass


class InvalidConfigurationError(ValueError):
    pass
