# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

from __future__ import annotations

import dataclasses
from datetime import timedelta
import logging
import pathlib
import typing

from . import content_negotiation, errors, utils


@dataclasses.dataclass(frozen=True)
class Config:
    """Settings of the command line interface

    Loaded from a JSON file such as::

        {"timeout": 30, "log_level": "DEBUG"}

    """

    timeout: timedelta = timedelta(seconds=15)
    log_level: str = "WARNING"
    accept: str = content_negotiation.DEFAULT_ACCEPT

    @classmethod
    def from_mapping(cls, config: typing.Mapping[str, typing.Any]) -> Config:
        unknown_keys = sorted(set(config) - {"timeout", "log_level", "accept"})
        if unknown_keys:
            raise errors.InvalidConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown_keys)}",
            )

        values: typing.Dict[str, typing.Any] = {}
        if "timeout" in config:
            timeout = config["timeout"]
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise errors.InvalidConfigurationError("timeout must be a number")
            if timeout <= 0:
                raise errors.InvalidConfigurationError("timeout must be positive")
            values["timeout"] = timedelta(seconds=timeout)
        if "log_level" in config:
            log_level = config["log_level"]
            if not isinstance(log_level, str) or not isinstance(
                logging.getLevelName(log_level.upper()),
                int,
            ):
                raise errors.InvalidConfigurationError(
                    f"Invalid log_level {log_level!r}",
                )
            values["log_level"] = log_level.upper()
        if "accept" in config:
            accept = config["accept"]
            if not isinstance(accept, str) or not accept:
                raise errors.InvalidConfigurationError("accept must be a string")
            values["accept"] = accept
        return cls(**values)

    @classmethod
    def from_file(cls, json_file: pathlib.Path) -> Config:
        return cls.from_mapping(utils.load_config_json(json_file))
