# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

import sys

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from typing import TypeAlias

__all__ = [
    "override",
    "TypeAlias",
]
