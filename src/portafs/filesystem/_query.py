# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Existence and kind queries.

A missing path is a normal ``False``/``None`` answer. Only a failure of the
query itself (for example an unreadable parent directory) raises.
"""

from __future__ import annotations

import errno
import os
import stat
from enum import Enum, auto
from typing import Final

from ..errors import PathIOError
from ._filename import PortableFilename

# stat() errno values that mean "no such entry" rather than "query failed".
_ABSENT_ERRNOS: Final[frozenset[int]] = frozenset({errno.ENOENT, errno.ENOTDIR})


class PathKind(Enum):
    """Kind of an existing filesystem entry."""

    FILE = auto()
    DIRECTORY = auto()
    OTHER = auto()


def path_kind(filename: PortableFilename) -> PathKind | None:
    """Return the kind of entry at ``filename``, or ``None`` if absent.

    Raises:
        PathIOError: If the entry cannot be queried.
    """
    try:
        st = os.stat(filename.native)
    except OSError as err:
        if err.errno in _ABSENT_ERRNOS:
            return None
        raise PathIOError.from_os_error("stat", filename.portable, err) from err
    if stat.S_ISDIR(st.st_mode):
        return PathKind.DIRECTORY
    if stat.S_ISREG(st.st_mode):
        return PathKind.FILE
    return PathKind.OTHER


def path_exists(filename: PortableFilename) -> bool:
    """Return whether ``filename`` names any existing entry."""
    return path_kind(filename) is not None


def is_directory(filename: PortableFilename) -> bool:
    return path_kind(filename) is PathKind.DIRECTORY


def is_file(filename: PortableFilename) -> bool:
    return path_kind(filename) is PathKind.FILE


__all__ = [
    "PathKind",
    "is_directory",
    "is_file",
    "path_exists",
    "path_kind",
]
