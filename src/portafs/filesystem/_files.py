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

"""Plain-file lifecycle primitives: open, close, delete.

Descriptors returned here are raw OS file descriptors owned by the caller
until passed to :func:`close_file`. Reading and writing file content is left
to the caller.
"""

from __future__ import annotations

import errno
import os
from typing import Final

from ..errors import PathIOError
from ..logging import StructuredLogger, get_logger
from ._filename import PortableFilename
from ._query import PathKind, path_kind

logger: StructuredLogger = get_logger(
    __name__, context={"component": "filesystem.files"}
)

# O_BINARY and O_NOINHERIT only exist on Windows.
_COMMON_FLAGS: Final[int] = getattr(os, "O_BINARY", 0) | getattr(os, "O_NOINHERIT", 0)
_CREATE_MODE: Final[int] = 0o666


def _open(filename: PortableFilename, flags: int, action: str) -> int:
    try:
        return os.open(filename.native, flags | _COMMON_FLAGS, _CREATE_MODE)
    except OSError as err:
        raise PathIOError.from_os_error(action, filename.portable, err) from err


def open_writable(
    filename: PortableFilename,
    *,
    write_only: bool = True,
    truncate: bool = True,
    append: bool = False,
) -> int:
    """Open ``filename`` for output, creating it if absent.

    ``truncate`` and ``append`` are passed to the OS as given; choosing a
    sensible combination is up to the caller.

    Returns:
        An OS file descriptor.

    Raises:
        PathIOError: If the path is a directory, its parent is missing, or the
            OS refuses the open.
    """
    flags = os.O_CREAT | (os.O_WRONLY if write_only else os.O_RDWR)
    if truncate:
        flags |= os.O_TRUNC
    if append:
        flags |= os.O_APPEND
    fd = _open(filename, flags, "open for write")
    logger.debug(
        "Opened file for writing.",
        event="file_opened",
        context={"path": filename, "fd": fd, "mode": "write"},
    )
    return fd


def open_readable(filename: PortableFilename) -> int:
    """Open an existing plain file read-only.

    Raises:
        PathIOError: If the file is missing or is a directory.
    """
    if path_kind(filename) is PathKind.DIRECTORY:
        raise PathIOError.wrong_kind(errno.EISDIR, filename.portable, "Cannot open")
    fd = _open(filename, os.O_RDONLY, "open for read")
    logger.debug(
        "Opened file for reading.",
        event="file_opened",
        context={"path": filename, "fd": fd, "mode": "read"},
    )
    return fd


def close_file(fd: int) -> None:
    """Release ``fd``. Closing the same descriptor twice is a caller error."""
    try:
        os.close(fd)
    except OSError as err:
        raise PathIOError.from_os_error(f"close fd {fd}", None, err) from err


def delete_file(filename: PortableFilename) -> bool:
    """Delete the plain file ``filename``.

    Never removes a directory. Existence is checked with ``stat``, which
    follows symlinks: a dangling symlink counts as absent and is left in
    place.

    Returns:
        ``True`` if the file was deleted, ``False`` if nothing was there.

    Raises:
        PathIOError: If ``filename`` is a directory or cannot be removed.
    """
    kind = path_kind(filename)
    if kind is None:
        return False
    if kind is PathKind.DIRECTORY:
        raise PathIOError.wrong_kind(
            errno.EISDIR, filename.portable, "Cannot delete file"
        )
    try:
        os.unlink(filename.native)
    except FileNotFoundError:
        return False
    except OSError as err:
        raise PathIOError.from_os_error("unlink", filename.portable, err) from err
    logger.debug("Deleted file.", event="file_deleted", context={"path": filename})
    return True


__all__ = [
    "close_file",
    "delete_file",
    "open_readable",
    "open_writable",
]
