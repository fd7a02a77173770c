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

"""Idempotent directory lifecycle primitives.

Creating a directory that already exists returns ``False``; deleting a tree
that is already gone returns ``False``. Both hold when another process wins a
race for the same path. Tree deletion walks the tree at call time and is not
atomic: concurrent writers inside the tree can make it fail or leave residue,
and a failed deletion is not rolled back. Calling it again converges.
"""

from __future__ import annotations

import errno
import os
import shutil

from ..dbc import ensure
from ..errors import PathIOError
from ..logging import StructuredLogger, get_logger
from ._filename import PortableFilename
from ._query import PathKind, path_exists, path_kind

logger: StructuredLogger = get_logger(
    __name__, context={"component": "filesystem.dirs"}
)


def _directory_present(
    filename: PortableFilename,
    *,
    result: bool | None = None,
    exception: BaseException | None = None,
) -> bool:
    return exception is not None or path_kind(filename) is PathKind.DIRECTORY


def _directory_absent(
    filename: PortableFilename,
    *,
    result: bool | None = None,
    exception: BaseException | None = None,
) -> bool:
    return exception is not None or not path_exists(filename)


def _existing_directory(
    filename: PortableFilename, action: str, err: FileExistsError
) -> bool:
    """Resolve ``EEXIST`` from mkdir: ``False`` for a directory, else raise."""
    kind = path_kind(filename)
    if kind is PathKind.DIRECTORY:
        logger.debug(
            "Directory already exists.",
            event="dir_exists",
            context={"path": filename},
        )
        return False
    if kind is None:
        raise PathIOError.from_os_error(action, filename.portable, err) from err
    raise PathIOError.wrong_kind(
        errno.EEXIST, filename.portable, "Path exists and is not a directory"
    ) from err


@ensure(_directory_present)
def create_dir(filename: PortableFilename) -> bool:
    """Create the leaf directory ``filename``; its parent must exist.

    Returns:
        ``True`` if the directory was created, ``False`` if it already existed.

    Raises:
        PathIOError: If the parent is missing, the path exists as a
            non-directory, or the OS refuses the operation.
    """
    try:
        os.mkdir(filename.native)
    except FileExistsError as err:
        return _existing_directory(filename, "mkdir", err)
    except OSError as err:
        raise PathIOError.from_os_error("mkdir", filename.portable, err) from err
    logger.debug("Created directory.", event="dir_created", context={"path": filename})
    return True


@ensure(_directory_present)
def create_dir_tree(filename: PortableFilename) -> bool:
    """Create ``filename`` and any missing parents.

    Returns:
        ``True`` if the leaf directory was created, ``False`` if it already
        existed.
    """
    try:
        os.makedirs(filename.native)
    except FileExistsError as err:
        return _existing_directory(filename, "makedirs", err)
    except OSError as err:
        raise PathIOError.from_os_error("makedirs", filename.portable, err) from err
    logger.debug(
        "Created directory tree.", event="dir_tree_created", context={"path": filename}
    )
    return True


def _failed_on(err: OSError, native: bytes | str) -> bool:
    return err.filename is not None and os.fsencode(err.filename) == os.fsencode(
        native
    )


@ensure(_directory_absent)
def delete_dir_tree(filename: PortableFilename) -> bool:
    """Recursively delete the directory ``filename``, children first.

    Returns:
        ``True`` if the tree was deleted, ``False`` if nothing was there.

    Raises:
        PathIOError: If the path is not a directory or any entry cannot be
            removed. Entries removed before the failure stay removed.
    """
    kind = path_kind(filename)
    if kind is None:
        return False
    if kind is not PathKind.DIRECTORY:
        raise PathIOError.wrong_kind(
            errno.ENOTDIR, filename.portable, "Cannot delete directory tree"
        )
    try:
        shutil.rmtree(filename.native)
    except FileNotFoundError as err:
        # Another deleter removed the whole tree first.
        if _failed_on(err, filename.native) and not path_exists(filename):
            return False
        raise PathIOError.from_os_error("rmtree", filename.portable, err) from err
    except OSError as err:
        raise PathIOError.from_os_error("rmtree", filename.portable, err) from err
    logger.debug(
        "Deleted directory tree.", event="dir_tree_deleted", context={"path": filename}
    )
    return True


def delete_dir_contents(
    filename: PortableFilename, *, missing_ok: bool = False
) -> bool:
    """Delete every entry inside ``filename`` but keep the directory itself.

    Returns:
        ``True`` if the directory existed, ``False`` if it was absent and
        ``missing_ok`` is set.

    Raises:
        PathIOError: If the directory is absent (unless ``missing_ok``), is
            not a directory, or an entry cannot be removed.
    """
    kind = path_kind(filename)
    if kind is None:
        if missing_ok:
            return False
        raise PathIOError.wrong_kind(
            errno.ENOENT, filename.portable, "Cannot delete directory contents"
        )
    if kind is not PathKind.DIRECTORY:
        raise PathIOError.wrong_kind(
            errno.ENOTDIR, filename.portable, "Cannot delete directory contents"
        )
    try:
        with os.scandir(filename.native) as entries:
            children = list(entries)
        for entry in children:
            if entry.is_dir(follow_symlinks=False):
                shutil.rmtree(entry.path)
            else:
                os.unlink(entry.path)
    except OSError as err:
        raise PathIOError.from_os_error(
            "delete contents", filename.portable, err
        ) from err
    logger.debug(
        "Deleted directory contents.",
        event="dir_contents_deleted",
        context={"path": filename, "entries": len(children)},
    )
    return True


__all__ = [
    "create_dir",
    "create_dir_tree",
    "delete_dir_contents",
    "delete_dir_tree",
]
