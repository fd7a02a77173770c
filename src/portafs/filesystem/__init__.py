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

"""Portable filenames and idempotent filesystem lifecycle primitives.

This module provides a ``PortableFilename`` value that carries a path in both a
portable (forward-slash UTF-8) and a native form, plus primitives built on it:

- Queries: ``path_exists``, ``path_kind``, ``is_directory``, ``is_file``
- Directories: ``create_dir``, ``create_dir_tree``, ``delete_dir_tree``,
  ``delete_dir_contents``
- Files: ``open_writable``, ``open_readable``, ``close_file``, ``delete_file``
- Scoped temporary directories: ``TemporaryDir``

Create and delete operations return ``False`` instead of raising when the
target is already in the requested state.

Example usage::

    from portafs.filesystem import PortableFilename, create_dir, delete_dir_tree

    root = PortableFilename.from_string("scratch")
    create_dir(root)          # True
    create_dir(root)          # False, already there
    delete_dir_tree(root)     # True
    delete_dir_tree(root)     # False, already gone
"""

from __future__ import annotations

from ._codec import (
    NATIVE_CODEC,
    PORTABLE_SEP,
    NativeCodec,
    NativePath,
    PosixCodec,
    WindowsCodec,
    codec_for,
)
from ._dirs import create_dir, create_dir_tree, delete_dir_contents, delete_dir_tree
from ._filename import PortableFilename
from ._files import close_file, delete_file, open_readable, open_writable
from ._query import PathKind, is_directory, is_file, path_exists, path_kind
from ._tempdir import (
    MAX_NAME_ATTEMPTS,
    TMPDIR_ENV,
    TemporaryDir,
    TempDirState,
    temp_root,
)

__all__ = [
    "MAX_NAME_ATTEMPTS",
    "NATIVE_CODEC",
    "PORTABLE_SEP",
    "TMPDIR_ENV",
    "NativeCodec",
    "NativePath",
    "PathKind",
    "PortableFilename",
    "PosixCodec",
    "TempDirState",
    "TemporaryDir",
    "WindowsCodec",
    "close_file",
    "codec_for",
    "create_dir",
    "create_dir_tree",
    "delete_dir_contents",
    "delete_dir_tree",
    "delete_file",
    "is_directory",
    "is_file",
    "open_readable",
    "open_writable",
    "path_exists",
    "path_kind",
    "temp_root",
]
