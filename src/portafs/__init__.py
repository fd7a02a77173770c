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

"""Cross-platform filenames and idempotent filesystem lifecycle primitives."""

from __future__ import annotations

from . import dbc, errors, filesystem, logging
from .errors import InvalidPathError, PathIOError, PortafsError
from .filesystem import (
    PathKind,
    PortableFilename,
    TemporaryDir,
    close_file,
    create_dir,
    create_dir_tree,
    delete_dir_contents,
    delete_dir_tree,
    delete_file,
    open_readable,
    open_writable,
    path_exists,
    path_kind,
)

__all__ = [
    "InvalidPathError",
    "PathIOError",
    "PathKind",
    "PortableFilename",
    "PortafsError",
    "TemporaryDir",
    "close_file",
    "create_dir",
    "create_dir_tree",
    "dbc",
    "delete_dir_contents",
    "delete_dir_tree",
    "delete_file",
    "errors",
    "filesystem",
    "logging",
    "open_readable",
    "open_writable",
    "path_exists",
    "path_kind",
]
