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

"""Assertions shared by the filesystem tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from portafs.filesystem import PortableFilename, path_exists

type FilenameFactory = Callable[..., PortableFilename]

# Permission bits are not enforced for root, nor on Windows.
PERMISSIONS_ENFORCED = os.name != "nt" and os.geteuid() != 0


def assert_exists(path: PortableFilename) -> None:
    assert path_exists(path), f"Path {path.to_string()!r} doesn't exist"


def assert_not_exists(path: PortableFilename) -> None:
    assert not path_exists(path), f"Path {path.to_string()!r} exists"


def touch(path: PortableFilename, content: bytes = b"") -> None:
    with open(path, "wb") as handle:
        _ = handle.write(content)


def events(records: list[logging.LogRecord]) -> list[str]:
    return [getattr(record, "event", "") for record in records]
