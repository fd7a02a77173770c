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

"""Tests for existence and kind queries."""

from __future__ import annotations

import errno
import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from portafs.errors import PathIOError
from portafs.filesystem import (
    PathKind,
    is_directory,
    is_file,
    path_exists,
    path_kind,
)
from tests.helpers.filesystem import PERMISSIONS_ENFORCED, FilenameFactory, touch


def test_missing_path_does_not_exist(filename_in: FilenameFactory) -> None:
    fn = filename_in("missing")
    assert path_exists(fn) is False
    assert path_kind(fn) is None


def test_missing_parent_is_not_an_error(filename_in: FilenameFactory) -> None:
    assert path_exists(filename_in("no", "such", "parent")) is False


def test_file_below_plain_file_does_not_exist(filename_in: FilenameFactory) -> None:
    touch(filename_in("plain"))
    assert path_exists(filename_in("plain", "child")) is False


def test_directory_kind(filename_in: FilenameFactory) -> None:
    fn = filename_in()
    assert path_exists(fn)
    assert path_kind(fn) is PathKind.DIRECTORY
    assert is_directory(fn)
    assert not is_file(fn)


def test_file_kind(filename_in: FilenameFactory) -> None:
    fn = filename_in("data.bin")
    touch(fn, b"payload")
    assert path_kind(fn) is PathKind.FILE
    assert is_file(fn)
    assert not is_directory(fn)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
def test_fifo_is_other_kind(filename_in: FilenameFactory) -> None:
    fn = filename_in("pipe")
    os.mkfifo(fn)
    assert path_kind(fn) is PathKind.OTHER
    assert path_exists(fn)


@pytest.fixture
def locked_dir(tmp_path: Path) -> Iterator[Path]:
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "inner").mkdir()
    locked.chmod(0o000)
    try:
        yield locked
    finally:
        locked.chmod(0o755)


@pytest.mark.skipif(not PERMISSIONS_ENFORCED, reason="permissions not enforced")
def test_unreadable_parent_raises(
    locked_dir: Path, filename_in: FilenameFactory
) -> None:
    with pytest.raises(PathIOError) as exc:
        path_exists(filename_in("locked", "inner"))
    assert exc.value.errno == errno.EACCES
    assert exc.value.filename.endswith("locked/inner")
    assert isinstance(exc.value.__cause__, PermissionError)
