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

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

import portafs.dbc as dbc_module
from portafs.filesystem import PortableFilename
from tests.helpers.filesystem import FilenameFactory


@pytest.fixture(autouse=True)
def reset_dbc_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with contracts enforced, then restore the default."""
    monkeypatch.delenv("PORTAFS_DBC", raising=False)
    dbc_module.enable_dbc()
    yield
    dbc_module._forced_state = None


@pytest.fixture
def filename_in(tmp_path: Path) -> FilenameFactory:
    """Return a factory building filenames below ``tmp_path``."""

    base = PortableFilename.from_string(str(tmp_path))

    def factory(*segments: str) -> PortableFilename:
        result = base
        for segment in segments:
            result = result.join(segment)
        return result

    return factory
