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

import pytest

import portafs.dbc as dbc_module


@pytest.fixture(autouse=True, params=[True, False], ids=["contracts", "default"])
def reset_dbc_state(
    request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Run filesystem tests with contracts enforced and in the default mode."""
    monkeypatch.delenv("PORTAFS_DBC", raising=False)
    dbc_module._forced_state = bool(request.param)
    yield
    dbc_module._forced_state = None
