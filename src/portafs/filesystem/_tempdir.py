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

"""Scoped temporary directories.

Example usage::

    from portafs.filesystem import TemporaryDir, create_dir

    with TemporaryDir.make("ingest-") as tmp:
        create_dir(tmp.path.join("staging"))
        ...
    # the directory and everything inside it is gone here

Teardown happens on ``cleanup()``, on leaving a ``with`` block, when the
object is garbage collected, or at interpreter exit, whichever comes first.
It runs at most once and never raises.
"""

from __future__ import annotations

import errno
import os
import tempfile
import weakref
from collections.abc import Mapping
from enum import Enum, auto
from types import TracebackType
from typing import Final, Self, override
from uuid import uuid4

from ..dbc import in_state, state_machine, transition
from ..errors import PathIOError
from ..logging import StructuredLogger, get_logger
from ._dirs import create_dir, delete_dir_tree
from ._filename import PortableFilename

logger: StructuredLogger = get_logger(
    __name__, context={"component": "filesystem.tempdir"}
)

MAX_NAME_ATTEMPTS: Final[int] = 10
TMPDIR_ENV: Final[str] = "PORTAFS_TMPDIR"


class TempDirState(Enum):
    """Lifecycle of a :class:`TemporaryDir`."""

    UNINITIALIZED = auto()
    CREATED = auto()
    DESTROYED = auto()


def temp_root(env: Mapping[str, str] | None = None) -> PortableFilename:
    """Return the directory new temporary directories are created under.

    ``PORTAFS_TMPDIR`` wins when set; otherwise :func:`tempfile.gettempdir`
    decides (which honours ``TMPDIR``, ``TEMP`` and ``TMP``).
    """
    env = os.environ if env is None else env
    configured = env.get(TMPDIR_ENV)
    return PortableFilename.from_string(configured or tempfile.gettempdir())


def _unique_suffix() -> str:
    digits = uuid4().hex[:16]
    return "-".join(digits[i : i + 4] for i in range(0, 16, 4))


def _remove_tree(path: PortableFilename) -> None:
    try:
        deleted = delete_dir_tree(path)
    except Exception as err:
        logger.warning(
            "Failed to remove temporary directory.",
            event="temp_dir_cleanup_failed",
            context={"path": path, "error": str(err)},
        )
        return
    logger.debug(
        "Removed temporary directory.",
        event="temp_dir_removed",
        context={"path": path, "deleted": deleted},
    )


@state_machine(
    state_var="_state", states=TempDirState, initial=TempDirState.UNINITIALIZED
)
class TemporaryDir:
    """A uniquely named directory owned for the lifetime of this object.

    The directory is created on construction under ``root`` (see
    :func:`temp_root` for the default) and named ``prefix`` followed by 16
    random hex digits. Name collisions are retried up to
    :data:`MAX_NAME_ATTEMPTS` times.

    :attr:`path` always ends with a separator, so children can be appended
    with plain string concatenation as well as with ``join``.

    Teardown deletes the whole tree. Failures are logged at warning level and
    suppressed, because teardown often runs while another error unwinds.

    Raises:
        PathIOError: If the root is unusable or no free name was found.
    """

    _state: TempDirState

    def __init__(
        self, prefix: str, *, root: PortableFilename | str | None = None
    ) -> None:
        if root is None:
            base = temp_root()
        elif isinstance(root, PortableFilename):
            base = root
        else:
            base = PortableFilename.from_string(root)
        self._path = self._create(prefix, base)
        self._finalizer = weakref.finalize(self, _remove_tree, self._path)

    @classmethod
    def make(
        cls, prefix: str, *, root: PortableFilename | str | None = None
    ) -> TemporaryDir:
        """Create a new temporary directory named ``prefix`` + unique suffix."""
        return cls(prefix, root=root)

    @transition(from_=TempDirState.UNINITIALIZED, to=TempDirState.CREATED)
    def _create(self, prefix: str, base: PortableFilename) -> PortableFilename:
        for attempt in range(1, MAX_NAME_ATTEMPTS + 1):
            candidate = base.join(prefix + _unique_suffix())
            if create_dir(candidate):
                logger.debug(
                    "Created temporary directory.",
                    event="temp_dir_created",
                    context={"path": candidate, "attempt": attempt},
                )
                return candidate.as_directory()
            logger.debug(
                "Temporary directory name collision.",
                event="temp_dir_name_collision",
                context={"path": candidate, "attempt": attempt},
            )
        raise PathIOError.wrong_kind(
            errno.EEXIST,
            base.portable,
            f"No free name for prefix {prefix!r} after {MAX_NAME_ATTEMPTS} attempts",
        )

    @property
    def path(self) -> PortableFilename:
        """Directory path, with a trailing separator."""
        return self._path

    @property
    def state(self) -> TempDirState:
        return self._state

    @transition(
        from_=(TempDirState.CREATED, TempDirState.DESTROYED),
        to=TempDirState.DESTROYED,
    )
    def cleanup(self) -> None:
        """Delete the directory tree now. Later calls do nothing."""
        _ = self._finalizer()

    @in_state(TempDirState.CREATED)
    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    @override
    def __repr__(self) -> str:
        return f"TemporaryDir(path={self._path.portable!r}, state={self._state.name})"


__all__ = [
    "MAX_NAME_ATTEMPTS",
    "TMPDIR_ENV",
    "TemporaryDir",
    "TempDirState",
    "temp_root",
]
