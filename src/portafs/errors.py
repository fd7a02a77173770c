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

"""Base exception hierarchy for :mod:`portafs`."""

from __future__ import annotations

import errno as _errno
import os


class PortafsError(Exception):
    """Base class for all portafs exceptions.

    Callers can catch every library-specific failure with a single handler
    while standard Python exceptions propagate normally.

    Example:
        Catch any portafs-specific error::

            try:
                create_dir(filename)
            except PortafsError as e:
                logger.error("Filesystem error: %s", e)

    Note:
        Subclasses also inherit from standard exception types (``ValueError``,
        ``OSError``) so existing handlers for those keep working.
    """


class InvalidPathError(PortafsError, ValueError):
    """Raised when a string or segment cannot be represented as a path.

    This is always a caller-input problem and is never retried internally.
    Common causes:

    - Embedded NUL characters
    - Text that is not valid UTF-8 (undecodable bytes, lone surrogates)
    - Characters reserved by the host platform (``<>"|?*`` on Windows)
    - An empty or absolute segment passed to ``PortableFilename.join``

    Attributes:
        path: The offending input value.
        reason: Short human-readable description of the problem.
    """

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class PathIOError(PortafsError, OSError):
    """Raised when an operating system call on a path fails.

    Covers permission errors, missing parents, disk exhaustion, entries that
    vanish mid-operation and targets of the wrong kind (a file where a
    directory was expected or the reverse). The ``errno``, ``strerror`` and
    ``filename`` attributes follow :class:`OSError`; ``filename`` holds the
    portable form of the path. When the failure originated in an OS call the
    original :class:`OSError` is chained as ``__cause__``.

    Example:
        Distinguishing failure kinds::

            try:
                delete_file(filename)
            except PathIOError as e:
                if e.errno == errno.EISDIR:
                    ...

    Note:
        Absence of a target is never reported through this exception by the
        idempotent create/delete primitives.
    """

    @classmethod
    def from_os_error(
        cls, action: str, path: str | None, error: OSError
    ) -> PathIOError:
        """Wrap ``error`` raised while performing ``action`` on ``path``."""

        code = error.errno if error.errno is not None else _errno.EIO
        detail = error.strerror or str(error)
        return cls(code, f"{action} failed: {detail}", path)

    @classmethod
    def wrong_kind(cls, code: int, path: str, message: str) -> PathIOError:
        """Report a target that exists but has the wrong kind."""

        return cls(code, f"{message}: {os.strerror(code)}", path)


__all__ = [
    "InvalidPathError",
    "PathIOError",
    "PortafsError",
]
