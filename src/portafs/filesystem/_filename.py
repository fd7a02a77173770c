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

"""Immutable filename value holding portable and native path forms.

Example usage::

    from portafs.filesystem import PortableFilename

    base = PortableFilename.from_string("data/tables")
    child = base.join("part-0.parquet")
    assert child.to_string() == "data/tables/part-0.parquet"
    os.stat(child)  # __fspath__ hands the native form to the OS
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, override

from ..dbc import invariant, pure
from ..errors import InvalidPathError
from ._codec import NATIVE_CODEC, PORTABLE_SEP, NativePath, WindowsCodec

_CURRENT_DIR: Final[str] = "."

# "C:" prefixes only name a drive where the host has drive letters.
_DRIVE_LETTERS: bool = isinstance(NATIVE_CODEC, WindowsCodec)


def _forms_agree(filename: PortableFilename) -> tuple[bool, str]:
    decoded = NATIVE_CODEC.from_native(filename.native)
    return decoded == filename.portable, f"native form decodes to {decoded!r}"


def _is_drive(head: str) -> bool:
    if not _DRIVE_LETTERS:
        return False
    return len(head) == 2 and head[0].isalpha() and head[1] == ":"


@invariant(_forms_agree)
@dataclass(frozen=True, slots=True, order=True)
class PortableFilename:
    """A path held in portable (``/``, UTF-8 text) and native form.

    Instances are built with :meth:`from_string`, :meth:`from_native` or
    :meth:`join`; each validates the input and derives both forms. Equality,
    hashing and ordering only consider the portable form, so filenames reached
    through different constructors compare equal when they spell the same path.
    Constructing an instance directly with mismatched forms raises
    :class:`InvalidPathError`.

    Attributes:
        portable: Forward-slash path text.
        native: Path in the host's native encoding (``bytes`` on POSIX,
            backslash-separated ``str`` on Windows).
    """

    portable: str
    native: NativePath = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        expected = NATIVE_CODEC.to_native(self.portable)
        if self.native != expected or NATIVE_CODEC.from_native(expected) != (
            self.portable
        ):
            raise InvalidPathError(
                self.native, f"native form does not match {self.portable!r}"
            )

    @classmethod
    def from_string(cls, text: str | bytes) -> PortableFilename:
        """Parse UTF-8 path text.

        Raises:
            InvalidPathError: If ``text`` contains NUL, is not valid UTF-8, or
                cannot be represented on this platform.
        """
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as err:
                raise InvalidPathError(text, "not valid UTF-8") from err
        portable = NATIVE_CODEC.normalize(text)
        return cls(portable, NATIVE_CODEC.to_native(portable))

    @classmethod
    def from_native(cls, native: NativePath) -> PortableFilename:
        """Wrap a path already in native form (e.g. from ``os.scandir``)."""
        portable = NATIVE_CODEC.from_native(native)
        return cls(portable, NATIVE_CODEC.to_native(portable))

    def join(self, child: str) -> PortableFilename:
        """Append a relative ``child`` with exactly one separator between.

        Purely lexical: ``..`` segments are kept and symlinks are not resolved.

        Raises:
            InvalidPathError: If ``child`` is empty, absolute or invalid.
        """
        if not child:
            raise InvalidPathError(child, "cannot join an empty segment")
        segment = NATIVE_CODEC.normalize(child)
        if segment.startswith(PORTABLE_SEP):
            raise InvalidPathError(child, "cannot join an absolute path")
        if not self.portable:
            return self.from_string(segment)
        if self.portable.endswith(PORTABLE_SEP):
            return self.from_string(self.portable + segment)
        return self.from_string(self.portable + PORTABLE_SEP + segment)

    def parent(self) -> PortableFilename:
        """Return the lexical parent directory.

        One trailing separator is ignored, so ``"a/b/"`` and ``"a/b"`` share
        the parent ``"a"``. A bare name has parent ``"."``; roots (``"/"``, and
        ``"C:/"`` on Windows) are their own parent.
        """
        text = self.portable
        is_root = text == PORTABLE_SEP or _is_drive(text[:-1])
        if text.endswith(PORTABLE_SEP) and not is_root:
            text = text[:-1]
        index = text.rfind(PORTABLE_SEP)
        if index < 0:
            return self.from_string(_CURRENT_DIR)
        head = text[:index]
        if index == 0 or _is_drive(head):
            head = text[: index + 1]
        return self.from_string(head)

    def as_directory(self) -> PortableFilename:
        """Return this path with a trailing separator."""
        if self.portable.endswith(PORTABLE_SEP):
            return self
        return self.from_string(self.portable + PORTABLE_SEP)

    @property
    def name(self) -> str:
        """Final path segment, ignoring a trailing separator."""
        return self.portable.rstrip(PORTABLE_SEP).rsplit(PORTABLE_SEP, 1)[-1]

    @pure
    def to_string(self) -> str:
        """Return the portable form."""
        return self.portable

    @pure
    def to_native(self) -> NativePath:
        """Return the native form for direct use in OS calls."""
        return self.native

    def __fspath__(self) -> NativePath:
        return self.native

    def __truediv__(self, child: str) -> PortableFilename:
        return self.join(child)

    @override
    def __str__(self) -> str:
        return self.portable


__all__ = ["PortableFilename"]
