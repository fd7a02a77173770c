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

"""Conversion between portable path text and the host's native path form.

Two codecs exist:

- ``PosixCodec``: native paths are UTF-8 encoded ``bytes`` with ``/``
  separators. Any byte except NUL is allowed in a segment.
- ``WindowsCodec``: native paths are ``str`` with ``\\`` separators. Input
  backslashes are accepted and become ``/`` in the portable form. Reserved
  characters and control characters are rejected.

``NATIVE_CODEC`` is chosen once at import time from ``os.name``. Everything
above this module works on portable text and passes native values through to
OS calls untouched.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import ClassVar, Final, Protocol

from ..dbc import pure
from ..errors import InvalidPathError

PORTABLE_SEP: Final[str] = "/"

type NativePath = bytes | str

_WINDOWS_RESERVED: Final[re.Pattern[str]] = re.compile(r'[<>"|?*\x01-\x1f]')
_WINDOWS_DRIVE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z]:")


class NativeCodec(Protocol):
    """Bidirectional converter for one platform's path encoding."""

    @property
    def separator(self) -> NativePath: ...

    def to_native(self, portable: str) -> NativePath: ...

    def from_native(self, native: NativePath) -> str: ...

    def normalize(self, text: str) -> str: ...


def check_portable(text: str) -> None:
    """Reject text that cannot appear in a portable path on any platform."""

    if "\x00" in text:
        raise InvalidPathError(text, "embedded NUL character")
    try:
        _ = text.encode("utf-8")
    except UnicodeEncodeError as err:
        raise InvalidPathError(text, "not valid UTF-8") from err


@dataclass(frozen=True, slots=True)
class PosixCodec:
    """Narrow UTF-8 byte paths."""

    separator: ClassVar[bytes] = b"/"

    @pure
    def normalize(self, text: str) -> str:
        check_portable(text)
        return text

    @pure
    def to_native(self, portable: str) -> bytes:
        return self.normalize(portable).encode("utf-8")

    @pure
    def from_native(self, native: NativePath) -> str:
        if isinstance(native, str):
            return self.normalize(native)
        try:
            text = native.decode("utf-8")
        except UnicodeDecodeError as err:
            raise InvalidPathError(native, "not valid UTF-8") from err
        return self.normalize(text)


@dataclass(frozen=True, slots=True)
class WindowsCodec:
    """Wide-character paths with backslash separators."""

    separator: ClassVar[str] = "\\"

    @pure
    def normalize(self, text: str) -> str:
        check_portable(text)
        portable = text.replace("\\", PORTABLE_SEP)
        if _WINDOWS_RESERVED.search(portable):
            raise InvalidPathError(text, "contains a character reserved on Windows")
        body = portable[2:] if _WINDOWS_DRIVE.match(portable) else portable
        if ":" in body:
            raise InvalidPathError(text, "':' is only allowed after a drive letter")
        return portable

    @pure
    def to_native(self, portable: str) -> str:
        return self.normalize(portable).replace(PORTABLE_SEP, self.separator)

    @pure
    def from_native(self, native: NativePath) -> str:
        if isinstance(native, bytes):
            try:
                native = native.decode("utf-8")
            except UnicodeDecodeError as err:
                raise InvalidPathError(native, "not valid UTF-8") from err
        return self.normalize(native)


def codec_for(os_name: str) -> NativeCodec:
    """Return the codec used by a platform named like :data:`os.name`."""

    if os_name == "nt":
        return WindowsCodec()
    return PosixCodec()


NATIVE_CODEC: Final[NativeCodec] = codec_for(os.name)


__all__ = [
    "NATIVE_CODEC",
    "PORTABLE_SEP",
    "NativeCodec",
    "NativePath",
    "PosixCodec",
    "WindowsCodec",
    "check_portable",
    "codec_for",
]
