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

"""Tests for native path codecs."""

from __future__ import annotations

import os

import pytest

from portafs.errors import InvalidPathError
from portafs.filesystem import (
    NATIVE_CODEC,
    PosixCodec,
    WindowsCodec,
    codec_for,
)


class TestCodecSelection:
    def test_nt_selects_windows_codec(self) -> None:
        assert isinstance(codec_for("nt"), WindowsCodec)

    def test_posix_selects_posix_codec(self) -> None:
        assert isinstance(codec_for("posix"), PosixCodec)

    def test_native_codec_matches_host(self) -> None:
        assert NATIVE_CODEC == codec_for(os.name)


class TestPosixCodec:
    """PosixCodec encodes to UTF-8 bytes and keeps forward slashes."""

    codec = PosixCodec()

    def test_to_native_encodes_utf8(self) -> None:
        assert self.codec.to_native("dir/ファイル") == "dir/ファイル".encode()

    def test_from_native_decodes_utf8(self) -> None:
        assert self.codec.from_native("dir/é".encode()) == "dir/é"

    def test_from_native_accepts_text(self) -> None:
        assert self.codec.from_native("a/b") == "a/b"

    def test_backslash_is_an_ordinary_character(self) -> None:
        assert self.codec.to_native("a\\b") == b"a\\b"

    def test_rejects_nul(self) -> None:
        with pytest.raises(InvalidPathError, match="NUL"):
            self.codec.to_native("a\x00b")

    def test_rejects_lone_surrogate(self) -> None:
        with pytest.raises(InvalidPathError, match="UTF-8"):
            self.codec.to_native("a\udcffb")

    def test_rejects_invalid_utf8_bytes(self) -> None:
        with pytest.raises(InvalidPathError, match="UTF-8") as exc:
            self.codec.from_native(b"bad-\xff")
        assert exc.value.path == b"bad-\xff"

    def test_rejects_nul_in_native_bytes(self) -> None:
        with pytest.raises(InvalidPathError):
            self.codec.from_native(b"a\x00")


class TestWindowsCodec:
    """WindowsCodec swaps separators and rejects reserved characters."""

    codec = WindowsCodec()

    def test_to_native_uses_backslashes(self) -> None:
        assert self.codec.to_native("C:/data/file.txt") == "C:\\data\\file.txt"

    def test_from_native_uses_forward_slashes(self) -> None:
        assert self.codec.from_native("C:\\data\\file.txt") == "C:/data/file.txt"

    def test_normalize_accepts_mixed_separators(self) -> None:
        assert self.codec.normalize("a\\b/c") == "a/b/c"

    def test_unc_path_round_trips(self) -> None:
        native = self.codec.to_native("//server/share/x")
        assert native == "\\\\server\\share\\x"
        assert self.codec.from_native(native) == "//server/share/x"

    def test_drive_letter_colon_allowed(self) -> None:
        assert self.codec.normalize("d:") == "d:"

    @pytest.mark.parametrize("char", ["<", ">", '"', "|", "?", "*", "\x07"])
    def test_rejects_reserved_characters(self, char: str) -> None:
        with pytest.raises(InvalidPathError, match="reserved"):
            self.codec.normalize(f"dir/a{char}b")

    def test_rejects_colon_outside_drive(self) -> None:
        with pytest.raises(InvalidPathError, match="drive letter"):
            self.codec.normalize("dir/stream:name")

    def test_rejects_nul(self) -> None:
        with pytest.raises(InvalidPathError, match="NUL"):
            self.codec.to_native("C:/a\x00")

    def test_from_native_accepts_utf8_bytes(self) -> None:
        assert self.codec.from_native("C:\\é".encode()) == "C:/é"

    def test_from_native_rejects_invalid_bytes(self) -> None:
        with pytest.raises(InvalidPathError, match="UTF-8"):
            self.codec.from_native(b"\xfe")
