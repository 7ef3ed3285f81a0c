# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import pytest

from acceff_lib.core.error import AccEffError
from acceff_lib.properties.mode import Mode


@pytest.mark.parametrize(
    "string,mode",
    [
        ("local", Mode.LOCAL),
        ("OCDB", Mode.OCDB),
        ("Upload", Mode.UPLOAD),
        (" submit ", Mode.SUBMIT),
        ("test", Mode.TEST),
        ("full", Mode.FULL),
    ],
)
def test_mode_from_str(string, mode):
    assert Mode.fromStr(string) is mode


def test_mode_str_is_lowercase_name():
    assert [str(m) for m in Mode] == ["local", "ocdb", "upload", "submit", "test", "full"]


def test_mode_from_str_unknown_raises():
    with pytest.raises(AccEffError, match="Could not recognize a mode 'merge'"):
        Mode.fromStr("merge")
