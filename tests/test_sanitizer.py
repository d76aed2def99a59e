import pytest

from minftp.core.sanitizer import sanitize_input


@pytest.mark.parametrize("raw, expected", [
    ("admin", "admin"),
    ("ad min", "admin"),
    ("pa\r\nss", "pass"),
    ("file\x00name.txt", "filename.txt"),
    ("\x1b[31mred\x1b[0m", "[31mred[0m"),
    ("notes-2024_v1.txt", "notes-2024_v1.txt"),
    ("pub/incoming", "pub/incoming"),
    ("café", "café"),
    ("a+b=c~$", "abc"),
    ("", ""),
])
def test_sanitize_input(raw, expected):
    assert sanitize_input(raw) == expected


@pytest.mark.parametrize("raw", [
    "RETR x\r\nDELE y",
    "\t\x07\x7f\x1b\x00\r\n",
    "plain",
    "..\\..\r\n/etc/passwd",
])
def test_sanitize_input_removes_control_characters_and_is_idempotent(raw):
    cleaned = sanitize_input(raw)
    assert not any(ord(ch) < 32 or ord(ch) == 127 for ch in cleaned)
    assert sanitize_input(cleaned) == cleaned

    # Result is a subsequence of the input
    remaining = iter(raw)
    assert all(ch in remaining for ch in cleaned)
