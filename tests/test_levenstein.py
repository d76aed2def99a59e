import pytest

from minftp.levenstein import _levenstein, get_suggestion


@pytest.mark.parametrize("s1, s2, distance", [
    ("", "", 0),
    ("LIST", "LIST", 0),
    ("LST", "LIST", 1),
    ("", "PWD", 3),
    ("KITTEN", "SITTING", 3),
])
def test_levenstein(s1, s2, distance):
    assert _levenstein(s1, s2) == distance


def test_get_suggestion():
    assert get_suggestion("pwd") == "PWD"
    assert get_suggestion("lst") == "LIST"
    assert get_suggestion("xyzzyplugh") == ""
