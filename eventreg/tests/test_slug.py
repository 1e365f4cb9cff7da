import pytest

from eventreg.events_service.slug import get_slug


def test_slug_transliterates_and_hyphenates():
    assert get_slug("Café Öl") == "cafe-ol"


def test_slug_is_stable():
    assert get_slug("Café Öl") == get_slug("Café Öl")
    assert get_slug(get_slug("Café Öl")) == "cafe-ol"


def test_every_space_becomes_a_hyphen():
    assert get_slug("a  b c") == "a--b-c"


@pytest.mark.parametrize("name, expected", [
    ("Þorrablót", "thorrablot"),
    ("Ærslagangur", "aerslagangur"),
    ("Fjörður", "fjordur"),
    ("Ýsa í dag", "ysa-i-dag"),
    ("Jól", "jol"),
])
def test_icelandic_letters(name, expected):
    assert get_slug(name) == expected


def test_unmapped_characters_pass_through():
    assert get_slug("Rock & Roll 2025!") == "rock-&-roll-2025!"
