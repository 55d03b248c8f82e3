from synapse_notes.core.text import count_words, normalize_title, slugify


def test_basic():
    assert slugify("Hello World") == "hello-world"


def test_slashes():
    assert slugify("a/b\\c") == "a-b-c"


def test_collapses_and_trims_dashes():
    assert slugify("  --Hi!!  there--  ") == "hi-there"


def test_keeps_unicode_letters():
    assert slugify("Café Notes") == "café-notes"


def test_empty():
    assert slugify("") == ""
    assert slugify(None) == ""
    assert slugify("!!!") == ""


def test_max_len():
    assert len(slugify("x" * 200)) == 50


def test_count_words():
    assert count_words("") == 0
    assert count_words(None) == 0
    assert count_words("one  two\nthree\tfour") == 4


def test_normalize_title():
    assert normalize_title(None) is None
    assert normalize_title("") is None
    assert normalize_title("   ") is None
    assert normalize_title(" Kept ") == " Kept "
