import pytest

from lnxcore.keys import KeyBuilder


def test_key_builder():
    builder = KeyBuilder()

    builder.push_part("hello")
    assert builder.as_str() == "hello"

    builder.push_part("world")
    assert builder.as_str() == "hello.world"

    builder.push_part(".bar")
    assert builder.as_str() == "hello.world..bar"

    builder.pop_part()
    assert builder.as_str() == "hello.world"

    builder.pop_part()
    assert builder.as_str() == "hello"

    builder.pop_part()
    assert builder.as_str() == ""

    builder.pop_part()
    assert builder.as_str() == ""


def test_is_empty_and_num_parts():
    builder = KeyBuilder()
    assert builder.is_empty()
    assert builder.num_parts() == 0
    builder.push_part("a")
    builder.push_part("b")
    assert not builder.is_empty()
    assert builder.num_parts() == 2
    builder.pop_part()
    assert builder.num_parts() == 1


def test_truncate_parts():
    builder = KeyBuilder()
    for part in ("payload", "nested", "demo"):
        builder.push_part(part)
    builder.truncate_parts(1)
    assert builder.as_str() == "payload"
    assert builder.num_parts() == 1


def test_truncate_parts_to_zero():
    builder = KeyBuilder()
    builder.push_part("a")
    builder.push_part("b")
    builder.truncate_parts(0)
    assert builder.as_str() == ""
    assert builder.is_empty()


def test_truncate_parts_beyond_length_keeps_everything():
    builder = KeyBuilder()
    builder.push_part("a")
    builder.push_part("b")
    builder.truncate_parts(5)
    assert builder.as_str() == "a.b"
    assert builder.num_parts() == 2


def test_truncate_negative_raises():
    with pytest.raises(ValueError):
        KeyBuilder().truncate_parts(-1)


def test_slice_at():
    builder = KeyBuilder()
    builder.push_part("foo")
    builder.push_part("bar")
    builder.push_part("baz")
    assert builder.slice_at(len("foo.bar") + 1) == "baz"
    assert builder.slice_at(0) == "foo.bar.baz"
    assert builder.slice_at(len(builder)) == ""


def test_lengths_are_in_bytes():
    builder = KeyBuilder()
    builder.push_part("é")
    assert len(builder) == 2
    builder.push_part("x")
    assert builder.as_str() == "é.x"
    assert builder.slice_at(3) == "x"
    builder.pop_part()
    assert builder.as_str() == "é"


def test_slice_inside_character_raises():
    builder = KeyBuilder()
    builder.push_part("é")
    with pytest.raises(UnicodeDecodeError):
        builder.slice_at(1)


def test_push_after_pop_reuses_position():
    builder = KeyBuilder()
    builder.push_part("a")
    builder.push_part("b")
    builder.pop_part()
    builder.push_part("c")
    assert builder.as_str() == "a.c"
    assert str(builder) == "a.c"