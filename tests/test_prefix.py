import pytest

from fakes3.prefix import (
    CommonPrefix,
    Prefix,
    new_folder_prefix,
    new_prefix,
)


@pytest.mark.parametrize(
    "key,p,d,out,common",
    [
        ("foo/bar", "foo", "/", "foo/", True),
        ("foo/bar", "foo/ba", "/", "foo/bar", False),
        ("foo/bar", "foo/ba/", "/", None, False),
        ("foo/bar", "/", "/", "foo/", True),
        ("foo/bar", "foo/b", None, "foo/b", False),
        ("foo/bar", "foo/", None, "foo/", False),
        ("foo/bar", "foo", None, "foo", False),
        ("foo/bar", "fo", None, "fo", False),
        ("foo/bar", "f", None, "f", False),
        ("foo/bar", "q", None, None, False),
        ("foo/bar", None, None, "foo/bar", False),
        ("foo/bar", "", None, "", False),
    ],
)
def test_prefix_match(key, p, d, out, common):
    prefix = Prefix(
        has_prefix=p is not None,
        has_delimiter=d is not None,
        prefix=p or "",
        delimiter=d or "",
    )
    match = prefix.match(key)
    if out is None:
        assert match is None
    else:
        assert match is not None
        assert match.matched_part == out
        assert match.common_prefix == common
        assert match.key == key


@pytest.mark.parametrize(
    "p,d,out",
    [
        (None, None, Prefix()),
        ("foo", None, Prefix(has_prefix=True, prefix="foo")),
        (None, "foo", Prefix(has_delimiter=True, delimiter="foo")),
        ("foo", "bar", Prefix(has_prefix=True, prefix="foo", has_delimiter=True, delimiter="bar")),
    ],
)
def test_new_prefix(p, d, out):
    assert new_prefix(p, d) == out


@pytest.mark.parametrize(
    "p,d,ok,path,rem",
    [
        ("foo/bar", "/", True, "foo", "bar"),
        ("foo/bar/", "/", True, "foo/bar", ""),
        ("foo/bar/b", "/", True, "foo/bar", "b"),
        ("foo", "/", True, "", "foo"),
        ("foo/", "/", True, "foo", ""),
        ("/", "/", True, "", ""),
        ("", "/", True, "", ""),
        ("", None, False, "", ""),
        ("foo", None, False, "", ""),
        ("foo/bar", None, False, "", ""),
        ("foo-bar", "-", False, "", ""),
    ],
)
def test_prefix_file_prefix(p, d, ok, path, rem):
    found_path, found_rem, found_ok = new_prefix(p, d).file_prefix()
    assert found_ok == ok
    if ok:
        assert found_path == path
        assert found_rem == rem


def test_new_folder_prefix():
    p = new_folder_prefix("foo/")
    assert p == Prefix(has_prefix=True, prefix="foo/", has_delimiter=True, delimiter="/")
    assert p.file_prefix() == ("foo", "", True)


def test_from_query_empty_values_are_absent():
    p = Prefix.from_query({"prefix": [""], "delimiter": ["/"]})
    assert p.has_prefix is False
    assert p.has_delimiter is True
    assert p.delimiter == "/"


def test_from_query_missing_keys():
    p = Prefix.from_query({"prefix": ["abc"]})
    assert p == Prefix(has_prefix=True, prefix="abc")


def test_str():
    assert str(new_prefix("a", "/")) == 'prefix:"a", delim:"/"'
    assert str(new_prefix("a", None)) == 'prefix:"a"'


def test_as_common_prefix():
    match = new_folder_prefix("foo").match("foo/bar")
    assert match.as_common_prefix() == CommonPrefix("foo/")