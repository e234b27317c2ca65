"""Tests for the cookie jar."""

from __future__ import annotations

from solidlogin.cookies import (
    Cookie,
    CookieJar,
    parse_set_cookie,
    split_cookies_string,
)

# -------------------------------------------------------------------
# split_cookies_string
# -------------------------------------------------------------------


class TestSplitCookiesString:
    """Test splitting of combined Set-Cookie headers."""

    def test_single_cookie(self):
        assert split_cookies_string("a=1; Path=/") == ["a=1; Path=/"]

    def test_two_cookies(self):
        assert split_cookies_string("a=1, b=2") == ["a=1", "b=2"]

    def test_expires_comma_is_not_a_separator(self):
        header = (
            "_session=abc; Expires=Wed, 21 Oct 2015 07:28:00 GMT; Path=/, "
            "_session.legacy=def; HttpOnly"
        )
        assert split_cookies_string(header) == [
            "_session=abc; Expires=Wed, 21 Oct 2015 07:28:00 GMT; Path=/",
            "_session.legacy=def; HttpOnly",
        ]

    def test_trailing_expires_date(self):
        header = "a=1; expires=Thu, 01 Jan 1970 00:00:00 GMT"
        assert split_cookies_string(header) == [header]

    def test_empty_string(self):
        assert split_cookies_string("") == []

    def test_value_with_equals_signs(self):
        """Base64 padding in values is kept intact."""
        assert split_cookies_string("tok=YWJj==, other=x") == ["tok=YWJj==", "other=x"]


# -------------------------------------------------------------------
# parse_set_cookie
# -------------------------------------------------------------------


class TestParseSetCookie:
    """Test parsing of a single Set-Cookie entry."""

    def test_name_and_value(self):
        cookie = parse_set_cookie("_interaction=xyz")
        assert cookie == Cookie(name="_interaction", value="xyz")

    def test_attributes_lowercased(self):
        cookie = parse_set_cookie("a=1; Path=/idp; Secure; HttpOnly; SameSite=Lax")
        assert cookie is not None
        assert cookie.attributes == {
            "path": "/idp",
            "secure": True,
            "httponly": True,
            "samesite": "Lax",
        }

    def test_value_kept_raw(self):
        """Values are not URL-decoded or unquoted."""
        cookie = parse_set_cookie('a="b+c/d%20e"')
        assert cookie is not None
        assert cookie.value == '"b+c/d%20e"'

    def test_empty_value(self):
        cookie = parse_set_cookie("a=; Max-Age=0")
        assert cookie is not None
        assert cookie.value == ""
        assert cookie.attributes == {"max-age": "0"}

    def test_no_equals_returns_none(self):
        assert parse_set_cookie("garbage") is None

    def test_empty_name_returns_none(self):
        assert parse_set_cookie("=value") is None


# -------------------------------------------------------------------
# CookieJar
# -------------------------------------------------------------------


class TestCookieJar:
    """Test CookieJar record/render semantics."""

    def test_empty_jar_renders_empty_string(self):
        jar = CookieJar()
        assert jar.render() == ""
        assert len(jar) == 0

    def test_render_single(self):
        jar = CookieJar()
        jar.record("a=1; Path=/")
        assert jar.render() == "a=1"

    def test_render_insertion_order(self):
        jar = CookieJar()
        jar.record("z=26")
        jar.record("a=1")
        jar.record("m=13")
        assert jar.render() == "z=26; a=1; m=13"

    def test_later_value_wins(self):
        jar = CookieJar()
        jar.record("a=1, b=2")
        jar.record("a=3")
        assert jar.render() == "a=3; b=2"

    def test_overwrite_keeps_position(self):
        jar = CookieJar()
        jar.record("a=1")
        jar.record("b=2")
        jar.record("a=9")
        assert jar.render().startswith("a=9")

    def test_duplicate_in_one_header(self):
        jar = CookieJar()
        jar.record("a=1, a=2")
        assert jar.render() == "a=2"

    def test_never_duplicates_names(self):
        jar = CookieJar()
        for header in ["a=1, b=1", "b=2; Path=/", "c=1, a=2", "a=3, c=2"]:
            jar.record(header)
        names = [part.split("=", 1)[0] for part in jar.render().split("; ")]
        assert names == ["a", "b", "c"]
        assert jar.render() == "a=3; b=2; c=2"

    def test_record_iterable_of_headers(self):
        jar = CookieJar()
        jar.record(["a=1; HttpOnly", "b=2; Expires=Wed, 21 Oct 2015 07:28:00 GMT"])
        assert jar.render() == "a=1; b=2"

    def test_ignores_nameless_entries(self):
        jar = CookieJar()
        jar.record("garbage")
        assert jar.render() == ""

    def test_render_is_pure(self):
        jar = CookieJar()
        jar.record("a=1, b=2")
        assert jar.render() == jar.render()
        assert len(jar) == 2

    def test_contains_and_get(self):
        jar = CookieJar()
        jar.record("a=1; Secure")
        assert "a" in jar
        assert "b" not in jar
        cookie = jar.get("a")
        assert cookie is not None
        assert cookie.attributes == {"secure": True}
        assert jar.get("b") is None

    def test_iterates_cookies(self):
        jar = CookieJar()
        jar.record("a=1, b=2")
        assert [c.name for c in jar] == ["a", "b"]
