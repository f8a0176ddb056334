"""
Tests for wuwa_catalog.resolve.urls — asset URL derivation.

Covers:
  - absolutize(): absolute kept, relative prefixed, protocol-relative, empty
  - rehost_by_marker(): slice at marker, host swap, extension rewrite, missing marker
  - rehost_by_prefix(): strip prefix, cut at first '.', template, missing prefix
"""

from __future__ import annotations

import pytest

from wuwa_catalog.errors import ResolveError
from wuwa_catalog.resolve.urls import (
    absolutize,
    is_absolute,
    rehost_by_marker,
    rehost_by_prefix,
    replace_extension,
)

_BASE = "https://api.encore.moe/resource/Data"
_HOST = "https://api.hakush.in/ww"


class TestAbsolutize:
    def test_absolute_unchanged(self):
        assert absolutize("http://x/h.png", _BASE) == "http://x/h.png"
        assert absolutize("HTTPS://x/h.png", _BASE) == "HTTPS://x/h.png"

    def test_relative_with_leading_slash(self):
        assert absolutize("/UI/Img/x.png", _BASE) == f"{_BASE}/UI/Img/x.png"

    def test_relative_without_leading_slash(self):
        assert absolutize("UI/Img/x.png", _BASE + "/") == f"{_BASE}/UI/Img/x.png"

    def test_protocol_relative(self):
        assert absolutize("//cdn.example/a.png", _BASE) == "https://cdn.example/a.png"

    @pytest.mark.parametrize("ref", ["", "   ", None])
    def test_empty_raises(self, ref):
        with pytest.raises(ResolveError):
            absolutize(ref, _BASE)  # type: ignore[arg-type]

    def test_is_absolute(self):
        assert is_absolute("https://a/b")
        assert not is_absolute("/a/b")
        assert not is_absolute("ftp://a/b")


class TestReplaceExtension:
    def test_simple(self):
        assert replace_extension("/UI/Img/x.png", ".webp") == "/UI/Img/x.webp"

    def test_engine_object_name(self):
        assert replace_extension("/UI/T_Card.T_Card", ".webp") == "/UI/T_Card.webp"

    def test_no_suffix_appends(self):
        assert replace_extension("/UI/Img/x", ".webp") == "/UI/Img/x.webp"


class TestRehostByMarker:
    def test_relative_reference_after_absolutize(self):
        url = absolutize("/UI/Img/x.png", _BASE)
        assert rehost_by_marker(url, "/UI/", _HOST, ".webp") == f"{_HOST}/UI/Img/x.webp"

    def test_engine_path(self):
        url = (
            "https://api.encore.moe/resource/Data/Game/Aki/UI/UIResources/Common/Image/"
            "IconRoleCard/T_IconRoleCard_1102_UI.T_IconRoleCard_1102_UI"
        )
        assert rehost_by_marker(url, "/UI/", _HOST, ".webp") == (
            f"{_HOST}/UI/UIResources/Common/Image/IconRoleCard/T_IconRoleCard_1102_UI.webp"
        )

    def test_query_string_dropped(self):
        url = "https://cdn.example/Game/UI/a.png?v=3"
        assert rehost_by_marker(url, "/UI/", _HOST, ".webp") == f"{_HOST}/UI/a.webp"

    def test_first_marker_occurrence_used(self):
        url = "https://cdn.example/UI/nested/UI/a.png"
        assert rehost_by_marker(url, "/UI/", _HOST, ".webp") == f"{_HOST}/UI/nested/UI/a.webp"

    def test_missing_marker_raises(self):
        with pytest.raises(ResolveError, match="Marker"):
            rehost_by_marker("https://cdn.example/img/a.png", "/UI/", _HOST, ".webp")

    def test_marker_in_host_only_is_missing(self):
        with pytest.raises(ResolveError):
            rehost_by_marker("https://UI.example/a.png", "/UI/", _HOST, ".webp")


class TestRehostByPrefix:
    _TEMPLATE = "https://api.hakush.in/ww/{path}.webp"

    def test_engine_path(self):
        ref = "/Game/Aki/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.T_IconWeapon21010011_UI"
        assert rehost_by_prefix(ref, "/Game/Aki/", self._TEMPLATE) == (
            "https://api.hakush.in/ww/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.webp"
        )

    def test_absolute_url_uses_path(self):
        ref = "https://cdn.example/Game/Aki/UI/Icon/T_A.T_A"
        assert rehost_by_prefix(ref, "/Game/Aki/", self._TEMPLATE) == "https://api.hakush.in/ww/UI/Icon/T_A.webp"

    def test_no_dot_keeps_whole_path(self):
        assert rehost_by_prefix("/Game/Aki/UI/T_A", "/Game/Aki/", self._TEMPLATE) == (
            "https://api.hakush.in/ww/UI/T_A.webp"
        )

    def test_missing_prefix_raises(self):
        with pytest.raises(ResolveError, match="Prefix"):
            rehost_by_prefix("/Other/UI/T_A.T_A", "/Game/Aki/", self._TEMPLATE)

    def test_nothing_after_prefix_raises(self):
        with pytest.raises(ResolveError):
            rehost_by_prefix("/Game/Aki/.T_A", "/Game/Aki/", self._TEMPLATE)

    def test_empty_raises(self):
        with pytest.raises(ResolveError):
            rehost_by_prefix("", "/Game/Aki/", self._TEMPLATE)


class TestMalformedReference:
    _BAD = "http://[bad/UI/h.png"

    def test_absolutize(self):
        with pytest.raises(ResolveError, match="Malformed"):
            absolutize(self._BAD, _BASE)

    def test_rehost_by_marker(self):
        with pytest.raises(ResolveError, match="Malformed"):
            rehost_by_marker(self._BAD, "/UI/", _HOST, ".webp")

    def test_rehost_by_prefix(self):
        with pytest.raises(ResolveError, match="Malformed"):
            rehost_by_prefix("http://[bad/Game/Aki/T_Icon.T_Icon", "/Game/Aki/", _HOST + "/{path}.webp")
