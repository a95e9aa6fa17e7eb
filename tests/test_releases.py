"""Tests for upstream release resolution."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from hypothesis import given
from hypothesis import strategies as st

from buildforge.services.releases import (
    STABLE_TAG_PATTERN,
    VersionResolver,
    parse_stable_tag,
    select_stable_releases,
)

RELEASES_URL = "https://api.example.test/repos/engine/engine/releases"


def mock_response(payload: object) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestParseStableTag:
    """Tests for parse_stable_tag."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("4.2.1-stable", (4, 2, 1)),
            ("4.3-stable", (4, 3, 0)),
            ("3.5.10-stable", (3, 5, 10)),
            ("4.3.0-rc1", None),
            ("4.3-beta2", None),
            ("4.3-stable-mono", None),
            ("v4.3-stable", None),
            ("4-stable", None),
            ("", None),
        ],
    )
    def test_parse(self, tag: str, expected: tuple[int, int, int] | None) -> None:
        assert parse_stable_tag(tag) == expected


class TestSelectStableReleases:
    """Tests for filtering and ordering of release tags."""

    def test_orders_by_parsed_version_descending(self) -> None:
        """Numeric ordering, not string ordering."""
        tags = ["4.2-stable", "4.10-stable", "4.2.2-stable", "3.6-stable", "4.9.1-stable"]
        result = select_stable_releases(tags, limit=10)
        assert [c.tag for c in result] == [
            "4.10-stable",
            "4.9.1-stable",
            "4.2.2-stable",
            "4.2-stable",
            "3.6-stable",
        ]

    def test_excludes_prereleases(self) -> None:
        tags = ["4.3.0-rc1", "4.3-stable", "4.4-dev1", "", "4.2.1-stable"]
        result = select_stable_releases(tags, limit=10)
        assert [c.tag for c in result] == ["4.3-stable", "4.2.1-stable"]

    def test_truncates_to_limit(self) -> None:
        tags = [f"4.{n}-stable" for n in range(8)]
        result = select_stable_releases(tags, limit=3)
        assert [c.tag for c in result] == ["4.7-stable", "4.6-stable", "4.5-stable"]

    def test_ties_break_on_raw_tag(self) -> None:
        """Tags parsing to the same version come out in a fixed order."""
        result = select_stable_releases(["4.3-stable", "4.3.0-stable"], limit=10)
        again = select_stable_releases(["4.3.0-stable", "4.3-stable"], limit=10)
        assert [c.tag for c in result] == [c.tag for c in again] == [
            "4.3.0-stable",
            "4.3-stable",
        ]

    def test_version_string(self) -> None:
        (candidate,) = select_stable_releases(["4.2.1-stable"], limit=1)
        assert candidate.version == (4, 2, 1)
        assert candidate.version_string == "4.2.1"

    @given(
        st.lists(
            st.one_of(
                st.builds(
                    lambda a, b, c, suffix: f"{a}.{b}{c}{suffix}",
                    st.integers(0, 20),
                    st.integers(0, 20),
                    st.sampled_from(["", ".0", ".1", ".12"]),
                    st.sampled_from(["-stable", "-rc1", "-beta3", "-dev", ""]),
                ),
                st.text(max_size=12),
            )
        ),
        st.integers(min_value=1, max_value=15),
    )
    def test_only_stable_and_non_increasing(self, tags: list[str], limit: int) -> None:
        """Every result is a stable tag and the sequence never increases."""
        result = select_stable_releases(tags, limit=limit)
        assert len(result) <= limit
        assert all(STABLE_TAG_PATTERN.fullmatch(c.tag) for c in result)
        versions = [c.version for c in result]
        assert versions == sorted(versions, reverse=True)


class TestVersionResolver:
    """Tests for VersionResolver network handling."""

    def test_fetches_and_filters(self) -> None:
        payload = [
            {"tag_name": "4.3-stable"},
            {"tag_name": "4.4-rc1"},
            {"tag_name": "4.2.2-stable", "name": "Godot 4.2.2"},
            {"name": "no tag"},
            {"tag_name": None},
            "garbage",
        ]
        with patch(
            "buildforge.services.releases.requests.get", return_value=mock_response(payload)
        ) as get:
            result = VersionResolver(RELEASES_URL, token="").fetch_recent_stable_releases(5)

        assert [c.tag for c in result] == ["4.3-stable", "4.2.2-stable"]
        args, kwargs = get.call_args
        assert args[0] == RELEASES_URL
        assert kwargs["timeout"] == 30

    def test_sends_token(self) -> None:
        with patch(
            "buildforge.services.releases.requests.get", return_value=mock_response([])
        ) as get:
            VersionResolver(RELEASES_URL, token="secret").fetch_tags()
        assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_no_token_header_when_empty(self) -> None:
        with patch(
            "buildforge.services.releases.requests.get", return_value=mock_response([])
        ) as get:
            VersionResolver(RELEASES_URL, token="").fetch_tags()
        assert "Authorization" not in get.call_args.kwargs["headers"]

    @pytest.mark.parametrize(
        "error",
        [
            requests.ConnectionError("unreachable"),
            requests.Timeout("slow"),
        ],
    )
    def test_transport_failure_returns_empty(self, error: Exception) -> None:
        with patch("buildforge.services.releases.requests.get", side_effect=error):
            assert VersionResolver(RELEASES_URL, token="").fetch_recent_stable_releases(5) == []

    def test_http_error_returns_empty(self) -> None:
        response = mock_response([])
        response.raise_for_status.side_effect = requests.HTTPError("403 rate limited")
        with patch("buildforge.services.releases.requests.get", return_value=response):
            assert VersionResolver(RELEASES_URL, token="").fetch_recent_stable_releases(5) == []

    def test_invalid_json_returns_empty(self) -> None:
        response = mock_response(None)
        response.json.side_effect = ValueError("Expecting value")
        with patch("buildforge.services.releases.requests.get", return_value=response):
            assert VersionResolver(RELEASES_URL, token="").fetch_recent_stable_releases(5) == []

    def test_non_list_payload_returns_empty(self) -> None:
        payload = {"message": "Not Found"}
        with patch(
            "buildforge.services.releases.requests.get", return_value=mock_response(payload)
        ):
            assert VersionResolver(RELEASES_URL, token="").fetch_recent_stable_releases(5) == []
