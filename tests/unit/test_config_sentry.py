# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for the config_sentry.py module."""

from sentry_sdk.types import Event

from favicache.configs.app_configs.config_sentry import REDACTED_TEXT, strip_sensitive_data

mock_sentry_hint: dict[str, list] = {"exc_info": [RuntimeError, RuntimeError(), None]}


def build_event() -> Event:
    """Return a Sentry event captured while downloading an icon."""
    return {
        "request": {
            "method": "GET",
            "url": "http://localhost:8000/icons/example.com/icon.png",
            "cookies": {"session": "abc"},
            "headers": {"Cookie": "session=abc", "User-Agent": "curl/8.0"},
        },
        "exception": {
            "values": [
                {
                    "stacktrace": {
                        "frames": [
                            {
                                "filename": "favicache/icons/resolver.py",
                                "function": "download_icon",
                                "vars": {
                                    "domain": "'example.com'",
                                    "cookies": "'xsrf=token; '",
                                    "page": "Page(url='https://example.com')",
                                },
                            },
                            {
                                "filename": "favicache/icons/fetcher.py",
                                "function": "get",
                                "vars": {"url": "'https://example.com/a.png'"},
                            },
                        ]
                    }
                }
            ]
        },
    }


def test_strip_sensitive_data() -> None:
    """Test that cookies are redacted from the request and from frame locals."""
    event = strip_sensitive_data(build_event(), mock_sentry_hint)

    assert event is not None
    assert event["request"]["cookies"] == REDACTED_TEXT
    assert event["request"]["headers"] == {
        "Cookie": REDACTED_TEXT,
        "User-Agent": "curl/8.0",
    }

    frames = event["exception"]["values"][0]["stacktrace"]["frames"]
    assert frames[0]["vars"] == {
        "domain": "'example.com'",
        "cookies": REDACTED_TEXT,
        "page": REDACTED_TEXT,
    }
    assert frames[1]["vars"] == {"url": "'https://example.com/a.png'"}


def test_strip_sensitive_data_without_request() -> None:
    """Test that events without request or exception data pass through."""
    event: Event = {"message": "Sentry initialized"}

    assert strip_sensitive_data(event, mock_sentry_hint) == {"message": "Sentry initialized"}
