#!/usr/bin/env python3
"""
Bitly Diagnostic - Session Transport Tests
Runs through a real requests.Session and Response, with a scripted adapter
in place of the network.
"""

import pytest

from .conftest import make_adapter_session
from .main import main
from .models import ProbeConfig
from .request_runner import RequestRunner, declared_charset


SHORTEN_URL = "https://api-ssl.bitly.com/v4/shorten"


def _run(*replies):
    session, adapter = make_adapter_session(*replies)
    response = RequestRunner(ProbeConfig(api_key="key"), session=session).run()
    return response, adapter


class TestRedirects:
    """A redirect is reported as the response, never followed"""

    def test_single_request_on_redirect(self, capsys):
        session, adapter = make_adapter_session(
            (301, "Moved Permanently",
             {"Location": "https://api-ssl.bitly.com/v4/other", "Content-Type": "application/json"},
             [b'{"message":"MOVED"}']),
            (405, "Method Not Allowed", {}, [b'{"message":"METHOD_NOT_ALLOWED"}']),
        )

        assert main(["abcdefghijkl"], session=session) == 0

        assert [(r.method, r.url) for r in adapter.sent] == [("POST", SHORTEN_URL)]
        out = capsys.readouterr().out
        assert "Status Code: 301" in out
        assert "Status Message: Moved Permanently" in out
        assert '"Location": "https://api-ssl.bitly.com/v4/other"' in out
        assert 'Body (raw): {"message":"MOVED"}' in out
        assert "METHOD_NOT_ALLOWED" not in out

    def test_request_as_sent(self):
        _, adapter = _run((200, "OK", {}, [b"{}"]))

        [request] = adapter.sent
        assert request.headers["Authorization"] == "Bearer key"
        assert request.headers["Content-Type"] == "application/json"
        assert request.body == b'{"long_url":"https://example.com/test"}'
        assert request.headers["Content-Length"] == str(len(request.body))


class TestBodyDecoding:
    """Charset handling on real responses"""

    def test_unknown_charset_falls_back_to_utf8(self, capsys):
        session, _ = make_adapter_session(
            (400, "Bad Request", {"Content-Type": "application/json; charset=bogus"},
             ['{"message":"INVALID_ARG_LONG_URL","description":"café"}'.encode("utf-8")]),
        )

        assert main(["abcdefghijkl"], session=session) == 0

        out = capsys.readouterr().out
        assert "Error Message: INVALID_ARG_LONG_URL" in out
        assert "Error Description: café" in out

    def test_undeclared_text_charset_is_utf8(self):
        response, _ = _run(
            (500, "Internal Server Error", {"Content-Type": "text/plain"},
             ["erreur café".encode("utf-8")]),
        )
        assert response.body == "erreur café"

    def test_declared_charset_used(self):
        response, _ = _run(
            (502, "Bad Gateway", {"Content-Type": 'text/html; charset="ISO-8859-1"'},
             ["café".encode("latin-1")]),
        )
        assert response.body == "café"

    @pytest.mark.parametrize("content_type, expected", [
        ("application/json", None),
        ("text/html", None),
        ("application/json; charset=utf-8", "utf-8"),
        ("text/plain; Charset='latin-1'", "latin-1"),
    ])
    def test_declared_charset(self, content_type, expected):
        assert declared_charset({"Content-Type": content_type}) == expected

    def test_no_content_type(self):
        assert declared_charset({}) is None


class TestStreaming:
    """Chunks arrive through iter_content"""

    def test_chunks_joined_in_order(self):
        response, _ = _run(
            (200, "OK", {"Content-Type": "application/json"},
             [b'{"link":', b'"https://bit.ly/', b'xyz"}']),
        )
        assert response.chunk_count == 3
        assert response.body == '{"link":"https://bit.ly/xyz"}'

    def test_repeated_headers_kept_as_list(self):
        response, _ = _run(
            (200, "OK", [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Content-Type", "application/json")],
             [b"{}"]),
        )
        assert response.headers["Set-Cookie"] == ["a=1", "b=2"]
        assert response.headers["Content-Type"] == "application/json"
