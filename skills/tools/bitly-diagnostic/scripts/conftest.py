#!/usr/bin/env python3
"""Shared fixtures: a mocked requests.Session standing in for the network."""

from unittest.mock import Mock

import pytest
import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict
from urllib3._collections import HTTPHeaderDict


def make_response(status_code=200, reason="OK", headers=None, chunks=None):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = None
    response.iter_content.return_value = iter(chunks or [])
    return response


def make_session(response=None, error=None):
    session = Mock(spec=requests.Session)
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response or make_response()
    return session


@pytest.fixture
def ok_session():
    return make_session(make_response(
        status_code=200,
        reason="OK",
        headers={"Content-Type": "application/json"},
        chunks=[b'{"link":', b'"https://bit.ly/xyz"}'],
    ))


# ============================================================================
# Adapter-backed transport: real Session, real Response
# ============================================================================

class ChunkedBody:
    """Stands in for the urllib3 response; read() hands out one chunk per call."""

    def __init__(self, status, reason, headers, chunks):
        self.status = status
        self.reason = reason
        self.headers = HTTPHeaderDict(headers)
        self._chunks = list(chunks)
        self.closed = False

    def read(self, amt=None, **kwargs):
        return self._chunks.pop(0) if self._chunks else b""

    def close(self):
        self.closed = True

    def release_conn(self):
        pass


class ScriptedAdapter(HTTPAdapter):
    """Replies with queued (status, reason, headers, chunks) tuples, recording each send."""

    def __init__(self, *replies):
        super().__init__()
        self.replies = list(replies)
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        status, reason, headers, chunks = self.replies.pop(0)
        return self.build_response(request, ChunkedBody(status, reason, headers, chunks))


def make_adapter_session(*replies):
    adapter = ScriptedAdapter(*replies)
    session = requests.Session()
    session.trust_env = False
    session.mount("https://", adapter)
    return session, adapter
