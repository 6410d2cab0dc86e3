#!/usr/bin/env python3
"""
Bitly Diagnostic - Request Runner
Sends the single shorten request and reads its streamed response.
"""

from typing import Dict, List, Mapping, Optional, Union

import requests
from requests.utils import get_encoding_from_headers

from .models import ProbeConfig, ProbeResponse, ShortenRequest
from .exceptions import TransportError
from .logger import ProbeLogger


def declared_charset(headers: Mapping[str, str]) -> Optional[str]:
    """Charset named in Content-Type, or None when the server declared none.

    requests defaults text/* bodies to ISO-8859-1; that default is skipped
    here so undeclared bodies decode as UTF-8.
    """
    content_type = headers.get("Content-Type") or ""
    if "charset" not in content_type.lower():
        return None
    return get_encoding_from_headers({"content-type": content_type})

def collect_headers(response: requests.Response) -> Dict[str, Union[str, List[str]]]:
    """Response headers, with repeated fields (e.g. Set-Cookie) kept as lists."""
    raw_headers = getattr(response.raw, "headers", None)
    if not hasattr(raw_headers, "getlist"):
        return dict(response.headers)

    headers: Dict[str, Union[str, List[str]]] = {}
    for name in raw_headers.keys():
        values = raw_headers.getlist(name)
        headers[name] = values[0] if len(values) == 1 else list(values)
    return headers

class RequestRunner:
    """Sends exactly one POST to the shorten endpoint.

    There is no retry and no timeout: the call blocks until the response
    stream ends or the transport fails.

    Attributes:
        config: invocation arguments and endpoint
        logger: run logger, None to stay silent
    """

    def __init__(
        self,
        config: ProbeConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[ProbeLogger] = None
    ):
        self.config = config
        self.logger = logger
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _log(self, level: str, message: str, **kwargs) -> None:
        if self.logger is not None:
            getattr(self.logger, level)(message, context="request", **kwargs)

    def build_request(self) -> ShortenRequest:
        return ShortenRequest.build(self.config)

    def send(self, request: ShortenRequest) -> ProbeResponse:
        """POST the request and collect the whole body.

        Args:
            request: the prepared shorten request

        Returns:
            ProbeResponse: status, headers and the body joined in arrival order

        Raises:
            TransportError: DNS, connection, TLS or mid-stream failure
        """
        self._log("info", f"POST {request.url} ({request.content_length} bytes)")

        try:
            response = self.session.post(
                request.url,
                data=request.content,
                headers=request.headers,
                stream=True,
                allow_redirects=False,  # a redirect is reported, never followed
            )
            try:
                chunks: List[bytes] = []
                for chunk in response.iter_content(chunk_size=None):
                    if not chunk:
                        continue
                    chunks.append(chunk)
                    self._log("debug", f"chunk {len(chunks)}: {len(chunk)} bytes")
            finally:
                response.close()
        except requests.RequestException as e:
            self._log("warning", f"Transport failure: {e}", error=e)
            raise TransportError(str(e), url=request.url, original_error=e) from e

        result = ProbeResponse.from_chunks(
            status_code=response.status_code,
            status_message=response.reason or "",
            headers=collect_headers(response),
            chunks=chunks,
            encoding=declared_charset(response.headers),
        )
        self._log(
            "info",
            f"Response complete: {result.status_code} after {result.chunk_count} chunk(s)"
        )
        return result

    def run(self) -> ProbeResponse:
        """Build and send the request."""
        return self.send(self.build_request())

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
        self._session = None

    def __enter__(self) -> "RequestRunner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
