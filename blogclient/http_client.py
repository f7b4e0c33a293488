from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional

import requests

from blogclient.errors import HttpError, InvalidContentType, NetworkFailure, snippet

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class HttpConfig:
    timeout_sec: float
    user_agent: str


@dataclass(frozen=True)
class UploadFile:
    """File attached to the create form."""

    filename: str
    content: bytes | BinaryIO
    content_type: Optional[str] = None


class HttpClient:
    """
    Thin JSON transport over requests:
    - Exactly one request per call (no retries, no caching)
    - Every failure is raised as one of HttpError / InvalidContentType / NetworkFailure
    - Success always yields the parsed JSON body
    """

    def __init__(self, config: HttpConfig, session: Optional[requests.Session] = None):
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self._cfg.user_agent,
                "Accept": JSON_CONTENT_TYPE,
            }
        )

    def request_json(self, method: str, url: str, *, json: Any = None) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            NetworkFailure: the round trip did not complete, or the JSON body is unparsable
            HttpError: non-2xx response
            InvalidContentType: 2xx response not declared as JSON
        """
        resp = self._send(method, url, json=json)
        if not resp.ok:
            raise self._http_error(method, url, resp)

        ctype = resp.headers.get("Content-Type") or ""
        if JSON_CONTENT_TYPE not in ctype:
            logger.warning("Non-JSON response: %s %s content_type=%r", method, url, ctype)
            raise InvalidContentType(self._read_body(resp))

        try:
            return resp.json()
        except ValueError as e:
            logger.warning("JSON decode failed: %s %s err=%s", method, url, e)
            raise NetworkFailure(str(e)) from e

    def upload(self, url: str, field: str, file: UploadFile) -> Any:
        """
        POST a single file as multipart/form-data.

        Returns the decoded body when the server answers with JSON, otherwise None.
        """
        files = {field: (file.filename, file.content, file.content_type or "application/octet-stream")}
        resp = self._send("POST", url, files=files)
        if not resp.ok:
            raise self._http_error("POST", url, resp)

        if JSON_CONTENT_TYPE not in (resp.headers.get("Content-Type") or ""):
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkFailure(str(e)) from e

    def probe(self, url: str) -> bool:
        """Best-effort availability check; never raises."""
        try:
            resp = self._session.get(url, timeout=self._cfg.timeout_sec)
        except requests.RequestException as e:
            logger.debug("Probe failed: url=%s err=%s", url, e)
            return False
        if not resp.ok:
            logger.debug("Probe miss: url=%s status=%s", url, resp.status_code)
        return resp.ok

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self._cfg.timeout_sec, **kwargs)
        except requests.RequestException as e:
            logger.warning("HTTP %s failed: url=%s err=%s", method, url, e)
            raise NetworkFailure(str(e)) from e

    def _http_error(self, method: str, url: str, resp: requests.Response) -> HttpError:
        logger.warning("HTTP %s non-success: url=%s status=%s", method, url, resp.status_code)
        return HttpError(resp.status_code, resp.reason or "", self._read_body(resp))

    @staticmethod
    def _read_body(resp: requests.Response) -> str:
        try:
            return snippet(resp.text)
        except (requests.RequestException, UnicodeDecodeError, LookupError):
            return ""
