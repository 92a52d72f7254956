"""
Client for the Enhancer Genie analysis API.

Endpoints (relative to the configured base URL):
- GET  tissues   option catalog
- POST upload    multipart enhancer file upload, returns {hash, result}
- POST check     single enhancer/gene pair, returns {inputString[, interactWhere]}
- POST register  JSON {username, password}
- GET  test      health probe
"""
import json
import logging
from typing import Callable, Dict, Optional

import requests

from ..core.errors import RegistrationError, RemoteFailure, SessionExpired
from ..core.telemetry import log_duration
from ..data.catalog import OptionCatalog
from ..data.models import CheckRequest, CheckResult, UploadRequest, UploadResult

logger = logging.getLogger(__name__)

REGISTRATION_MESSAGES = {
    400: "Username already exists",
    401: "Missing username or password",
}
REGISTRATION_FALLBACK = "Failed to register user"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    except ValueError:
        pass
    return f"Request failed with status {response.status_code}"


class EnhancerApiClient:
    """Thin wrapper over a ``requests.Session``.

    ``auth_headers`` is called for every mutating request so a token set or
    cleared after construction is honoured.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 300.0,
        catalog_timeout: float = 30.0,
        auth_headers: Optional[Callable[[], Dict[str, str]]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.catalog_timeout = catalog_timeout
        self._auth_headers = auth_headers or (lambda: {})
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _post(self, endpoint: str, **kwargs) -> requests.Response:
        headers = dict(kwargs.pop("headers", {}) or {})
        headers.update(self._auth_headers())
        try:
            with log_duration(logger, f"POST {endpoint}"):
                response = self.session.post(self._url(endpoint), headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as exc:
            raise RemoteFailure(f"The server did not answer in time ({endpoint})") from exc
        except requests.exceptions.RequestException as exc:
            raise RemoteFailure(f"Could not reach the server: {exc}") from exc
        return response

    def _check_response(self, response: requests.Response) -> dict:
        if response.status_code == 401:
            raise SessionExpired("Your session has expired. Please log in again.")
        if not response.ok:
            raise RemoteFailure(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFailure("The server returned an unreadable response",
                                status_code=response.status_code) from exc

    # ------------------------------------------------------------------

    def ping(self) -> bool:
        """Probe the API; only logs the outcome."""
        try:
            response = self.session.get(self._url("test"), timeout=self.catalog_timeout)
            logger.info("API health probe: %s %s", response.status_code, response.text[:200])
            return response.ok
        except requests.exceptions.RequestException as exc:
            logger.warning(f"API health probe failed: {exc}")
            return False

    def fetch_catalog(self) -> OptionCatalog:
        try:
            with log_duration(logger, "GET tissues"):
                response = self.session.get(self._url("tissues"), timeout=self.catalog_timeout)
        except requests.exceptions.RequestException as exc:
            raise RemoteFailure(f"Could not load the tissue catalog: {exc}") from exc
        if not response.ok:
            raise RemoteFailure(_error_message(response), status_code=response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteFailure("The tissue catalog could not be read") from exc
        return OptionCatalog.from_payload(payload)

    def upload(self, request: UploadRequest) -> UploadResult:
        data = {
            "organ": request.organ,
            "email": request.email or "",
            "algorithms": json.dumps([{"label": algo.label, "value": algo.value} for algo in request.algorithms]),
            "assembly": request.assembly,
        }
        files = {"file": (request.file_name, request.file_bytes or b"")}
        logger.info("Uploading %s (%s/%s, algorithms=%s)", request.file_name,
                    request.assembly, request.organ, [algo.value for algo in request.algorithms])
        body = self._check_response(self._post("upload", data=data, files=files))
        fingerprint = body.get("hash")
        if not fingerprint:
            raise RemoteFailure("The server response did not include a result identifier")
        return UploadResult(fingerprint=str(fingerprint), result=body.get("result"))

    def check(self, request: CheckRequest) -> CheckResult:
        data = {
            "enhancerStart": request.enhancer_start,
            "enhancerStop": request.enhancer_stop,
            "genePosition": request.gene_position,
        }
        body = self._check_response(self._post("check", data=data))
        return CheckResult(interacts=str(body.get("inputString", "")), where=body.get("interactWhere"))

    def register(self, username: str, password: str) -> None:
        """Create an account; failures carry the user-facing message."""
        try:
            response = self.session.post(
                self._url("register"),
                json={"username": username, "password": password},
                timeout=self.catalog_timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise RegistrationError(REGISTRATION_FALLBACK) from exc
        if not response.ok:
            message = REGISTRATION_MESSAGES.get(response.status_code, REGISTRATION_FALLBACK)
            raise RegistrationError(message, status_code=response.status_code)
        logger.info("Registered user %s", username)
