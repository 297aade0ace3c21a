from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from osclient.errors import (
    AuthorizationError,
    HttpResponseError,
    MalformedResponseError,
    ResourceNotFoundError,
    TransportError,
)


log = logging.getLogger(__name__)

Json = dict[str, Any]
Method = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Methods safe to send again after a 429 or 5xx.
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})


@dataclass(frozen=True)
class Request:
    """One HTTP call, described but not yet sent.

    Every API operation has a plain builder function returning one of these;
    `ApiClient.send` is the only place that talks to the network.
    """

    method: Method
    path: str
    params: Mapping[str, Any] | None = None
    json: Any = None
    content: bytes | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return self.method in IDEMPOTENT_METHODS


def _is_retryable_exception(exc: BaseException) -> bool:
    # Transport failures are surfaced immediately; only server-side transient statuses retry.
    if isinstance(exc, HttpResponseError):
        status = exc.status_code
        if status == 429:
            return True
        return 500 <= status <= 599
    return False


_backoff = wait_exponential(multiplier=0.2, max=2.0) + wait_random(0, 0.2)


def _wait_before_retry(retry_state: RetryCallState) -> float:
    """Honor a 429 Retry-After (clamped to 0.5..10s); otherwise back off exponentially."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, HttpResponseError) and exc.retry_after is not None:
        return max(0.5, min(exc.retry_after, 10.0))
    return _backoff(retry_state)


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        # HTTP-date form is not worth honoring here.
        return 1.0


def _error_for_response(resp: httpx.Response, *, method: str, url: str) -> HttpResponseError:
    body_preview = ""
    try:
        body_preview = resp.text[:2000]
    except (UnicodeDecodeError, httpx.ResponseNotRead):
        body_preview = ""

    status = resp.status_code
    message = f"{method} {url} -> {status}"
    if body_preview:
        message = f"{message} | body={body_preview}"

    if status in (401, 403):
        return AuthorizationError(message, status_code=status, body=body_preview)
    if status == 404:
        return ResourceNotFoundError(message, status_code=status, body=body_preview)
    retry_after = _parse_retry_after(resp.headers.get("Retry-After")) if status == 429 else None
    return HttpResponseError(message, status_code=status, body=body_preview, retry_after=retry_after)


@dataclass
class ApiClient:
    base_url: str
    token: str | None = None
    timeout: float = 10.0
    retry_attempts: int = 3
    transport: httpx.BaseTransport | None = None

    _client: httpx.Client | None = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self.transport)
        return self._client

    def send(self, request: Request) -> httpx.Response:
        retrying = Retrying(
            wait=_wait_before_retry,
            stop=stop_after_attempt(max(1, self.retry_attempts) if request.retryable else 1),
            retry=retry_if_exception(_is_retryable_exception),
            reraise=True,
        )
        return retrying(self._send_once, request)

    def send_json(self, request: Request) -> Any:
        resp = self.send(request)
        # DELETE and some PUTs answer 204 with no body.
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{request.method} {request.path} returned a non-JSON body"
            ) from e

    def _send_once(self, request: Request) -> httpx.Response:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self.token:
            headers["X-Auth-Token"] = self.token
        headers.update(request.headers)

        url = f"{self.base_url}{request.path}"
        try:
            resp = self._get_client().request(
                request.method,
                url,
                params=dict(request.params) if request.params else None,
                json=request.json,
                content=request.content,
                headers=headers,
            )
        except httpx.RequestError as e:
            raise TransportError(f"{request.method} {url} failed: {e}") from e

        log.debug("HTTP %s %s -> %d", request.method, url, resp.status_code)

        if resp.is_error:
            raise _error_for_response(resp, method=request.method, url=url)
        return resp
