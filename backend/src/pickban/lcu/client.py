"""HTTP client for the League client's local API (LCU).

Requests that time out or hit a 5xx are retried a bounded number of
times; anything else fails immediately.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from pickban.utils.errors import format_error

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3


class LcuRequestError(Exception):
    """Raised when a request keeps failing after all retries."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


def _is_retryable(error: httpx.HTTPError) -> bool:
    if isinstance(error, httpx.TimeoutException):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return False


class LcuClient:
    """Synchronous LCU client."""

    def __init__(
        self,
        base_url: str,
        password: str,
        timeout: float = 2.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: e.g. "https://127.0.0.1:54321"
            password: Lockfile password (user is always "riot")
            timeout: Request timeout in seconds
            max_retries: Attempts for retryable failures
            transport: Optional transport override, used by tests
        """
        self.base_url = base_url
        self.max_retries = max_retries
        self._client = httpx.Client(
            base_url=base_url,
            auth=("riot", password),
            timeout=timeout,
            verify=False,
            transport=transport,
        )

    @classmethod
    def from_lockfile(cls, path: str | Path, **kwargs) -> "LcuClient":
        """Build a client from the lockfile ``name:pid:port:password:protocol``.

        Raises:
            ValueError: If the lockfile is malformed
        """
        raw = Path(path).read_text(encoding="utf-8").strip()
        parts = raw.split(":")
        if len(parts) < 5:
            raise ValueError(f"Invalid lockfile format: {raw}")
        port, password, protocol = parts[2], parts[3], parts[4]
        return cls(f"{protocol}://127.0.0.1:{int(port)}", password, **kwargs)

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        max_retries: Optional[int] = None,
        **kwargs,
    ) -> httpx.Response:
        """Send a request, retrying timeouts and server errors.

        Raises:
            LcuRequestError: If retries are exhausted
            httpx.HTTPError: For non-retryable failures
        """
        if max_retries is None:
            max_retries = self.max_retries

        retries = 0
        last_error: Optional[httpx.HTTPError] = None
        while True:
            try:
                response = self._client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
            except httpx.HTTPError as e:
                if not _is_retryable(e):
                    raise
                last_error = e
                retries += 1

            if retries >= max_retries:
                logger.warning(f"LCU max retries exceeded {format_error(last_error)}")
                raise LcuRequestError(f"{method} {path} failed after {retries} attempts", last_error)

    def _get_json(self, path: str, **kwargs) -> Any:
        response = self.request("GET", path, **kwargs)
        return response.json() if response.content else None

    # Champion select

    def get_champ_select_session(self) -> Any:
        return self._get_json("/lol-champ-select/v1/session")

    def get_pickable_champion_ids(self) -> list[int]:
        return self._get_json("/lol-champ-select/v1/pickable-champion-ids") or []

    def get_bannable_champion_ids(self) -> list[int]:
        return self._get_json("/lol-champ-select/v1/bannable-champion-ids") or []

    def patch_action(self, action_id: int, champion_id: int, completed: bool) -> None:
        """Hover (completed=False) or lock in a champion for an action."""
        self.request(
            "PATCH",
            f"/lol-champ-select/v1/session/actions/{action_id}",
            json={"championId": champion_id, "completed": completed},
        )

    def bench_swap(self, champion_id: int) -> None:
        self.request("POST", f"/lol-champ-select/v1/session/bench/swap/{champion_id}")

    # Summoner and chat

    def get_current_summoner(self) -> Any:
        return self._get_json("/lol-summoner/v1/current-summoner")

    def get_chat_me(self) -> Any:
        return self._get_json("/lol-chat/v1/me")
