"""Error formatting for log lines."""

import httpx


def format_error(error: BaseException) -> str:
    """One-line description of an error, including HTTP details when present."""
    if isinstance(error, httpx.HTTPStatusError):
        request = error.request
        return (
            f"{type(error).__name__}: {error.response.status_code} "
            f"{request.method} {request.url.path}"
        )
    if isinstance(error, httpx.RequestError):
        try:
            request = error.request
        except RuntimeError:
            return f"{type(error).__name__}: {error}"
        return f"{type(error).__name__}: {request.method} {request.url.path} ({error})"
    return f"{type(error).__name__}: {error}"
