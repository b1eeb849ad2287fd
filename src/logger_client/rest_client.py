from __future__ import annotations

import requests  # type: ignore[import-untyped]

from .logger_setup import logger
from .models import HttpOutcome

JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


class RestfulClient:
    """Posts JSON bodies to the logging service over a shared session."""

    def __init__(self, timeout: int = 0) -> None:
        self.timeout = timeout
        self.session = requests.Session()

    @property
    def timeout_seconds(self) -> float | None:
        return self.timeout / 1000 if self.timeout > 0 else None

    def post(self, url: str, body: str, headers: dict[str, str] | None = None) -> HttpOutcome:
        """POST ``body`` to ``url``; transport failures come back as ``error``."""
        request_headers = {**JSON_HEADERS, **(headers or {})}
        try:
            response = self.session.post(
                url,
                data=body.encode("utf-8"),
                headers=request_headers,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.debug("POST to %s failed: %s", url, exc)
            return HttpOutcome(error=str(exc))

        if 200 <= response.status_code < 300:
            return HttpOutcome(status_code=response.status_code, data=response.text)
        return HttpOutcome(
            status_code=response.status_code,
            data=response.text,
            error=f"{response.status_code} {response.text}",
        )

    def close(self) -> None:
        self.session.close()
