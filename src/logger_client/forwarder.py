from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import requests  # type: ignore[import-untyped]

from . import diagnostic_context
from .diagnostic_context import USER_AGENT_PARAM
from .logger_setup import logger
from .models import LogEventRecord, RecordValidationError
from .rest_client import RestfulClient
from .settings import ForwarderConfig, is_blank, load_logger_url

NOT_ACCEPTABLE: int = requests.codes.not_acceptable

# Prefix of the notice an upstream buffering handler logs when it drops events
DISCARDED_PREFIX = "Discarded"

USER_AGENT_HEADER = "User-Agent"
UNDEFINED_USER_AGENT_VALUE = "undefined"


def build_headers(record: logging.LogRecord) -> dict[str, str]:
    """Return the request headers for ``record``."""
    user_agent = getattr(record, USER_AGENT_PARAM, None)
    if user_agent is None:
        user_agent = diagnostic_context.get(USER_AGENT_PARAM)
    if is_blank(user_agent):
        user_agent = UNDEFINED_USER_AGENT_VALUE
    return {USER_AGENT_HEADER: str(user_agent)}


def _validation_problem(message: str) -> Optional[str]:
    try:
        LogEventRecord.from_json(message)
    except RecordValidationError as exc:
        return str(exc)
    return None


def prepare_body(record: logging.LogRecord) -> tuple[str, Optional[str]]:
    """Return ``(status, body)`` where status is ``ready``, ``discarded`` or ``error``."""
    payload: Any = record.msg
    if isinstance(payload, LogEventRecord):
        try:
            return "ready", payload.to_json()
        except (TypeError, ValueError) as exc:
            logger.warning("Failed to serialize log event record %r: %s", payload, exc)
            return "error", None

    message = record.getMessage()
    if message.startswith(DISCARDED_PREFIX):
        return "discarded", None

    problem = _validation_problem(message)
    if problem:
        logger.warning(
            "Log message is not a valid log event record (%s); sending it as is", problem
        )
    return "ready", message


class LogForwarder(logging.Handler):
    """Logging handler that POSTs each record's message to a JSON web service.

    The destination comes from the logger client properties file when it
    defines ``logger_url``; ``url_template`` from the logging configuration is
    only a fallback. The handler's formatter is not used: the body is the
    message itself, either a serialized :class:`LogEventRecord` or the string
    that was logged.
    """

    def __init__(
        self,
        url_template: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: int | str = 0,
        level: int | str = logging.NOTSET,
        properties_path: str | None = None,
        config: ForwarderConfig | None = None,
    ) -> None:
        super().__init__(level)
        self.properties_path = properties_path
        if config is None:
            config = ForwarderConfig.load(
                properties_path,
                url_template=url_template,
                username=username,
                password=password,
                timeout=timeout,
            )
        self.config = config
        self._client: RestfulClient | None = None
        self._local = threading.local()

    @property
    def url_template(self) -> str | None:
        return self.config.url_template

    @property
    def client(self) -> RestfulClient:
        with self.lock:
            if self._client is None:
                self._client = RestfulClient(self.config.timeout)
            return self._client

    def configure(self) -> None:
        """Re-read the properties file; a URL found there replaces the current one."""
        url = load_logger_url(self.properties_path)
        if not is_blank(url):
            self.config.url_template = url

    def set_url_template(self, url_template: str | None) -> None:
        self.config.set_url_template(url_template)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.append(record)
        except Exception:
            self.handleError(record)

    def append(self, record: logging.LogRecord) -> int:
        """Forward ``record`` and return the resulting HTTP status, 0 when skipped."""
        if is_blank(self.config.url_template):
            logger.error("No 'urlTemplate' for [%s]", self.name)
            return 0
        if record.levelno < self.level:
            return 0
        # records logged by the HTTP stack while we are posting
        if getattr(self._local, "sending", False):
            return 0

        self._local.sending = True
        try:
            return self._send(record)
        finally:
            self._local.sending = False

    def _send(self, record: logging.LogRecord) -> int:
        try:
            status, body = prepare_body(record)
            if status == "discarded":
                return 0
            if status == "error" or body is None:
                return NOT_ACCEPTABLE

            url = self.config.url_template
            logger.debug("Posting log event to URL [%s]", url)
            outcome = self.client.post(url, body, build_headers(record))
        except Exception:
            logger.error(
                "Could not send message from LogForwarder [%s],\nMessage: %s",
                self.name,
                record.msg,
                exc_info=True,
            )
            return NOT_ACCEPTABLE

        if not outcome.ok:
            logger.error(
                "Could not send message from LogForwarder [%s],\nMessage: %s\nError: %s",
                self.name,
                record.msg,
                outcome.error,
            )
            return NOT_ACCEPTABLE
        return int(outcome.status_code)

    def close(self) -> None:
        self.acquire()
        try:
            if self._client is not None:
                self._client.close()
            self._client = None
        finally:
            self.release()
        super().close()
