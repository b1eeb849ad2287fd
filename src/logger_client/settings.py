from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import dotenv_values, find_dotenv
from jproperties import Properties, PropertyError

from .logger_setup import logger

LOGGER_CLIENT_PROPERTIES = "/data/logger-client/config/logger-client.properties"
LOGGER_URL_PROPERTY = "logger_url"

_FALLBACK_NOTE = (
    "Logger Service URL will be taken from the logging configuration "
    "of the host application."
)


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def properties_path() -> str:
    """Return the properties file location.

    ``LOGGER_CLIENT_PROPERTIES`` is taken from the environment, then from a
    ``.env`` file found from the working directory. The ``.env`` file is read
    without touching ``os.environ``.
    """
    path = os.getenv("LOGGER_CLIENT_PROPERTIES")
    if path:
        return path
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        path = dotenv_values(dotenv_path).get("LOGGER_CLIENT_PROPERTIES")
    return path or LOGGER_CLIENT_PROPERTIES


def load_logger_url(path: str | None = None) -> str | None:
    """Read ``logger_url`` from the logger client properties file.

    The file uses Java properties syntax (``=``, ``:`` or whitespace
    separators, backslash escapes). Any problem with the file is reported as
    a warning and ``None`` is returned so the caller falls back to its own
    configuration.
    """
    path = path or properties_path()
    if not os.path.isfile(path):
        logger.warning("Cannot find logger client properties file %s. %s", path, _FALLBACK_NOTE)
        return None

    props = Properties()
    try:
        with open(path, "rb") as stream:
            props.load(stream, "iso-8859-1")
    except (OSError, ValueError, PropertyError) as exc:
        logger.warning("Failed to load logger client properties file: %s. %s", exc, _FALLBACK_NOTE)
        return None

    url = props.properties.get(LOGGER_URL_PROPERTY)
    if is_blank(url):
        return None
    url = url.strip()
    logger.debug("Log events will be written to [%s]", url)
    return url


@dataclass
class ForwarderConfig:
    url_template: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    timeout: int = 0  # milliseconds, 0 disables the timeout

    def set_url_template(self, url_template: str | None) -> None:
        """Set the URL unless one is already configured."""
        if is_blank(self.url_template):
            self.url_template = url_template

    @classmethod
    def load(
        cls,
        path: str | None = None,
        url_template: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: int | str = 0,
    ) -> "ForwarderConfig":
        """Build a config from the properties file, then the framework values."""
        config = cls(username=username, password=password, timeout=int(timeout or 0))
        config.url_template = load_logger_url(path)
        config.set_url_template(url_template)
        return config
