"""src/mycurl/config.py

Client configuration.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from mycurl.http.http11 import DEFAULT_USER_AGENT
from mycurl.utils.timing import Timeout

__all__ = ["ClientConfig", "default_cache_dir", "DEFAULT_MAX_REDIRECTS"]

ENV_TIMEOUT = "MYCURL_TIMEOUT"
ENV_MAX_REDIRECTS = "MYCURL_MAX_REDIRECTS"
ENV_CACHE_DIR = "MYCURL_CACHE_DIR"

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_REDIRECTS = 10


def default_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """``$MYCURL_CACHE_DIR``, else ``~/.cache/mycurl``."""
    environ = os.environ if environ is None else environ
    configured = environ.get(ENV_CACHE_DIR)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "mycurl"


@dataclass
class ClientConfig:
    """
    Client configuration.

    Attributes:
        timeout: Connect/read timeouts applied to every hop.
        max_redirects: Redirect hops followed before giving up.
        cache_dir: Directory of the on-disk response cache.
        user_agent: User-Agent header sent with every request.
    """

    timeout: Timeout = field(
        default_factory=lambda: Timeout.from_float(DEFAULT_TIMEOUT)
    )
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    cache_dir: Path = field(default_factory=default_cache_dir)
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a configuration from ``MYCURL_*`` environment variables.

        Raises:
            ValueError: A variable is set to an unusable value.
        """
        environ = os.environ if environ is None else environ
        config = cls(cache_dir=default_cache_dir(environ))

        raw_timeout = environ.get(ENV_TIMEOUT)
        if raw_timeout:
            try:
                seconds = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(
                    f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}"
                ) from exc
            if seconds <= 0:
                raise ValueError(f"{ENV_TIMEOUT} must be positive, got {raw_timeout!r}")
            config.timeout = Timeout.from_float(seconds)

        raw_redirects = environ.get(ENV_MAX_REDIRECTS)
        if raw_redirects:
            try:
                config.max_redirects = int(raw_redirects)
            except ValueError as exc:
                raise ValueError(
                    f"{ENV_MAX_REDIRECTS} must be an integer, got {raw_redirects!r}"
                ) from exc
            if config.max_redirects < 0:
                raise ValueError(
                    f"{ENV_MAX_REDIRECTS} must be >= 0, got {raw_redirects!r}"
                )

        return config
