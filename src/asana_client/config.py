from __future__ import annotations

import dataclasses
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import httpx
from dotenv import find_dotenv, load_dotenv

from .errors import AsanaConfigError

BASE_URL = "https://app.asana.com/api/1.0"
ENV_PAT_KEY = "ASANA_PERSONAL_ACCESS_TOKEN"
ENV_BASE_URL_KEY = "ASANA_BASE_URL"
DEFAULT_TIMEOUT_SECONDS = 10.0


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str]:
    """Load the Asana token and base URL from environment (optional .env)."""
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    token = os.getenv(ENV_PAT_KEY, "").strip()
    base_url = os.getenv(ENV_BASE_URL_KEY, "").strip() or BASE_URL
    return token, base_url


def first_non_empty(*candidates: Optional[str]) -> str:
    for candidate in candidates:
        candidate = (candidate or "").strip()
        if candidate:
            return candidate
    return ""


def resolve_token(*candidates: Optional[str]) -> str:
    """
    Use the first non-empty token passed in, falling back to
    ASANA_PERSONAL_ACCESS_TOKEN in the process environment.
    """
    token = first_non_empty(*candidates)
    if token:
        return token
    token = os.getenv(ENV_PAT_KEY, "").strip()
    if not token:
        raise AsanaConfigError(f"{ENV_PAT_KEY!r} was not set in your environment")
    return token


@dataclass(frozen=True)
class ClientConfig:
    token: str
    base_url: str = BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    # None means "use the client's default transport"
    transport: Optional[httpx.AsyncBaseTransport] = None

    def __repr__(self) -> str:
        return (
            f"ClientConfig(token='***', base_url={self.base_url!r}, "
            f"timeout_seconds={self.timeout_seconds!r}, "
            f"transport={self.transport!r})"
        )


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class ConfigStore:
    """Holds the current ClientConfig; get/set are the only access paths."""

    def __init__(self, config: ClientConfig):
        self._lock = ReadWriteLock()
        self._config = config

    def get(self) -> ClientConfig:
        with self._lock.read():
            return self._config

    def set(self, **changes) -> ClientConfig:
        with self._lock.write():
            self._config = dataclasses.replace(self._config, **changes)
            return self._config


__all__ = [
    "BASE_URL",
    "ENV_PAT_KEY",
    "ENV_BASE_URL_KEY",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_env_config",
    "first_non_empty",
    "resolve_token",
    "ClientConfig",
    "ReadWriteLock",
    "ConfigStore",
]
