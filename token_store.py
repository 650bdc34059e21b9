# token_store.py
# Bearer token storage handed to the API client instead of ambient global state.

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)


class AuthTokenStore(ABC):
    """Where the API client reads the bearer token from."""

    @abstractmethod
    def get(self) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, token: Optional[str]) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemoryTokenStore(AuthTokenStore):
    """Token held for the lifetime of one object (a request, a test, a script)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: Optional[str]) -> None:
        # An empty token means "logged out"
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class FileTokenStore(AuthTokenStore):
    """
    Persistent key/value JSON file, the local-storage equivalent.

    Reads never raise: a missing or corrupt file is simply "no token".
    Write failures are logged and swallowed so a read-only disk does not
    break an otherwise working session.
    """

    def __init__(self, path: Union[str, Path], key: str = "token"):
        self.path = Path(path)
        self.key = key

    def _load(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            log.warning(f"Could not read token store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh)
        except OSError as e:
            log.warning(f"Could not write token store {self.path}: {e}")

    def get(self) -> Optional[str]:
        token = self._load().get(self.key)
        return token if isinstance(token, str) and token else None

    def set(self, token: Optional[str]) -> None:
        if not token:
            self.clear()
            return
        data = self._load()
        data[self.key] = token
        self._save(data)

    def clear(self) -> None:
        data = self._load()
        if self.key in data:
            del data[self.key]
            self._save(data)
