"""API key pool with failover rotation."""
import json
import logging
import random
import threading
from typing import List, Optional

from ..exceptions import ConfigurationError
from ..utils.logging import mask_credential
from .settings import SettingsStore

logger = logging.getLogger(__name__)

KEYS_SETTING = "gemini_api_keys"
LEGACY_KEY_SETTING = "gemini_api_key"

NO_KEYS_MESSAGE = (
    "No Gemini API keys configured. Add one with 'paperpress keys add <KEY>' "
    "or set the GEMINI_API_KEY environment variable."
)


def _parse_key_list(raw) -> List[str]:
    """Turn the stored key list into a list of non-empty strings.

    The list may be stored either as a JSON array or as a JSON-encoded string.
    Anything unreadable counts as no keys.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Stored API key list is not valid JSON, ignoring it")
            return []

    if not isinstance(raw, list):
        logger.warning("Stored API key list is not a list, ignoring it")
        return []

    return [k.strip() for k in raw if isinstance(k, str) and k.strip()]


class CredentialPool:
    """Ordered set of API keys with one active key.

    The pool is re-read from the settings store on every ``reload()`` so keys
    added or removed elsewhere take effect immediately. The active index is
    picked at random the first time keys are found, which spreads load across
    sessions sharing the same settings file, and afterwards only moves through
    ``advance()``.

    Sources, highest precedence first: the stored key list, the legacy single
    stored key, the process default key.
    """

    def __init__(
        self,
        store: SettingsStore,
        default_credential: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.default_credential = default_credential
        self._rng = rng or random.Random()
        self._credentials: List[str] = []
        self._active_index = 0
        self._initialized = False
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)

    @property
    def size(self) -> int:
        return len(self)

    @property
    def active_index(self) -> int:
        with self._lock:
            return self._active_index

    @property
    def credentials(self) -> List[str]:
        with self._lock:
            return list(self._credentials)

    def reload(self) -> None:
        """Re-read keys from the settings store.

        Never raises; an empty pool is reported by ``current()``.
        """
        with self._lock:
            credentials = _parse_key_list(self.store.get(KEYS_SETTING))

            if not credentials:
                legacy = self.store.get(LEGACY_KEY_SETTING)
                if isinstance(legacy, str) and legacy.strip():
                    credentials = [legacy.strip()]
                elif self.default_credential:
                    credentials = [self.default_credential]

            self._credentials = credentials

            if not credentials:
                return

            if not self._initialized:
                self._active_index = self._rng.randrange(len(credentials))
                self._initialized = True
                logger.debug(
                    f"Loaded {len(credentials)} API key(s), starting at index {self._active_index}"
                )
            elif self._active_index >= len(credentials):
                self._active_index = len(credentials) - 1

    def current(self) -> str:
        """Return the active key.

        Raises:
            ConfigurationError: If no keys are configured
        """
        with self._lock:
            if not self._credentials:
                raise ConfigurationError(NO_KEYS_MESSAGE)
            return self._credentials[self._active_index]

    def advance(self) -> bool:
        """Move to the next key.

        Returns:
            False when there are fewer than two keys and nothing changed
        """
        with self._lock:
            if len(self._credentials) < 2:
                return False

            previous = self._credentials[self._active_index]
            self._active_index = (self._active_index + 1) % len(self._credentials)
            logger.info(
                f"Rotated API key {mask_credential(previous)} -> "
                f"{mask_credential(self._credentials[self._active_index])}"
            )
            return True

    def persist(self, credentials: List[str]) -> None:
        """Replace the stored key list and reload."""
        cleaned = [k.strip() for k in credentials if k and k.strip()]
        with self._lock:
            self.store.set(KEYS_SETTING, cleaned)
            self.reload()

    def add(self, credential: str) -> bool:
        """Append a key to the stored list.

        Returns:
            False if the key was already stored
        """
        credential = credential.strip()
        if not credential:
            raise ConfigurationError("Cannot add an empty API key")

        with self._lock:
            stored = _parse_key_list(self.store.get(KEYS_SETTING))
            if credential in stored:
                return False
            self.persist(stored + [credential])
            return True

    def remove(self, credential: str) -> bool:
        """Remove every stored copy of a key.

        Returns:
            False if the key was not stored
        """
        credential = credential.strip()
        with self._lock:
            stored = _parse_key_list(self.store.get(KEYS_SETTING))
            if credential not in stored:
                return False
            self.persist([k for k in stored if k != credential])
            return True
