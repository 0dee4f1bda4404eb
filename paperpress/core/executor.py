"""Retrying call executor with API key rotation."""
import logging
import random
import time
from typing import Any, Callable, Optional, TypeVar

from ..exceptions import (
    CredentialsExhaustedError,
    LLMError,
    PaperPressError,
    QuotaExhaustedError,
    RateLimitError,
    RetryExhaustedError,
)
from ..utils.logging import mask_credential
from .backoff import ROTATION_COOLDOWN, rotation_backoff, transient_backoff
from .classifier import ErrorKind, classify_error, failure_reason
from .credentials import CredentialPool

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 5


class CallExecutor:
    """Runs one logical request against the backend.

    Two loops cooperate. The outer loop walks the credential pool: it binds a
    client to the active key and, when that key is rate limited, denied or
    suspended, rotates to the next key after a cooldown. The inner loop
    retries a single key, backing off on transient failures (and on rate
    limits when there is only one key to use).

    Attempts are strictly sequential. Callers see either the result or a
    single terminal exception.

    Example:
        >>> executor = CallExecutor(pool, client_factory=make_client)
        >>> executor.execute(lambda client: client.generate(prompt))
    """

    def __init__(
        self,
        pool: CredentialPool,
        client_factory: Callable[[str], Any],
        max_retries: int = DEFAULT_MAX_RETRIES,
        rotation_cooldown: float = ROTATION_COOLDOWN,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize executor.

        Args:
            pool: Credential pool shared by the caller's session
            client_factory: Builds a client bound to the given API key
            max_retries: Attempts per key for one request
            rotation_cooldown: Seconds to wait after rotating keys
            sleep: Blocking wait function, replaceable in tests
            rng: Random source for backoff jitter
        """
        self.pool = pool
        self.client_factory = client_factory
        self.max_retries = max(1, max_retries)
        self.rotation_cooldown = rotation_cooldown
        self._sleep = sleep
        self._rng = rng or random.Random()

    def execute(self, operation: Callable[[Any], T]) -> T:
        """Run ``operation`` with rotation and retry.

        Args:
            operation: Callable taking a bound client and returning a result

        Returns:
            Whatever ``operation`` returns

        Raises:
            ConfigurationError: If no API keys are configured
            QuotaExhaustedError: If a key has zero quota for the request
            CredentialsExhaustedError: If every key was rotated through
            RateLimitError: If the only key stayed rate limited
            RetryExhaustedError: If transient failures outlasted the budget
            LLMError: For any other backend failure
        """
        self.pool.reload()
        max_attempts = max(1, len(self.pool))
        last_error: Optional[BaseException] = None

        for attempt in range(1, max_attempts + 1):
            credential = self.pool.current()
            logger.debug(
                f"Attempt {attempt}/{max_attempts} with API key {mask_credential(credential)}"
            )
            client = self.client_factory(credential)

            try:
                return self._run_with_retries(operation, client, credential)
            except PaperPressError:
                raise
            except Exception as e:
                last_error = e
                kind = classify_error(e)

                if kind is ErrorKind.ROTATION and self.pool.advance():
                    logger.warning(
                        f"API key {mask_credential(credential)} unusable "
                        f"({failure_reason(e)}): {e}"
                    )
                    if attempt < max_attempts:
                        self._sleep(self.rotation_cooldown)
                    continue

                logger.error(f"Gemini request failed: {e}")
                raise LLMError(
                    f"Gemini request failed [{failure_reason(e)}]: {e}",
                    reason=failure_reason(e),
                    last_error=e,
                ) from e

        reason = failure_reason(last_error) if last_error else "quota"
        logger.error(f"All {max_attempts} API keys exhausted. Last error: {last_error}")
        raise CredentialsExhaustedError(
            f"All {max_attempts} API keys exhausted [{reason}]: {last_error}",
            reason=reason,
            last_error=last_error,
        ) from last_error

    def _run_with_retries(self, operation: Callable[[Any], T], client: Any, credential: str) -> T:
        """Retry ``operation`` against one key.

        Rotation-class failures are re-raised untouched when another key is
        available so the outer loop can switch keys.
        """
        masked = mask_credential(credential)

        for attempt in range(1, self.max_retries + 1):
            try:
                return operation(client)
            except PaperPressError:
                raise
            except Exception as e:
                kind = classify_error(e)

                if kind is ErrorKind.HARD_QUOTA_ZERO:
                    logger.error(f"API key {masked} has no quota for this request: {e}")
                    raise QuotaExhaustedError(
                        f"Quota unavailable for API key {masked} [quota]: {e}",
                        reason="quota",
                        last_error=e,
                    ) from e

                if kind is ErrorKind.FATAL:
                    raise

                if kind is ErrorKind.ROTATION and len(self.pool) > 1:
                    raise

                if attempt == self.max_retries:
                    reason = failure_reason(e)
                    logger.error(
                        f"API key {masked} failed {attempt} times [{reason}]: {e}"
                    )
                    if kind is ErrorKind.ROTATION:
                        raise RateLimitError(
                            f"API key {masked} still rate limited after {attempt} attempts "
                            f"[{reason}]: {e}",
                            reason=reason,
                            last_error=e,
                        ) from e
                    raise RetryExhaustedError(
                        f"Request failed after {attempt} attempts [{reason}]: {e}",
                        reason=reason,
                        last_error=e,
                    ) from e

                if kind is ErrorKind.ROTATION:
                    delay = rotation_backoff(self._rng)
                else:
                    delay = transient_backoff(attempt, self._rng)

                logger.warning(
                    f"Attempt {attempt}/{self.max_retries} with API key {masked} failed "
                    f"({kind.value}), retrying in {delay:.1f}s: {e}"
                )
                self._sleep(delay)
