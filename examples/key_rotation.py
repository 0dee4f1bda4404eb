"""Using the rotating executor with any API client."""
import logging

from paperpress import CallExecutor, CredentialPool, SettingsStore, LLMError
from paperpress.utils.logging import setup_logging


class EchoClient:
    """Stand-in client bound to one key."""

    def __init__(self, api_key):
        self.api_key = api_key

    def call(self, text):
        return f"{text} (via ...{self.api_key[-4:]})"


def main():
    setup_logging(level=logging.DEBUG)

    # Keys live in memory here; pass a path to persist them.
    pool = CredentialPool(SettingsStore())
    pool.persist(["demo-key-0001", "demo-key-0002", "demo-key-0003"])

    executor = CallExecutor(pool, client_factory=EchoClient)

    try:
        print(executor.execute(lambda client: client.call("hello")))
    except LLMError as e:
        print(f"Request failed ({e.reason}): {e}")

if __name__ == "__main__":
    main()
