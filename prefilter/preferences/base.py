from abc import ABC, abstractmethod


class BasePreferenceStore(ABC):
    """Contract for string key-value preference persistence."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent.

        Raises:
            PreferenceStoreError: if the store cannot be read.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value.

        Raises:
            PreferenceStoreError: if the store cannot be written.
        """
