"""Abstract interface for reading tokens stored as cluster secrets."""

from abc import ABC, abstractmethod


class ClusterSecrets(ABC):
    """Abstract interface for namespace checks and secret lookups."""

    @abstractmethod
    def namespace_exists(self, namespace: str) -> bool:
        """Return True if the namespace exists.

        Raises:
            RuntimeError: If the cluster could not be queried
        """
        ...

    @abstractmethod
    def get_secret_value(self, namespace: str, secret_name: str, key: str) -> str:
        """Return the decoded value stored under `key` in a secret.

        Raises:
            RuntimeError: If the secret could not be read
            ValueError: If the key is missing or empty
        """
        ...
