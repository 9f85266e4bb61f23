"""In-memory fake of cluster secrets for testing."""

from gitlab_fork.gateway.secrets.abc import ClusterSecrets


class FakeClusterSecrets(ClusterSecrets):
    """In-memory fake of cluster secrets.

    Constructor Injection:
    ---------------------
    - namespaces: Names of namespaces that exist
    - secrets: Mapping of (namespace, secret name, key) -> value
    - unavailable: Message raised as RuntimeError by every call (cluster down)
    """

    def __init__(
        self,
        *,
        namespaces: set[str] | None = None,
        secrets: dict[tuple[str, str, str], str] | None = None,
        unavailable: str | None = None,
    ) -> None:
        self._namespaces = namespaces or set()
        self._secrets = secrets or {}
        self._unavailable = unavailable
        self._read_secrets: list[tuple[str, str, str]] = []

    def namespace_exists(self, namespace: str) -> bool:
        if self._unavailable is not None:
            raise RuntimeError(self._unavailable)
        return namespace in self._namespaces

    def get_secret_value(self, namespace: str, secret_name: str, key: str) -> str:
        if self._unavailable is not None:
            raise RuntimeError(self._unavailable)
        self._read_secrets.append((namespace, secret_name, key))
        lookup = (namespace, secret_name, key)
        if lookup not in self._secrets:
            raise RuntimeError(
                f"Failed to read secret '{secret_name}' in namespace '{namespace}' (exit code 1): "
                f'secrets "{secret_name}" not found'
            )
        value = self._secrets[lookup]
        if not value:
            raise ValueError(
                f"Secret '{secret_name}' in namespace '{namespace}' has an empty '{key}'"
            )
        return value

    @property
    def read_secrets(self) -> list[tuple[str, str, str]]:
        """List of (namespace, secret name, key) lookups, in order."""
        return list(self._read_secrets)
