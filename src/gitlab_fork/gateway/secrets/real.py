"""Production implementation of cluster secrets using kubectl."""

import base64
import binascii
import subprocess

from gitlab_fork.gateway.secrets.abc import ClusterSecrets
from gitlab_fork.subprocess_utils import run_subprocess_with_context

# Seconds to wait for a kubectl call.
KUBECTL_TIMEOUT = 30


class RealClusterSecrets(ClusterSecrets):
    """Reads namespaces and secrets with the current kubectl context."""

    def namespace_exists(self, namespace: str) -> bool:
        try:
            result = subprocess.run(
                ["kubectl", "get", "namespace", namespace, "-o", "name"],
                capture_output=True,
                text=True,
                check=False,
                timeout=KUBECTL_TIMEOUT,
            )
        except FileNotFoundError as e:
            raise RuntimeError("Failed to check namespace: kubectl not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            msg = f"Timed out after {KUBECTL_TIMEOUT}s checking namespace '{namespace}'"
            raise RuntimeError(msg) from e

        if result.returncode == 0:
            return True
        if "NotFound" in result.stderr:
            return False
        msg = f"Failed to check namespace '{namespace}': {result.stderr.strip()}"
        raise RuntimeError(msg)

    def get_secret_value(self, namespace: str, secret_name: str, key: str) -> str:
        jsonpath_key = key.replace(".", "\\.")
        result = run_subprocess_with_context(
            cmd=[
                "kubectl",
                "get",
                "secret",
                secret_name,
                "--namespace",
                namespace,
                "-o",
                f"jsonpath={{.data.{jsonpath_key}}}",
            ],
            operation_context=f"read secret '{secret_name}' in namespace '{namespace}'",
            timeout=KUBECTL_TIMEOUT,
        )
        encoded = result.stdout.strip()
        if not encoded:
            msg = f"Secret '{secret_name}' in namespace '{namespace}' has no value for '{key}'"
            raise ValueError(msg)
        try:
            value = base64.b64decode(encoded, validate=True).decode("utf-8").strip()
        except (binascii.Error, UnicodeDecodeError) as e:
            msg = f"Secret '{secret_name}' key '{key}' is not valid base64 text"
            raise ValueError(msg) from e
        if not value:
            msg = f"Secret '{secret_name}' in namespace '{namespace}' has an empty '{key}'"
            raise ValueError(msg)
        return value
