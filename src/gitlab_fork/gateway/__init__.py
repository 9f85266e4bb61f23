"""Gateways to external systems (git, GitLab, the cluster, the clock)."""
