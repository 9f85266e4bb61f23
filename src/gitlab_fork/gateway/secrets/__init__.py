"""Cluster secrets gateway (namespaces and secret values via kubectl).

Import from submodules:
- abc: ClusterSecrets
- real: RealClusterSecrets
- fake: FakeClusterSecrets
"""
