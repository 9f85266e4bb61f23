"""GitLab project operations: forking into a production group and listing projects."""
