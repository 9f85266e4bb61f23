"""Promote Git tags and branches between GitLab repositories."""

__version__ = "0.2.0"
