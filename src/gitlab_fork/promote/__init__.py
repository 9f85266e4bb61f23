"""Promotion of one tag or branch from a source repository to a destination.

Pipeline: classify -> clone -> publish -> cleanup. Entry point is
execute_promote() in gitlab_fork.promote.pipeline.
"""
