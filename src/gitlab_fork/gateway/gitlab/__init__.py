"""GitLab REST API gateway.

Import from submodules:
- abc: GitLab
- real: RealGitLab
- fake: FakeGitLab
- types: GitLabProject, GitLabAPIError, ProjectNotFound
"""
