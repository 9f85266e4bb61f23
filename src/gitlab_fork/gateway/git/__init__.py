"""Git gateway.

This module provides the git operations needed to move references between
repositories: remote ref listing, shallow clone, local branches, remotes and
push.

Import from submodules:
- abc: Git
- real: RealGit
- fake: FakeGit
- auth: GitAuth, NoAuth, BasicAuth
- types: RemoteRef, RemoteRefsError, CloneResult, CloneError, PushResult, PushError
"""
