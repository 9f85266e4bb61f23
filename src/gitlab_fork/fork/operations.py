"""Fork a project into a production group, and list the projects of a group.

Tokens are never passed on the command line: each namespace stores its own
GitLab token in a cluster secret, and the admin namespace holds a token that
may list and fork across groups.
"""

from collections.abc import Generator

from gitlab_fork.events import CompletionEvent, ProgressEvent
from gitlab_fork.fork.abc import ProjectKit
from gitlab_fork.fork.types import (
    ForkRequest,
    ForkSuccess,
    ProjectListing,
    ProjectOperationError,
    TokenSettings,
)
from gitlab_fork.gateway.gitlab.types import GitLabAPIError, ProjectNotFound, Visibility

_FORK_STATUS_ERRORS = {
    404: ("fork_not_found", "the target group or the source project does not exist"),
    403: ("fork_forbidden", "the token may not create projects in the target group"),
    409: ("fork_conflict", "a project with the same name already exists in the target group"),
}


def _read_token(
    ops: ProjectKit, settings: TokenSettings, namespace: str, label: str
) -> Generator[ProgressEvent, None, str | ProjectOperationError]:
    yield ProgressEvent(
        f"Reading {label} token from secret '{settings.secret_name}' in namespace '{namespace}'..."
    )
    try:
        token = ops.secrets.get_secret_value(namespace, settings.secret_name, settings.secret_key)
    except (RuntimeError, ValueError) as e:
        return ProjectOperationError(
            error_type="token_unavailable",
            message=f"Could not read the {label} token: {e}",
            details={"namespace": namespace, "secret": settings.secret_name},
        )
    return token


def _check_namespace(
    ops: ProjectKit, namespace: str, role: str
) -> Generator[ProgressEvent, None, ProjectOperationError | None]:
    yield ProgressEvent(f"Checking {role} namespace '{namespace}'...")
    try:
        exists = ops.secrets.namespace_exists(namespace)
    except RuntimeError as e:
        return ProjectOperationError(
            error_type="cluster_unavailable",
            message=str(e),
            details={"namespace": namespace},
        )
    if not exists:
        return ProjectOperationError(
            error_type="namespace_missing",
            message=f"The {role} namespace '{namespace}' does not exist",
            details={"namespace": namespace},
        )
    return None


def execute_fork(
    ops: ProjectKit,
    request: ForkRequest,
    settings: TokenSettings,
) -> Generator[ProgressEvent | CompletionEvent[ForkSuccess | ProjectOperationError]]:
    """Fork a source project into the models subgroup of the target group.

    Args:
        ops: GitLab and cluster secrets interfaces
        request: Source group/project and target group
        settings: Secret layout and group naming

    Yields:
        ProgressEvent for status updates
        CompletionEvent with ForkSuccess or ProjectOperationError
    """
    # Step 1: Both groups must be managed namespaces
    for namespace, role in ((request.source_group, "source"), (request.target_group, "target")):
        error = yield from _check_namespace(ops, namespace, role)
        if error is not None:
            yield CompletionEvent(error)
            return

    # Step 2: Find the source project with the developer token
    dev_token = yield from _read_token(ops, settings, request.source_group, "development")
    if isinstance(dev_token, ProjectOperationError):
        yield CompletionEvent(dev_token)
        return

    yield ProgressEvent(
        f"Looking for project '{request.source_project}' in group '{request.source_group}'..."
    )
    source = ops.gitlab.find_project_in_group(
        dev_token, request.source_group, request.source_project
    )
    if isinstance(source, ProjectNotFound):
        yield CompletionEvent(
            ProjectOperationError(
                error_type="project_not_found",
                message=f"Project '{source.name}' was not found in group '{source.group}'",
                details={"group": source.group, "project": source.name},
            )
        )
        return
    if isinstance(source, GitLabAPIError):
        yield CompletionEvent(_api_error(source))
        return
    yield ProgressEvent(f"Found {source.name_with_namespace} (ID: {source.id})", style="success")

    # Step 3: The target models group must not already hold the project
    prod_token = yield from _read_token(ops, settings, request.target_group, "production")
    if isinstance(prod_token, ProjectOperationError):
        yield CompletionEvent(prod_token)
        return

    namespace = settings.models_namespace(request.target_group)
    yield ProgressEvent(f"Checking that '{namespace}' has no project named '{source.name}'...")
    existing = ops.gitlab.find_project_in_group(prod_token, namespace, source.name)
    if isinstance(existing, GitLabAPIError):
        yield CompletionEvent(_api_error(existing))
        return
    if not isinstance(existing, ProjectNotFound):
        yield CompletionEvent(
            ProjectOperationError(
                error_type="project_exists",
                message=(
                    f"Group '{namespace}' already has a project named '{source.name}' "
                    f"(ID: {existing.id}); remove or rename it first"
                ),
                details={"namespace": namespace, "existing_id": str(existing.id)},
            )
        )
        return

    # Step 4: Fork with the admin token
    admin_token = yield from _read_token(ops, settings, settings.admin_namespace, "admin")
    if isinstance(admin_token, ProjectOperationError):
        yield CompletionEvent(admin_token)
        return

    yield ProgressEvent(f"Forking '{source.name}' (ID: {source.id}) into '{namespace}'...")
    fork = ops.gitlab.fork_project(admin_token, source.id, namespace)
    if isinstance(fork, GitLabAPIError):
        if fork.status_code in _FORK_STATUS_ERRORS:
            error_type, reason = _FORK_STATUS_ERRORS[fork.status_code]
            yield CompletionEvent(
                ProjectOperationError(
                    error_type=error_type,
                    message=f"Fork failed: {reason}",
                    details={"status_code": str(fork.status_code), "response": fork.message},
                )
            )
            return
        yield CompletionEvent(_api_error(fork))
        return

    yield CompletionEvent(ForkSuccess(source=source, fork=fork, namespace=namespace))


def execute_list_projects(
    ops: ProjectKit,
    group: str,
    visibility: Visibility | None,
    settings: TokenSettings,
) -> Generator[ProgressEvent | CompletionEvent[ProjectListing | ProjectOperationError]]:
    """List the projects of a group (subgroups included) with the admin token."""
    token = yield from _read_token(ops, settings, settings.admin_namespace, "admin")
    if isinstance(token, ProjectOperationError):
        yield CompletionEvent(token)
        return

    scope = visibility or "all"
    yield ProgressEvent(f"Listing projects of group '{group}' (visibility: {scope})...")
    projects = ops.gitlab.list_group_projects(token, group, visibility=visibility)
    if isinstance(projects, GitLabAPIError):
        yield CompletionEvent(_api_error(projects))
        return
    yield CompletionEvent(
        ProjectListing(group=group, visibility=visibility, projects=tuple(projects))
    )


def _api_error(error: GitLabAPIError) -> ProjectOperationError:
    return ProjectOperationError(
        error_type="gitlab_api_error",
        message=str(error),
        details={"status_code": str(error.status_code or "")},
    )
