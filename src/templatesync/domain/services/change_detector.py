"""Detect which top-level template fields differ from remote state."""

from templatesync.domain.entities import (
    TemplateChanges,
    TemplateSpec,
    TemplateState,
    VersionSpec,
    VersionState,
)


def _version_matches(desired: VersionSpec, remote: VersionState) -> bool:
    # Unset optional fields compare equal to the API defaults
    if desired.id and desired.id != remote.id:
        return False
    return (
        desired.name == remote.name
        and desired.subject == remote.subject
        and (desired.html_content or "") == remote.html_content
        and (desired.plain_content or "") == remote.plain_content
        and (desired.active or 0) == remote.active
    )


def detect_changes(state: TemplateState, spec: TemplateSpec) -> TemplateChanges:
    """Compare remote state with a desired spec.

    Versions are compared positionally, so a reordered list counts as a change.

    Args:
        state: Current remote state.
        spec: Desired state.

    Returns:
        TemplateChanges flagging the name and/or versions as changed.
    """
    versions_changed = len(spec.versions) != len(state.versions) or not all(
        _version_matches(desired, remote)
        for desired, remote in zip(spec.versions, state.versions)
    )

    return TemplateChanges(
        name=spec.name != state.name,
        versions=versions_changed,
    )
