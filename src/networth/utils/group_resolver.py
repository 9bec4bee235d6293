"""Utility for resolving group names to IDs."""

from networth.domain.errors import NotFoundError, group_not_found
from networth.domain.groups import GroupService


def resolve_group(group_service: GroupService, group: str) -> str:
    """Resolve group name or ID to group ID.

    Args:
        group_service: GroupService instance
        group: Group ID or group name (case-insensitive)

    Returns:
        Group ID

    Raises:
        NotFoundError: If group is not found
    """
    groups = group_service.list_groups()
    for candidate in groups:
        if candidate.id == group:
            return candidate.id

    wanted = group.strip().lower()
    for candidate in groups:
        if candidate.name.lower() == wanted:
            return candidate.id

    raise NotFoundError(group_not_found(group))
