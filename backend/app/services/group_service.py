"""
services/group_service.py — Group and membership business logic.

Rules enforced here:
  ALREADY_MEMBER (409)   — a user_id appears at most once per group
  MEMBER_NOT_FOUND (404) — removing someone who is not a member

Membership rules:
  - The creator becomes the group's first member.
  - Members need not be registered users: adding a member by display name
    alone generates a fresh user id for them.
  - Removing a member never touches expense data. Historical expenses keep
    the removed id and show up as ghost balances.
  - A group whose last member leaves is deleted together with its shared
    expenses; groups are never retained empty.

Layer rules:
  - No Flask imports. Pure Python with a RecordStore parameter.
  - Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from backend.app.errors import AppError, ErrorCode
from backend.app.models.group import Group
from backend.app.models.member import GroupMember
from backend.app.store.interface import RecordStore, new_id

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _get_group_or_404(group_id: str, store: RecordStore) -> Group:
    """Returns the Group or raises GROUP_NOT_FOUND (404)."""
    group = store.get_group(group_id)
    if group is None:
        raise AppError(
            ErrorCode.GROUP_NOT_FOUND,
            f"Group {group_id} does not exist.",
            404,
        )
    return group


def _build_group_dict(group: Group) -> dict:
    """Serialises a Group with its member list to a plain dict."""
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "created_by": group.created_by,
        "created_at": group.created_at.isoformat(),
        "updated_at": group.updated_at.isoformat(),
        "members": [
            {
                "user_id": m.user_id,
                "display_name": m.display_name,
                "joined_at": m.joined_at.isoformat(),
            }
            for m in group.members
        ],
    }


# ── Public service functions ───────────────────────────────────────────────

def create_group(data: dict, store: RecordStore) -> dict:
    """
    Creates a new group. The creator automatically becomes the first member.

    Args:
        data: Validated dict from CreateGroupSchema.
              Keys: name, description (optional), created_by,
                    display_name (optional).

    The creator's display name falls back to their registered name, then to
    the raw id when they are not a registered user.

    Returns: dict with group details and initial member list.
    """
    created_by: str = data["created_by"]
    display_name = data.get("display_name")
    if not display_name:
        creator = store.get_user(created_by)
        display_name = creator.name if creator is not None else created_by

    now = datetime.now(timezone.utc)
    group = Group(
        id=new_id("group"),
        name=data["name"],
        description=data.get("description"),
        created_by=created_by,
        created_at=now,
        updated_at=now,
        members=[
            GroupMember(user_id=created_by, display_name=display_name, joined_at=now),
        ],
    )
    store.save_group(group)

    logger.info("Group %s (%r) created by %s.", group.id, group.name, created_by)
    return _build_group_dict(group)


def list_groups(user_id: str, store: RecordStore) -> list[dict]:
    """
    Returns all groups the user is a member of, ordered by name.
    """
    groups = store.list_groups_for_user(user_id)
    return [
        _build_group_dict(g)
        for g in sorted(groups, key=lambda g: (g.name.lower(), g.id))
    ]


def get_group(group_id: str, store: RecordStore) -> dict:
    """Returns full group details including the current member list."""
    return _build_group_dict(_get_group_or_404(group_id, store))


def add_member(group_id: str, data: dict, store: RecordStore) -> dict:
    """
    Adds a member to a group.

    Args:
        data: Validated dict from AddMemberSchema.
              Keys: display_name, user_id (optional; generated when absent).

    Raises:
      AppError(GROUP_NOT_FOUND, 404)  — group does not exist
      AppError(ALREADY_MEMBER, 409)   — user is already in the group

    Returns: dict with the new member's details.
    """
    group = _get_group_or_404(group_id, store)

    user_id = data.get("user_id") or new_id("user")
    if group.find_member(user_id) is not None:
        raise AppError(
            ErrorCode.ALREADY_MEMBER,
            f"User {user_id} is already a member of group {group_id}.",
            409,
            field="user_id",
        )

    now = datetime.now(timezone.utc)
    member = GroupMember(
        user_id=user_id,
        display_name=data["display_name"],
        joined_at=now,
    )
    group.members.append(member)
    group.updated_at = now
    store.save_group(group)

    logger.info("Member %s added to group %s.", user_id, group_id)
    return {
        "group_id": group_id,
        "user_id": member.user_id,
        "display_name": member.display_name,
        "joined_at": member.joined_at.isoformat(),
    }


def remove_member(group_id: str, user_id: str, store: RecordStore) -> dict | None:
    """
    Removes a member from a group.

    If the member was the last one, the group and all its shared expenses
    are deleted and None is returned. Otherwise the updated group is
    returned.

    Raises:
      AppError(GROUP_NOT_FOUND, 404)   — group does not exist
      AppError(MEMBER_NOT_FOUND, 404)  — user is not a member of the group
    """
    group = _get_group_or_404(group_id, store)

    member = group.find_member(user_id)
    if member is None:
        raise AppError(
            ErrorCode.MEMBER_NOT_FOUND,
            f"User {user_id} is not a member of group {group_id}.",
            404,
        )

    if len(group.members) == 1:
        store.delete_group(group_id)
        logger.info(
            "Last member %s left group %s; group and its expenses deleted.",
            user_id, group_id,
        )
        return None

    group.members.remove(member)
    group.updated_at = datetime.now(timezone.utc)
    store.save_group(group)

    logger.info("Member %s removed from group %s.", user_id, group_id)
    return _build_group_dict(group)


def delete_group(group_id: str, store: RecordStore) -> None:
    """
    Deletes a group and every shared expense that belongs to it.

    Raises:
      AppError(GROUP_NOT_FOUND, 404) — group does not exist
    """
    _get_group_or_404(group_id, store)
    store.delete_group(group_id)
    logger.info("Group %s deleted.", group_id)
