"""Ledger operations shared by the room, redemption, subscription and deletion flows.

Nothing here commits: callers compose these steps into a single
transaction and commit once, so every multi-location change applies
together or not at all.
"""

import asyncio
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.db import SessionFactory
from src.roomsync.core.logging import get_logger
from src.roomsync.models import Account, RoomAccess
from src.roomsync.models.base import utc_now
from src.roomsync.repositories import (
    DemoCodeRepository,
    InvitationRepository,
    RoomAccessRepository,
    RoomMemberRepository,
    RoomRepository,
    TransferRequestRepository,
)

logger = get_logger(__name__)


async def activate_room_access(
    access_repo: RoomAccessRepository,
    member_repo: RoomMemberRepository,
    account: Account,
    room_id: str,
    is_admin: bool,
    via_super_admin: bool = False,
) -> RoomAccess:
    """Make ``room_id`` the account's only active room and list it as a member.

    Every other entry is deactivated with its remaining fields preserved.
    Legacy boolean entries are normalized to an inactive, non-admin entry
    joined now. The target entry is overwritten with a fresh join time.
    """
    now = utc_now()
    target: RoomAccess | None = None

    for entry in await access_repo.list_for_account(account.id):
        if entry.room_id == room_id:
            target = entry
            continue
        if entry.legacy:
            entry.joined_at = now
            entry.is_admin = False
            entry.via_super_admin = False
            entry.legacy = False
        entry.is_active = False
        access_repo.add(entry)

    if target is None:
        target = RoomAccess(account_id=account.id, room_id=room_id)
    target.joined_at = now
    target.is_active = True
    target.is_admin = is_admin
    target.via_super_admin = via_super_admin
    target.legacy = False
    access_repo.add(target)

    await member_repo.upsert(room_id, account.id, account.name, is_admin, joined_at=now)
    return target


async def purge_room(session: AsyncSession, room_id: str) -> list[UUID]:
    """Delete a room together with every reference to it (no commit).

    Removes each member's access entry, the member list, the room's join
    codes, cancels pending transfers, then deletes the room itself.

    Returns:
        Account ids that were listed as members.
    """
    member_repo = RoomMemberRepository(session)
    members = await member_repo.list_for_room(room_id)

    await RoomAccessRepository(session).delete_for_room(room_id)
    await member_repo.delete_for_room(room_id)
    await InvitationRepository(session).delete_for_room(room_id)
    await DemoCodeRepository(session).delete_for_room(room_id)
    await TransferRequestRepository(session).cancel_pending(room_id)
    await RoomRepository(session).delete_by_id(room_id)

    return [member.account_id for member in members]


@dataclass
class PurgeResult:
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


async def purge_rooms_concurrently(
    session_factory: SessionFactory, room_ids: list[str]
) -> PurgeResult:
    """Purge each room in its own transaction, all at once, and wait for all.

    A failed branch does not stop the others; failures are collected so the
    caller can decide whether to continue.
    """

    async def _purge(room_id: str) -> None:
        async with session_factory() as session:
            try:
                await purge_room(session, room_id)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    outcomes = await asyncio.gather(*(_purge(room_id) for room_id in room_ids), return_exceptions=True)

    result = PurgeResult()
    for room_id, outcome in zip(room_ids, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            logger.error("Room deletion failed", room_id=room_id, error=str(outcome))
            result.failed[room_id] = str(outcome)
        else:
            result.deleted.append(room_id)
    return result
