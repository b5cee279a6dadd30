"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.encoding import encode_key
from src.roomsync.core.security import create_identity_token
from src.roomsync.models import Account, AuthMapping, Room, RoomAccess, RoomMember
from tests.factories import (
    AccountFactory,
    RoomAccessFactory,
    RoomFactory,
    RoomMemberFactory,
)


async def create_account(session: AsyncSession, account: Account | None = None) -> Account:
    """Persist an account together with its sign-in mapping."""
    account = account or AccountFactory.build()
    session.add(account)
    if account.auth_subject_id:
        session.add(
            AuthMapping(
                encoded_subject_id=encode_key(account.auth_subject_id),
                account_id=account.id,
            )
        )
    await session.commit()
    return account


async def create_room(
    session: AsyncSession,
    owner: Account,
    name: str = "Test Room",
    active: bool = True,
) -> Room:
    """Persist a room owned by ``owner``, listed as its admin member."""
    room = RoomFactory.build(name=name, owner_id=owner.id)
    session.add(room)
    session.add(
        RoomMemberFactory.admin(room_id=room.id, account_id=owner.id, name=owner.name)
    )
    session.add(
        RoomAccessFactory.build(
            account_id=owner.id, room_id=room.id, is_admin=True, is_active=active
        )
    )
    await session.commit()
    return room


async def add_member(
    session: AsyncSession,
    room: Room,
    account: Account,
    is_admin: bool = False,
    active: bool = False,
) -> tuple[RoomMember, RoomAccess]:
    """List ``account`` as a member of ``room`` on both sides of the ledger."""
    member = RoomMemberFactory.build(
        room_id=room.id, account_id=account.id, name=account.name, is_admin=is_admin
    )
    access = RoomAccessFactory.build(
        account_id=account.id, room_id=room.id, is_admin=is_admin, is_active=active
    )
    session.add(member)
    session.add(access)
    await session.commit()
    return member, access


def bearer(subject: str, name: str | None = None, email: str | None = None) -> dict[str, str]:
    """Authorization header carrying an identity token for ``subject``."""
    token = create_identity_token(subject, name=name, email=email)
    return {"Authorization": f"Bearer {token}"}
