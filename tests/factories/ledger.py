"""Room, member list and access factories."""

from polyfactory import Use

from src.roomsync.models import Room, RoomAccess, RoomMember
from src.roomsync.models.room import generate_room_id
from tests.factories.base import BaseFactory, utc_now


class RoomFactory(BaseFactory):
    __model__ = Room

    id = Use(generate_room_id)
    name = "Test Room"
    owner_id = None
    created_at = Use(utc_now)


class RoomMemberFactory(BaseFactory):
    __model__ = RoomMember

    # Keys - must be set explicitly
    room_id = None
    account_id = None
    name = "Test User"
    is_admin = False
    joined_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        return cls.build(is_admin=True, **kwargs)


class RoomAccessFactory(BaseFactory):
    __model__ = RoomAccess

    # Keys - must be set explicitly
    account_id = None
    room_id = None
    joined_at = Use(utc_now)
    is_active = False
    is_admin = False
    via_super_admin = False
    legacy = False

    @classmethod
    def legacy_entry(cls, **kwargs):
        """An imported bare-boolean entry that has not been normalized."""
        return cls.build(legacy=True, **kwargs)
