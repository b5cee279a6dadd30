"""Tests for account resolution, creation and sign-in."""

from unittest.mock import patch

import pytest

from src.roomsync.core.encoding import encode_key
from src.roomsync.core.events import AccountSignedIn
from src.roomsync.core.exceptions import NotFoundError, PartialWriteError
from src.roomsync.models import Account, AuthMapping
from tests.factories import AccountFactory, AuthMappingFactory
from tests.helpers import create_account

pytestmark = pytest.mark.integration


class TestResolveAccount:
    async def test_resolves_mapped_account(self, db_session, directory_service):
        account = await create_account(db_session, AccountFactory.build(auth_subject_id="auth|alice"))

        resolved = await directory_service.resolve_account("auth|alice")

        assert resolved is not None
        assert resolved.id == account.id

    async def test_unknown_identity_resolves_to_none(self, directory_service):
        assert await directory_service.resolve_account("auth|nobody") is None

    async def test_dangling_mapping_resolves_to_none(self, db_session, directory_service):
        db_session.add(
            AuthMappingFactory.build(
                encoded_subject_id=encode_key("auth|ghost"), account_id=AccountFactory.build().id
            )
        )
        await db_session.commit()

        assert await directory_service.resolve_account("auth|ghost") is None

    async def test_subject_with_reserved_characters(self, db_session, directory_service):
        subject = "apple.001234.abc/def#1"
        account = await create_account(db_session, AccountFactory.build(auth_subject_id=subject))

        resolved = await directory_service.resolve_account(subject)

        assert resolved is not None
        assert resolved.id == account.id


class TestCreateAccount:
    async def test_writes_mapping_then_account(self, directory_service, check_session):
        account = await directory_service.create_account("auth|bob", "Bob", "bob@example.com")

        mapping = await check_session.get(AuthMapping, encode_key("auth|bob"))
        stored = await check_session.get(Account, account.id)
        assert mapping is not None
        assert mapping.account_id == account.id
        assert stored is not None
        assert stored.name == "Bob"
        assert stored.subscription_plan == "none"
        assert stored.room_quota == 0

    async def test_failed_account_write_leaves_dangling_mapping(
        self, directory_service, check_session
    ):
        commit = directory_service.session.commit
        calls = 0

        async def fail_second_commit():
            nonlocal calls
            calls += 1
            if calls == 2:
                raise RuntimeError("disk full")
            await commit()

        with (
            patch.object(directory_service.session, "commit", side_effect=fail_second_commit),
            pytest.raises(PartialWriteError),
        ):
            await directory_service.create_account("auth|carol", "Carol")

        mapping = await check_session.get(AuthMapping, encode_key("auth|carol"))
        assert mapping is not None
        assert await check_session.get(Account, mapping.account_id) is None


class TestSignIn:
    async def test_first_sign_in_creates_account(self, directory_service, event_bus):
        account, created = await directory_service.sign_in(
            "auth|dave", name=None, email="dave@example.com"
        )

        assert created is True
        assert account.name == "dave"
        [event] = event_bus.of_type(AccountSignedIn)
        assert event.account_id == account.id
        assert event.created is True

    async def test_second_sign_in_returns_same_account(self, directory_service):
        first, _ = await directory_service.sign_in("auth|erin", name="Erin")
        second, created = await directory_service.sign_in("auth|erin", name="Someone Else")

        assert created is False
        assert second.id == first.id
        assert second.name == "Erin"

    async def test_dangling_mapping_is_not_overwritten(self, db_session, directory_service):
        db_session.add(
            AuthMappingFactory.build(
                encoded_subject_id=encode_key("auth|frank"), account_id=AccountFactory.build().id
            )
        )
        await db_session.commit()

        with pytest.raises(NotFoundError):
            await directory_service.sign_in("auth|frank", name="Frank")
