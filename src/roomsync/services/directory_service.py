"""Account directory: external identity -> account resolution and creation."""

from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.roomsync.core.encoding import encode_key
from src.roomsync.core.events import AccountSignedIn, EventBus
from src.roomsync.core.exceptions import NotFoundError, PartialWriteError
from src.roomsync.core.logging import get_logger
from src.roomsync.models import Account, AuthMapping
from src.roomsync.repositories import AccountRepository, AuthMappingRepository

logger = get_logger(__name__)


class DirectoryService:
    """Resolves and creates accounts for external identities."""

    def __init__(
        self,
        mapping_repo: AuthMappingRepository,
        account_repo: AccountRepository,
        session: AsyncSession,
        event_bus: EventBus,
    ):
        self.mapping_repo = mapping_repo
        self.account_repo = account_repo
        self.session = session
        self.event_bus = event_bus

    async def resolve_account(self, external_subject_id: str) -> Account | None:
        """Look up the account for an external identity.

        Returns None when the mapping is missing or points at an account
        record that does not exist (a dangling mapping left by a partial
        account creation).
        """
        mapping = await self.mapping_repo.get_by_encoded_subject(encode_key(external_subject_id))
        if mapping is None:
            return None

        account = await self.account_repo.get_by_id(mapping.account_id)
        if account is None:
            logger.warning(
                "Dangling auth mapping",
                account_id=str(mapping.account_id),
                encoded_subject_id=mapping.encoded_subject_id,
            )
            return None
        return account

    async def create_account(
        self,
        external_subject_id: str,
        name: str,
        email: str | None = None,
    ) -> Account:
        """Create an account for an external identity.

        Two separate writes: the mapping first, then the account record. A
        failed mapping write leaves nothing behind. A failed account write
        after the mapping committed raises PartialWriteError and leaves the
        mapping dangling until the reconciliation pass removes it.
        """
        account_id = uuid4()
        encoded = encode_key(external_subject_id)

        try:
            self.mapping_repo.add(AuthMapping(encoded_subject_id=encoded, account_id=account_id))
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to write auth mapping", error=str(e))
            raise

        try:
            account = Account(
                id=account_id,
                name=name,
                email=email,
                auth_subject_id=external_subject_id,
            )
            self.account_repo.add(account)
            await self.session.commit()
            await self.session.refresh(account)
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Account write failed after mapping was written",
                account_id=str(account_id),
                error=str(e),
            )
            raise PartialWriteError(
                "Account record could not be saved; sign-in mapping was left in place"
            ) from e

        logger.info("Account created", account_id=str(account_id))
        return account

    async def sign_in(
        self,
        external_subject_id: str,
        name: str | None = None,
        email: str | None = None,
    ) -> tuple[Account, bool]:
        """Resolve the caller's account, creating it on first sign-in.

        Returns (account, created). A dangling mapping is not overwritten:
        it is reported as not found until reconciliation repairs it.
        """
        account = await self.resolve_account(external_subject_id)
        created = False

        if account is None:
            existing = await self.mapping_repo.get_by_encoded_subject(
                encode_key(external_subject_id)
            )
            if existing is not None:
                raise NotFoundError("Account record missing for this sign-in; retry later")
            account = await self.create_account(
                external_subject_id,
                name=name or (email.split("@")[0] if email else "User"),
                email=email,
            )
            created = True

        await self.event_bus.publish(AccountSignedIn(account_id=account.id, created=created))
        return account, created
