from __future__ import annotations
from typing import Any
import pydantic
import structlog
from modgate.errors import NotFoundError, StorageError, ValidationError
from modgate.models.submission import Submission
from modgate.schemas.submission import SubmissionCreate
from modgate.security import Authenticator
from modgate.services.photos import PhotoResolver, ResolvedPhoto
from modgate.services.publisher import BroadcastPublisher
from modgate.services.store import SubmissionStore

log = structlog.get_logger()

# field -> accepted payload keys (legacy bot names second)
REQUIRED_FIELDS = {
    "server": ("server",),
    "car": ("car",),
    "price": ("price",),
    "photo_reference": ("photo_reference", "photo_file_id"),
}


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def missing_fields(payload: dict[str, Any]) -> list[str]:
    return [
        field for field, keys in REQUIRED_FIELDS.items()
        if not any(_present(payload.get(k)) for k in keys)
    ]


class ModerationGateway:
    """Submission lifecycle: intake -> pending -> published | rejected.

    Both terminal states are reached by deleting the row, so whichever of
    approve/reject deletes first wins and the other sees not-found.
    """

    def __init__(
        self,
        store: SubmissionStore,
        resolver: PhotoResolver,
        publisher: BroadcastPublisher,
        authenticator: Authenticator,
    ):
        self.store = store
        self.resolver = resolver
        self.publisher = publisher
        self.authenticator = authenticator

    async def intake(self, authorization: str | None, payload: Any) -> int:
        # credentials first: a bad token never reaches validation or the store
        self.authenticator.verify(authorization)
        if not isinstance(payload, dict):
            raise ValidationError("Bad Request: body must be a JSON object")
        missing = missing_fields(payload)
        if missing:
            raise ValidationError(f"Bad Request: Missing fields: {', '.join(missing)}")
        try:
            data = SubmissionCreate.model_validate(payload)
        except pydantic.ValidationError as e:
            bad = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise ValidationError(f"Bad Request: Invalid fields: {', '.join(bad)}") from None
        submission_id = await self.store.create(data.model_dump())
        log.info("submission_created", submission_id=submission_id, user_id=data.user_id)
        return submission_id

    async def list_pending(self) -> list[Submission]:
        return await self.store.list_pending()

    async def approve(self, submission_id: int) -> None:
        submission = await self.store.get(submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")

        # row stays put if this raises, so the reviewer can approve again
        await self.publisher.publish_submission(submission)
        log.info("submission_published", submission_id=submission_id)

        try:
            deleted = await self.store.delete(submission_id)
        except StorageError:
            log.error(
                "approve_delete_failed",
                submission_id=submission_id,
                note="published to channel but still pending; approving again will post a duplicate",
                exc_info=True,
            )
            raise
        if not deleted:
            log.warning(
                "approve_row_vanished",
                submission_id=submission_id,
                note="published to channel but the row was already removed",
            )
            raise NotFoundError("Submission not found")

    async def reject(self, submission_id: int) -> bool:
        deleted = await self.store.delete(submission_id)
        if deleted:
            log.info("submission_rejected", submission_id=submission_id)
        else:
            log.info("submission_reject_missing", submission_id=submission_id)
        return deleted

    async def fetch_photo(self, photo_reference: str) -> ResolvedPhoto:
        return await self.resolver.resolve(photo_reference)
