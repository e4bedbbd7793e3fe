from __future__ import annotations
import structlog
from modgate.errors import UpstreamError
from modgate.models.submission import Submission
from modgate.services.telegram import TelegramClient, TelegramError

log = structlog.get_logger()


def build_caption(template: str, submission: Submission) -> str:
    return template.format(
        server=submission.server,
        car=submission.car,
        price=submission.price,
        user_name=submission.user_name or "",
    )


class BroadcastPublisher:
    """Posts approved submissions to the channel. Calling twice posts twice."""

    def __init__(self, telegram: TelegramClient, chat_id: str, caption_template: str):
        self._telegram = telegram
        self._chat_id = chat_id
        self._template = caption_template

    async def publish_submission(self, submission: Submission) -> None:
        await self.publish(submission.photo_reference, build_caption(self._template, submission))

    async def publish(self, photo_reference: str, caption: str) -> None:
        try:
            await self._telegram.send_photo(self._chat_id, photo_reference, caption)
        except TelegramError as e:
            log.error("publish_failed", photo_reference=photo_reference, status=e.status_code, reason=e.description)
            raise UpstreamError(e.description) from None
