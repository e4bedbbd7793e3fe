from __future__ import annotations
from fastapi import APIRouter, Depends, Header, Request
from modgate.deps import get_gateway
from modgate.models.submission import Submission
from modgate.schemas.submission import ActionResult, SubmissionCreated, SubmissionList, SubmissionPublic
from modgate.services.gateway import ModerationGateway

router = APIRouter(prefix="/submissions", tags=["submissions"])

def _pub(request: Request, s: Submission) -> SubmissionPublic:
    out = SubmissionPublic.model_validate(s)
    out.photo_url = request.url_for("get_photo", reference=s.photo_reference).path
    return out

@router.post("", response_model=SubmissionCreated, status_code=201)
async def create_submission(
    request: Request,
    authorization: str | None = Header(default=None),
    gateway: ModerationGateway = Depends(get_gateway),
):
    # Body is read by hand so a bad token is answered with 403 even when the
    # payload would not parse.
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    submission_id = await gateway.intake(authorization, payload)
    return SubmissionCreated(id=submission_id)

@router.get("", response_model=SubmissionList)
async def list_submissions(request: Request, gateway: ModerationGateway = Depends(get_gateway)):
    rows = await gateway.list_pending()
    return SubmissionList(data=[_pub(request, s) for s in rows])

@router.post("/{submission_id}/approve", response_model=ActionResult, response_model_exclude_none=True)
async def approve_submission(submission_id: int, gateway: ModerationGateway = Depends(get_gateway)):
    await gateway.approve(submission_id)
    return ActionResult()

@router.post("/{submission_id}/reject", response_model=ActionResult)
async def reject_submission(submission_id: int, gateway: ModerationGateway = Depends(get_gateway)):
    deleted = await gateway.reject(submission_id)
    return ActionResult(deleted=deleted)
