"""Visitor feedback route, limited to one submission per client per minute."""

from fastapi import APIRouter, Depends, Request

from reviews.api.auth import api_rate_limit, client_address
from reviews.api.commands import dispatch
from reviews.api.schemas import FeedbackRequest, IdResponse
from reviews.feedback.feedback import SubmitFeedback
from reviews.throttle import get_rate_limiter

feedback_router = APIRouter(prefix="/feedback", tags=["feedback"], dependencies=[Depends(api_rate_limit)])


@feedback_router.post("", status_code=201, response_model=IdResponse)
async def submit_feedback(request: Request, body: FeedbackRequest) -> IdResponse:
    limiter = get_rate_limiter("feedback")
    client = client_address(request)
    limiter.check(client)

    feedback_id = await dispatch(
        SubmitFeedback(message=body.message, name=body.name, email=body.email, website=body.website)
    )
    limiter.record(client)
    return IdResponse(id=feedback_id)
