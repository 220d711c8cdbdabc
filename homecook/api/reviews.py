"""
Review endpoints. Listing lives on the cook and meal routers.
"""
from fastapi import APIRouter, Depends

from homecook.api.deps import get_actor, get_review_service
from homecook.models.common import Actor
from homecook.models.review import Review, ReviewInput
from homecook.services.review_service import ReviewService

router = APIRouter()


@router.post("", response_model=Review, status_code=201)
async def create_review(
    review_input: ReviewInput,
    actor: Actor = Depends(get_actor),
    service: ReviewService = Depends(get_review_service),
):
    return await service.create_review(actor, review_input)
