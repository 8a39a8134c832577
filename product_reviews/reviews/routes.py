import logging
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from product_reviews.auth.dependencies import (
    CapabilityChecker,
    READ_REVIEWS,
    READ_VISIBLE_REVIEWS,
    READ_REVIEW,
    CREATE_REVIEW,
    UPDATE_REVIEW,
)
from product_reviews.db.cache import ReviewCache, get_review_cache
from product_reviews.db.main import get_session
from .repository import ReviewRepository
from .schemas import PatchOperation, ProductReviewCreateModel, ProductReviewModel
from .service import ReviewService

logger = logging.getLogger(__name__)

review_router = APIRouter()


def get_review_service(
    session: AsyncSession = Depends(get_session),
    cache: ReviewCache = Depends(get_review_cache)
) -> ReviewService:
    return ReviewService(ReviewRepository(session), cache)


@review_router.get(
    "",
    response_model=List[ProductReviewModel],
    dependencies=[Depends(CapabilityChecker(READ_REVIEWS))]
)
async def get_all_product_reviews(service: ReviewService = Depends(get_review_service)):
    return await service.list_all()


@review_router.get(
    "/Visible/{product_id}",
    response_model=List[ProductReviewModel],
    dependencies=[Depends(CapabilityChecker(READ_VISIBLE_REVIEWS))]
)
async def get_all_visible_product_reviews_for_product(
    product_id: int,
    service: ReviewService = Depends(get_review_service)
):
    return await service.list_visible_for_product(product_id)


@review_router.get(
    "/{review_id}",
    response_model=ProductReviewModel,
    responses={
        400: {"description": "IDs cannot be less than 1."},
        404: {"description": "Review not found."}
    },
    dependencies=[Depends(CapabilityChecker(READ_REVIEW))]
)
async def get_product_review(
    review_id: int,
    service: ReviewService = Depends(get_review_service)
):
    return await service.get_by_id(review_id)


@review_router.post(
    "/Create",
    response_model=ProductReviewModel,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(CapabilityChecker(CREATE_REVIEW))]
)
async def create_product_review(
    request: Request,
    response: Response,
    review_data: Optional[ProductReviewCreateModel] = Body(None),
    service: ReviewService = Depends(get_review_service)
):
    """
    Create a review for a product. The date is set to now and the review
    starts visible; the Location header points at the new review.
    """
    new_review = await service.create(review_data)
    response.headers["Location"] = str(
        request.url_for("get_product_review", review_id=new_review.id)
    )
    return new_review


@review_router.patch(
    "/Visibility/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Bad id or missing patch document."},
        404: {"description": "Review not found."},
        422: {"description": "The patched review failed validation."}
    },
    dependencies=[Depends(CapabilityChecker(UPDATE_REVIEW))]
)
async def update_product_review(
    review_id: int,
    patch_ops: Optional[List[PatchOperation]] = Body(None),
    service: ReviewService = Depends(get_review_service)
):
    """
    Toggle a review between visible and hidden with a JSON patch document,
    e.g. ``[{"op": "replace", "path": "/isHidden", "value": true}]``.
    """
    await service.update_patch(review_id, patch_ops)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
