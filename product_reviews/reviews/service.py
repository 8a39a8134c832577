import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import jsonpatch
import jsonpointer
from pydantic import ValidationError

from product_reviews.db.cache import ReviewCache
from product_reviews.db.models import ProductReview
from product_reviews.errors import InvalidArgument, ReviewNotFound, ValidationFailed
from .repository import ReviewRepository
from .schemas import (
    PatchOperation,
    ProductReviewCreateModel,
    ProductReviewModel,
    ProductReviewUpdateModel,
)

logger = logging.getLogger(__name__)


def _validation_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.setdefault(field, []).append(error["msg"])
    return errors


class ReviewService:
    def __init__(self, store: ReviewRepository, cache: ReviewCache):
        self.store = store
        self.cache = cache

    async def list_all(self) -> List[ProductReviewModel]:
        cached = self.cache.get_all()
        if cached is not None:
            logger.debug("Serving all reviews from cache")
            return cached

        # A miss here leaves the cache unpopulated
        reviews = await self.store.list_all()
        return [ProductReviewModel.model_validate(review) for review in reviews]

    async def list_visible_for_product(self, product_id: int) -> List[ProductReviewModel]:
        if product_id < 1:
            raise InvalidArgument("IDs cannot be less than 1.")

        cached = self.cache.get_all()
        if cached is not None:
            return [r for r in cached if not r.is_hidden and r.product_id == product_id]

        reviews = await self.store.list_visible_for_product(product_id)
        return [ProductReviewModel.model_validate(review) for review in reviews]

    async def get_by_id(self, review_id: int) -> ProductReviewModel:
        if review_id < 1:
            raise InvalidArgument("IDs cannot be less than 1.")

        if self.cache.is_populated:
            cached = self.cache.find(review_id)
            if cached is not None:
                return cached

            review = await self.store.get_by_id(review_id)
            if review is None:
                raise ReviewNotFound(review_id)

            review_model = ProductReviewModel.model_validate(review)
            # an update may have cached a fresher copy while the store was queried
            self.cache.add_if_absent(review_model)
            logger.debug(f"Review {review_id} missing from populated cache, added it")
            return review_model

        review = await self.store.get_by_id(review_id)
        if review is None:
            raise ReviewNotFound(review_id)
        return ProductReviewModel.model_validate(review)

    async def create(self, review_data: Optional[ProductReviewCreateModel]) -> ProductReviewModel:
        if review_data is None:
            raise InvalidArgument("The product review to create cannot be null.")

        new_review = ProductReview(
            header=review_data.header,
            content=review_data.content,
            product_id=review_data.product_id,
            date=datetime.now(),
            is_hidden=False
        )

        new_review = await self.store.insert(new_review)
        await self.store.commit()

        review_model = ProductReviewModel.model_validate(new_review)
        self.cache.add(review_model)

        logger.info(f"Created review {review_model.id} for product {review_model.product_id}")
        return review_model

    async def update_patch(
        self,
        review_id: int,
        patch_ops: Optional[Sequence[PatchOperation]]
    ) -> ProductReviewModel:
        if review_id < 1:
            raise InvalidArgument("IDs cannot be less than 1.")

        if patch_ops is None:
            raise InvalidArgument("The product review patch cannot be null.")

        review = await self.store.get_by_id(review_id)
        if review is None:
            raise ReviewNotFound(review_id)

        document = ProductReviewUpdateModel.model_validate(review).model_dump(by_alias=True)
        try:
            patched = jsonpatch.apply_patch(
                document,
                [op.to_patch_dict() for op in patch_ops]
            )
        except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as e:
            raise ValidationFailed({"patch": [str(e)]}) from e

        try:
            update = ProductReviewUpdateModel.model_validate(patched)
        except ValidationError as e:
            raise ValidationFailed(_validation_errors(e)) from e

        review.is_hidden = update.is_hidden
        self.store.mark_dirty(review)
        await self.store.commit()

        review_model = ProductReviewModel.model_validate(review)
        self.cache.replace(review_model)

        logger.info(f"Review {review_id} visibility set to hidden={review_model.is_hidden}")
        return review_model
