import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from product_reviews.db.models import ProductReview

logger = logging.getLogger(__name__)


class ReviewRepository:
    """SQL-backed store for product reviews.

    Inserts and updates stay pending on the session until ``commit`` is
    called.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[ProductReview]:
        statement = select(ProductReview).order_by(ProductReview.id)
        result = await self.session.exec(statement)
        return list(result.all())

    async def list_visible_for_product(self, product_id: int) -> List[ProductReview]:
        statement = (
            select(ProductReview)
            .where(ProductReview.product_id == product_id)
            .where(ProductReview.is_hidden == False)  # noqa: E712
            .order_by(ProductReview.id)
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def get_by_id(self, review_id: int) -> Optional[ProductReview]:
        statement = select(ProductReview).where(ProductReview.id == review_id)
        result = await self.session.exec(statement)
        return result.first()

    async def insert(self, review: ProductReview) -> ProductReview:
        self.session.add(review)
        # flush so the database assigns the id before the commit
        await self.session.flush()
        return review

    def mark_dirty(self, review: ProductReview) -> None:
        self.session.add(review)

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to commit product review changes: {e}", exc_info=True)
            await self.session.rollback()
            raise
