from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from product_reviews.config import Config
from product_reviews.db.cache import ReviewCache, get_review_cache
from product_reviews.db.main import async_engine, async_session_maker
from product_reviews.reviews.repository import ReviewRepository
from product_reviews.reviews.routes import review_router
from product_reviews.reviews.schemas import ProductReviewModel

from .errors import register_all_errors
from .middleware import register_middleware

logger = logging.getLogger(__name__)
logging.getLogger("product_reviews").setLevel(Config.LOG_LEVEL)

version = "v1"


async def preload_review_cache(cache: ReviewCache) -> None:
    async with async_session_maker() as session:
        reviews = await ReviewRepository(session).list_all()
    cache.populate(ProductReviewModel.model_validate(review) for review in reviews)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if Config.REVIEW_CACHE_PRELOAD:
        await preload_review_cache(app.state.review_cache)
    yield
    logger.info("Shutting down, dropping review cache")
    await async_engine.dispose()


app = FastAPI(
    title = "Product Reviews",
    description = "A REST API for creating, reading and moderating product reviews",
    version = version,
    lifespan = lifespan,
)

# One cache per process; it starts cold after every restart
app.state.review_cache = ReviewCache()

register_all_errors(app)
register_middleware(app)


app.include_router(review_router, prefix="/ProductReviews", tags=['product reviews'])


@app.get("/health")
async def health(cache: ReviewCache = Depends(get_review_cache)):
    return JSONResponse(
        content={
            "status": "ok",
            "version": version,
            "review_cache": {
                "populated": cache.is_populated,
                "size": cache.count(),
            },
        }
    )
