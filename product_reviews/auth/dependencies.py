# Authentication and Authorization Dependencies

from fastapi import Request, Depends
from fastapi.security import HTTPBearer
import logging

from product_reviews.errors import InvalidToken, InsufficientPermission
from .utils import decode_token

logger = logging.getLogger(__name__)

READ_REVIEWS = "ReadReviews"
READ_VISIBLE_REVIEWS = "ReadVisibleReviews"
READ_REVIEW = "ReadReview"
CREATE_REVIEW = "CreateReview"
UPDATE_REVIEW = "UpdateReview"


class AccessTokenBearer(HTTPBearer):
    """Extends FastAPI's HTTPBearer to decode and verify the JWT."""
    def __init__(self, auto_error=True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> dict:
        """Validate the Bearer token from the Authorization header.

        Returns:
            dict: Decoded token data if valid

        Raises:
            InvalidToken: If the header is missing or the token does not decode
        """
        try:
            creds = await super().__call__(request)
        except Exception as e:
            logger.info(f"Rejected request to {request.url.path}: {e}")
            raise InvalidToken()

        if creds is None:
            raise InvalidToken()

        return decode_token(creds.credentials)


access_token_bearer = AccessTokenBearer()


class CapabilityChecker:
    """Used as a dependency to protect routes by a named capability."""
    def __init__(self, capability: str) -> None:
        self.capability = capability

    async def __call__(self, token_data: dict = Depends(access_token_bearer)) -> bool:
        """Check the token's permissions claim for the required capability.

        Raises:
            InsufficientPermission: If the capability is not granted
        """
        if self.capability in token_data.get("permissions", []):
            return True

        raise InsufficientPermission()
