from typing import Any, Callable, Dict, List, Optional
from fastapi import FastAPI, status
from fastapi.requests import Request
from fastapi.responses import JSONResponse


class ProductReviewsException(Exception):
    """This is the base class for all product review errors"""
    pass


class InvalidArgument(ProductReviewsException):
    """A caller supplied an out-of-range id or left out a required body."""
    pass


class ReviewNotFound(ProductReviewsException):
    """No review exists for the requested id."""
    def __init__(self, review_id: int):
        self.review_id = review_id
        super().__init__(f"A resource for ID: {review_id} does not exist.")


class ValidationFailed(ProductReviewsException):
    """A patched review no longer satisfies its field rules."""
    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("One or more validation errors occurred.")


class InvalidToken(ProductReviewsException):
    """User has been provided an invalid or expired token"""
    pass


class InsufficientPermission(ProductReviewsException):
    """The token does not carry the capability the route requires"""
    pass


def create_exception_handler(
    status_code: int,
    initial_detail: Any,
    extra_detail: Optional[Callable[[ProductReviewsException], dict]] = None
) -> Callable[[Request, Exception], JSONResponse]:
    async def exception_handler(request: Request, exc: ProductReviewsException):
        content = dict(initial_detail)
        if extra_detail is not None:
            content.update(extra_detail(exc))
        return JSONResponse(
            content=content,
            status_code=status_code
        )

    return exception_handler


def register_all_errors(app: FastAPI):
    # Invalid Argument
    app.add_exception_handler(
        InvalidArgument,
        create_exception_handler(
            status_code=status.HTTP_400_BAD_REQUEST,
            initial_detail={
                "error_code": "invalid_argument"
            },
            extra_detail=lambda exc: {"message": str(exc)}
        )
    )

    # Review Not Found
    app.add_exception_handler(
        ReviewNotFound,
        create_exception_handler(
            status_code=status.HTTP_404_NOT_FOUND,
            initial_detail={
                "error_code": "review_not_found"
            },
            extra_detail=lambda exc: {"message": str(exc)}
        )
    )

    # Validation Failed
    app.add_exception_handler(
        ValidationFailed,
        create_exception_handler(
            status_code=422,
            initial_detail={
                "message": "One or more validation errors occurred.",
                "error_code": "validation_failed"
            },
            extra_detail=lambda exc: {"errors": exc.errors}
        )
    )

    # Invalid Token
    app.add_exception_handler(
        InvalidToken,
        create_exception_handler(
            status_code=status.HTTP_401_UNAUTHORIZED,
            initial_detail={
                "message": "you provided an invalid or expired token",
                "error_code": "invalid_token"
            }
        )
    )

    # Insufficient Permission
    app.add_exception_handler(
        InsufficientPermission,
        create_exception_handler(
            status_code=status.HTTP_403_FORBIDDEN,
            initial_detail={
                "message": "You do not have sufficient permission",
                "error_code": "insufficient_permission"
            }
        )
    )

    @app.exception_handler(500)
    async def internal_server_error_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "Oops, something went wrong. Please try again later",
                "error_code": "server_error"
            }
        )
