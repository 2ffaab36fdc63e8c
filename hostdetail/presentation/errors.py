"""Global exception handlers for the FastAPI application.

Unknown routes and unhandled exceptions answer with short plain-text
bodies; details only go to the log, never to the client.

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hostdetail.core.constants import (
    NOT_FOUND_BODY,
    SERVER_ERROR_BODY,
    USER_AGENT_LOG_MAX_LENGTH,
)
from hostdetail.core.container import get_logger


def _request_context(request: Request) -> dict[str, str | None]:
    return {
        "method": request.method,
        "url": str(request.url.path),
        "user_agent": (request.headers.get("user-agent") or "")[
            :USER_AGENT_LOG_MAX_LENGTH
        ],
        "client_ip": request.client.host if request.client else None,
    }


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Handle routing errors raised by the framework.

    404 and 405 (no route for this path/method pair) both answer with the
    not-found body; other HTTP errors keep their status and detail.

    Args:
        request: FastAPI Request object
        exc: HTTP exception raised by routing or an endpoint

    Returns:
        PlainTextResponse with the error body.
    """
    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        get_logger().warning("route_not_found", **_request_context(request))
        return PlainTextResponse(NOT_FOUND_BODY, status_code=status.HTTP_404_NOT_FOUND)

    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(
    request: Request, exc: Exception
) -> PlainTextResponse:
    """Handle unexpected Python exceptions.

    Prevents leaking stack traces or internal details to clients.

    Args:
        request: FastAPI Request object
        exc: Unhandled exception

    Returns:
        PlainTextResponse (500 Internal Server Error).
    """
    get_logger().error(
        "server_error",
        error=exc,
        **_request_context(request),
    )
    return PlainTextResponse(
        SERVER_ERROR_BODY,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> register_exception_handlers(app)
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
