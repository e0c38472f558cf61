"""Global error handling middleware"""
import re
import traceback
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from chatwidget.config import get_settings

logger = logging.getLogger(__name__)

SESSION_PATH = re.compile(r"/sessions/([^/]+)")


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Turns unhandled errors into a JSON 500

    The widget page only needs to know the call failed; details are
    included outside production only.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            match = SESSION_PATH.search(request.url.path)
            session = match.group(1) if match else "-"
            logger.error(f"Unhandled error on {request.method} {request.url.path} (widget session {session}): {exc}")
            logger.error(traceback.format_exc())

            content = {"error": "Internal server error", "detail": "An unexpected error occurred"}
            if get_settings().environment != "production":
                content["detail"] = str(exc)
            return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
