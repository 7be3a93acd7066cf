"""
Global exception handlers.

Every error leaves the API in the same envelope as a success:
``{"success": false, "message": ...}``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .routes.system import list_endpoints

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # no endpoint in scope means the router matched nothing; a known path with
        # the wrong method has no handler either
        unmatched = exc.status_code == status.HTTP_404_NOT_FOUND and request.scope.get('endpoint') is None
        if unmatched or exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    'success': False,
                    'message': f'endpoint not found: {request.method} {request.url.path}',
                    'tip': 'check the URL spelling',
                    'availableAPIs': list_endpoints(request.app),
                },
            )
        if exc.status_code >= 500:
            logger.error({'msg': 'request_failed', 'path': request.url.path, 'error': exc.detail})
        return JSONResponse(
            status_code=exc.status_code,
            content={'success': False, 'message': exc.detail},
            headers=getattr(exc, 'headers', None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning({'msg': 'validation_error', 'path': request.url.path, 'errors': str(exc.errors())})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'success': False, 'message': validation_message(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error({'msg': 'unhandled_exception', 'path': request.url.path, 'error': str(exc)}, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'success': False, 'message': f'server error: {exc}'},
        )


def validation_message(errors) -> str:
    """Human readable text for the first validation error."""
    if not errors:
        return 'invalid request'
    first = errors[0]
    ctx = first.get('ctx') or {}
    if first.get('type') == 'value_error' and 'error' in ctx:
        return str(ctx['error'])
    field = next((loc for loc in reversed(first.get('loc', ())) if isinstance(loc, str)), 'request')
    return f"{field}: {first.get('msg')}"


def log_unhandled_loop_error(loop, context):
    """asyncio exception handler: failures nobody awaited are logged and the process keeps running."""
    error = context.get('exception') or context.get('message')
    logger.error({'msg': 'unhandled_async_error', 'error': str(error)}, exc_info=context.get('exception'))
