import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)

class StorefrontError(Exception):
    """Base for errors the API turns into a structured response."""
    status_code = 400

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

class InvalidInput(StorefrontError):
    status_code = 400

class Unauthorized(StorefrontError):
    status_code = 401

class PaymentDeclined(StorefrontError):
    status_code = 402

class NotFound(StorefrontError):
    status_code = 404

class Conflict(StorefrontError):
    status_code = 409

def _body(message: str, errors=None) -> dict:
    body = {'message': message}
    if errors is not None:
        body['errors'] = errors
    return body

async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content=_body(exc.message, exc.errors))

async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {'loc': [str(p) for p in err.get('loc', ())], 'msg': err.get('msg', '')}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=_body('Invalid input', errors))

async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(status_code=500, content=_body('Internal Server Error'))

def register_error_handlers(app: FastAPI):
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
