import uuid

import structlog


class RequestContextMiddleware:
    """Amarra `request_id` e `path` aos logs do structlog durante o request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id, path=request.path)
        try:
            response = self.get_response(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "path")
        response["X-Request-ID"] = request_id
        return response
