import uuid

import structlog

from healthhub_core.adapters.context.request_context import reset_request, set_current_request

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware:
    """
    Guarda a request em uma context var e vincula request_id/method/path
    ao contexto do structlog durante a requisição.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = set_current_request(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
        )
        try:
            response = self.get_response(request)
        finally:
            reset_request(token)
            structlog.contextvars.clear_contextvars()
        response[REQUEST_ID_HEADER] = request_id
        return response
