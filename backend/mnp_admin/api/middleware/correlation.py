"""Correlation ID and access logging middleware"""
import time

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ...utils.logger import get_logger, set_correlation_id
from ...utils.idgen import generate_correlation_id

logger = get_logger("mnp_admin.access")

CORRELATION_HEADER = "X-Correlation-Id"


class CorrelationIdMiddleware:
    """
    Tags every HTTP request with a correlation id.
    
    The id is taken from the X-Correlation-Id request header or generated,
    bound to the logging context for the duration of the request, echoed on
    the response and written to one access log line.
    """
    
    def __init__(self, app: ASGIApp):
        self.app = app
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        
        correlation_id = Headers(scope=scope).get(CORRELATION_HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)
        started = time.perf_counter()
        status_code = 500
        
        async def send_with_header(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[CORRELATION_HEADER] = correlation_id
            await send(message)
        
        try:
            await self.app(scope, receive, send_with_header)
        finally:
            logger.info(
                f"{scope['method']} {scope['path']} -> {status_code}",
                extra={
                    "method": scope["method"],
                    "path": scope["path"],
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                }
            )
