"""
Where: services/catalog/middleware.py
What: Catalog HTTP middleware for request id propagation.
Why: Isolate cross-cutting request concerns from app assembly.
"""

from fastapi import Request

from services.common.core.request_context import clear_request_id, generate_request_id

REQUEST_ID_HEADER = "X-Request-Id"


async def request_id_middleware(request: Request, call_next):
    """Tag every request with a Request ID visible to logs and the client."""
    req_id = generate_request_id()
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = req_id
        return response
    finally:
        clear_request_id()
