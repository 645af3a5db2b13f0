from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:4200",
    "https://character-keeper.vercel.app",
)
ALLOWED_METHODS = "GET, POST, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def apply_cors_headers(request: Request, response: Response, allowed_origins: Iterable[str]) -> Response:
    """Set the cross-origin headers on `response`.

    Used by the middleware and by the last-resort 500 handler, which runs
    outside the middleware stack.
    """
    origin = request.headers.get('origin')
    if origin and origin in allowed_origins:
        response.headers['Access-Control-Allow-Origin'] = origin
        vary = response.headers.get('vary')
        response.headers['Vary'] = f'{vary}, Origin' if vary else 'Origin'
    response.headers['Access-Control-Allow-Methods'] = ALLOWED_METHODS
    response.headers['Access-Control-Allow-Headers'] = ALLOWED_HEADERS
    response.headers['Access-Control-Allow-Credentials'] = 'true'
    return response


#############################################
## Cross-origin policy
## Echoes the Origin back only when it is allow-listed and answers every
## preflight with a bare 200 before routing.
#############################################
class CORSPolicy(BaseHTTPMiddleware):
    def __init__(self, app, allowed_origins: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins if allowed_origins is not None else DEFAULT_ALLOWED_ORIGINS)

    def apply_headers(self, request: Request, response: Response) -> Response:
        return apply_cors_headers(request, response, self.allowed_origins)

    async def dispatch(self, request: Request, call_next):
        if request.method == 'OPTIONS':
            return self.apply_headers(request, Response(status_code=200))
        response = await call_next(request)
        return self.apply_headers(request, response)
