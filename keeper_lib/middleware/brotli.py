import logging

import brotli
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

COMPRESSIBLE_TYPES = ('application/json', 'text/', 'javascript')


#############################################
## Brotli compression middleware
## Compresses response bodies when client supports 'br'.
#############################################
class BrotliCompression(BaseHTTPMiddleware):
    def __init__(self, app, minimum_size: int = 300, quality: int = 4):
        super().__init__(app)
        self.minimum_size = minimum_size
        self.quality = quality

    async def dispatch(self, request: Request, call_next):
        accept_encoding = request.headers.get('accept-encoding', '')
        if 'br' not in accept_encoding.lower():
            return await call_next(request)

        response = await call_next(request)

        # Already encoded responses pass through untouched
        if response.headers.get('content-encoding'):
            return response

        content_type = response.headers.get('content-type', '')
        if not any(t in content_type for t in COMPRESSIBLE_TYPES):
            return response

        body = b''.join([chunk async for chunk in response.body_iterator])
        headers = dict(response.headers)
        headers.pop('content-length', None)

        if len(body) >= self.minimum_size:
            try:
                body = brotli.compress(body, quality=self.quality)
                headers['content-encoding'] = 'br'
                headers['vary'] = 'Accept-Encoding'
            except brotli.error:
                logger.warning('Brotli compression failed; sending identity body', exc_info=True)

        return Response(content=body, status_code=response.status_code, headers=headers)
