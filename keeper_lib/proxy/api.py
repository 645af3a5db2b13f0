from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from keeper_lib.services.interfaces import FetcherProtocol
from keeper_lib.services.resolver import resolve_service

import logging
router = APIRouter()
logger = logging.getLogger(__name__)


@router.get('/character')
async def api_character(request: Request):
    url = request.query_params.get('url')
    logger.debug("Proxying character fetch for %s", url)
    fetcher: FetcherProtocol = resolve_service(request, 'character_fetcher')
    result = await run_in_threadpool(fetcher.fetch, url)
    return {'url': result.url, 'content': result.content}
