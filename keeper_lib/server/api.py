from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from keeper_lib.config.health import get_health
from keeper_lib.services.resolver import resolve_optional_service

router = APIRouter()


@router.get('/health', response_class=PlainTextResponse)
async def health():
    return 'OK'


@router.get('/api/health')
async def api_health(request: Request):
    engine = resolve_optional_service(request, 'engine')
    return await run_in_threadpool(get_health, engine)
