import json
import math
from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from keeper_lib.errors import ValidationError
from keeper_lib.services.interfaces import DocumentStoreProtocol
from keeper_lib.services.resolver import resolve_service
from keeper_lib.util import rfc3339

import logging
router = APIRouter()
logger = logging.getLogger(__name__)


class SavePayload(BaseModel):
    key: Optional[str] = None
    data: Any = None


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number out of range {text}")
    return value


async def _read_save_payload(request: Request) -> SavePayload:
    # NaN, Infinity and overflowing literals are not JSON; refuse them here
    # rather than at serialization time.
    try:
        raw = json.loads(await request.body(), parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as e:
        raise ValidationError(f"invalid json: {e}") from e
    try:
        return SavePayload.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError("invalid json: expected an object with a string 'key'") from e


@router.post('/save')
async def api_save(request: Request):
    payload = await _read_save_payload(request)
    logger.debug("Saving character data under key %s", payload.key)

    store: DocumentStoreProtocol = resolve_service(request, 'document_store')
    result = await run_in_threadpool(store.save, payload.key, payload.data)
    return {'status': 'saved', 'key': result.key, 'savedAt': rfc3339(result.saved_at)}


@router.get('/load')
async def api_load(request: Request):
    key = request.query_params.get('key')
    logger.debug("Loading character data for key %s", key)

    store: DocumentStoreProtocol = resolve_service(request, 'document_store')
    result = await run_in_threadpool(store.load, key)
    return {'key': result.key, 'data': result.data, 'loadedAt': rfc3339(result.loaded_at)}


@router.delete('/delete')
async def api_delete(request: Request):
    key = request.query_params.get('key')
    store: DocumentStoreProtocol = resolve_service(request, 'document_store')
    # Delete is idempotent: a key that did not exist still reports success.
    await run_in_threadpool(store.delete, key)
    return {'status': 'deleted', 'key': key}
