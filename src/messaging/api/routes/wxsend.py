from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from src.dependencies import get_dispatch_service
from src.messaging.api.schemas import SendMessageRequest
from src.messaging.application.services.dispatch_service import DispatchService
from src.messaging.domain.exceptions import MalformedInput
from src.messaging.domain.models import RequestParams

router = APIRouter(tags=["Messaging: Send"])


def first_query_values(request: Request) -> Dict[str, str]:
    # a repeated key keeps its first occurrence (?userid=a&userid=b -> "a")
    query = request.query_params
    return {key: query.getlist(key)[0] for key in query.keys()}


def parse_json_body(raw: bytes) -> RequestParams:
    """Decode a POST body into RequestParams; anything undecodable is MalformedInput."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise MalformedInput(f"Invalid JSON format: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedInput(f"Invalid JSON format: expected an object, got {type(data).__name__}")
    try:
        return SendMessageRequest.model_validate(data).to_params()
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedInput(f"Invalid JSON format: {field}: {first.get('msg')}") from e


@router.get("/wxsend")
async def wxsend_get(
    request: Request,
    svc: DispatchService = Depends(get_dispatch_service),
) -> Dict[str, Any]:
    params = RequestParams.from_wire(first_query_values(request))
    result = await svc.dispatch(params)
    return result.to_payload()


@router.post("/wxsend")
async def wxsend_post(
    request: Request,
    svc: DispatchService = Depends(get_dispatch_service),
) -> Dict[str, Any]:
    params = parse_json_body(await request.body())
    result = await svc.dispatch(params)
    return result.to_payload()
