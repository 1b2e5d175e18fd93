"""
events.py - Read-only event queries.

GET /event/{category}/quantity   -> decimal count, or a "no events yet" message
GET /event/{category}?index=N    -> stored record, or a "no event with index N" message

Every response is application/json. Bodies are written verbatim: the
count and the record are already JSON text, and the absent messages are
sent as-is.
"""

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from chain_indexer.categories import EventCategory
from chain_indexer.errors import ValidationError
from chain_indexer.query import INT64_MAX, INT64_MIN, QueryService
from chain_indexer.api.deps import get_query_service

router = APIRouter()
logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def json_response(content: str | None, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(content=content, status_code=status_code, media_type=JSON_MEDIA_TYPE)


def resolve_category(name: str) -> EventCategory:
    category = EventCategory.from_name(name)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return category


def parse_index(values: list[str]) -> int:
    """
    Extract ``index`` from raw query-string values.

    The first value that parses as a signed 64-bit integer wins.

    Raises:
        ValidationError: No usable value, or the value is zero or negative.
    """
    for raw in values:
        if not _INTEGER_RE.fullmatch(raw):
            continue
        value = int(raw)
        if not INT64_MIN <= value <= INT64_MAX:
            continue
        if value < 1:
            raise ValidationError(
                "index must be a positive integer",
                details={"index": raw},
            )
        return value

    raise ValidationError(
        "index query parameter is missing or not an integer",
        details={"index": values},
    )


@router.get("/{category}/quantity")
def get_quantity(category: str, service: QueryService = Depends(get_query_service)):
    event_category = resolve_category(category)

    quantity = service.get_quantity(event_category)
    if quantity is None:
        return json_response(
            f"There are no events of {event_category.display_name} type yet."
        )
    return json_response(str(quantity))


@router.get("/{category}")
def get_by_index(
    category: str,
    request: Request,
    service: QueryService = Depends(get_query_service),
):
    event_category = resolve_category(category)
    index = parse_index(request.query_params.getlist("index"))

    record = service.get_by_index(event_category, index)
    if record is None:
        return json_response(
            f"There is no event of {event_category.display_name} type with index {index}."
        )
    return json_response(record)
