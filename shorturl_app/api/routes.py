import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from shorturl_app.exceptions import InvalidRequestBody, UnsupportedMethod
from shorturl_app.schemas.url import (
    RedirectTarget,
    StatsResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from shorturl_app.services.url_service import URLService
from shorturl_app.dependencies import get_url_service

router = APIRouter(tags=["shortener"])

UNSUPPORTED_METHODS = ["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


# Registered first so HEAD never falls through to the counting GET route
@router.api_route("/{path:path}", methods=UNSUPPORTED_METHODS, include_in_schema=False)
async def reject_method(request: Request):
    raise UnsupportedMethod(request.method)


@router.post("/{path:path}", response_model=SubmissionResponse)
async def submit_url(
    request: Request,
    token: Optional[str] = Header(None),
    url_service: URLService = Depends(get_url_service)
):
    """Create a short URL. The path is ignored; `POST /` is the documented form."""
    # Auth comes before body parsing so a bad token never reveals body errors
    url_service.authorize(token)
    body = await read_submission(request)
    record = await url_service.submit(token, body.url, body.id)
    return SubmissionResponse(url=record.url, id=record.id)


@router.get("/{path:path}", response_model=StatsResponse)
async def retrieve_url(
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    `GET /<id>` redirects (and counts a visit), `GET /<id>+` returns stats.
    """
    result = await url_service.retrieve(request.url.path)
    if isinstance(result, RedirectTarget):
        return RedirectResponse(url=result.url, status_code=status.HTTP_302_FOUND)
    return result


async def read_submission(request: Request) -> SubmissionRequest:
    """
    Parse a JSON or form-encoded submission body.

    An empty body parses as no fields, so the service reports the missing url.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        raw = await request.body()
        if not raw.strip():
            data = {}
        else:
            try:
                data = json.loads(raw)
            except ValueError:
                raise InvalidRequestBody("request body is not valid JSON")

    if not isinstance(data, dict):
        raise InvalidRequestBody("request body must be an object")

    try:
        return SubmissionRequest.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise InvalidRequestBody(f"invalid field type: {fields}")
