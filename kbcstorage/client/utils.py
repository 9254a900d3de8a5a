import logging
from typing import Any, Optional, Type, TypeVar

import requests

from kbcstorage.exceptions import DecodeError, HTTPException
from kbcstorage.json_serde import from_json

logger = logging.getLogger(__name__)

ResponseT = TypeVar('ResponseT')


def parse_response(response_type: Type[ResponseT],
                   response: requests.Response) -> ResponseT:
    """Parse the HTTP response body into a Pydantic data structure.

    Args:
        response_type: a class definition for a Pydantic dataclass.
        response: a requests.Response object containing
            json data in the body

    Returns:
        The parsed response.

    Raises:
        DecodeError: if the body is not JSON of the expected shape.
    """
    try:
        return from_json(response.text, response_type)
    except DecodeError:
        logger.error("Unable to parse response %s", response.text)
        raise


def extract_error_detail(response: requests.Response) -> Optional[str]:
    r"""Returns the human-readable error message of a failed Storage API
    response. Storage reports errors as ``{"error": ..., "code": ...}``; other
    services use ``message``. Falls back to the raw body text.
    """
    try:
        body: Any = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ('error', 'message'):
            detail = body.get(key)
            if isinstance(detail, str) and detail:
                return detail
            if isinstance(detail, dict) and detail.get('message'):
                return str(detail['message'])

    text = response.text.strip()
    return text or None


def raise_on_error(response: requests.Response) -> None:
    r"""Raises an :class:`~kbcstorage.exceptions.HTTPException` if a response
    does not return with an OK status code.
    """
    if not response.ok:
        raise HTTPException(response.status_code,
                            extract_error_detail(response),
                            dict(response.headers))
