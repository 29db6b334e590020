import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from config.backend import BackendConfig
from registration.errors import (
    NetworkError,
    NotFound,
    RegistrationError,
    ServerError,
    ValidationError,
)
from registration.schema import PHOTO_FIELD, Registration, RegistrationDraft

logger = logging.getLogger(__name__)

_PAYLOAD_REJECTED = {400, 422}


class RegistrationClient:
    """
    The five remote operations on /api/registrations. The session belongs to
    the caller; this class never opens or closes it.
    """

    def __init__(self, session: aiohttp.ClientSession, config: BackendConfig):
        self.session = session
        self.config = config
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)

    async def list(self) -> List[Registration]:
        body = await self._request("GET", self.config.registrations_url)
        if not isinstance(body, list):
            raise ServerError("Expected a list of registrations")
        return [_registration(item) for item in body]

    async def fetch_one(self, registration_id: str) -> Registration:
        body = await self._request("GET", self._item_url(registration_id))
        return _registration(body)

    async def create(self, draft: RegistrationDraft) -> Registration:
        body = await self._request(
            "POST", self.config.registrations_url, data=self.multipart(draft), payload=True
        )
        created = _registration(body)
        logger.info(f"Created registration {created.id}")
        return created

    async def update(self, registration_id: str, draft: RegistrationDraft) -> Registration:
        body = await self._request(
            "PUT", self._item_url(registration_id), data=self.multipart(draft), payload=True
        )
        updated = _registration(body)
        logger.info(f"Updated registration {registration_id}")
        return updated

    async def delete(self, registration_id: str) -> Any:
        body = await self._request("DELETE", self._item_url(registration_id))
        logger.info(f"Deleted registration {registration_id}")
        return body

    @staticmethod
    def multipart(draft: RegistrationDraft) -> aiohttp.FormData:
        """Scalar fields in declared order; the photo part only when one is set."""
        form = aiohttp.FormData(default_to_multipart=True)
        for name, value in draft.scalar_items():
            form.add_field(name, value)
        if draft.photo is not None:
            form.add_field(
                PHOTO_FIELD,
                draft.photo.content,
                filename=draft.photo.filename,
                content_type=draft.photo.content_type,
            )
        return form

    def _item_url(self, registration_id: str) -> str:
        return f"{self.config.registrations_url}/{registration_id}"

    async def _request(
        self,
        method: str,
        url: str,
        data: Optional[aiohttp.FormData] = None,
        payload: bool = False,
    ) -> Any:
        try:
            async with self.session.request(method, url, data=data, timeout=self.timeout) as response:
                try:
                    text = await response.text()
                except UnicodeDecodeError as e:
                    raise ServerError("Response body is not valid text", status=response.status) from e
                body = _decode(text)
                if not 200 <= response.status < 300:
                    raise _error_for(response.status, response.reason, body, payload)
        except aiohttp.ClientError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NetworkError(str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            logger.error(f"{method} {url} timed out after {self.config.timeout}s")
            raise NetworkError("Request timed out") from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body


def _registration(body: Any) -> Registration:
    try:
        return Registration.model_validate(body)
    except PydanticValidationError as e:
        logger.error(f"Malformed registration payload: {e}")
        raise ServerError("Malformed registration payload") from e


def _decode(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def _error_for(status: int, reason: Optional[str], body: Any, payload: bool) -> RegistrationError:
    message = reason or f"HTTP {status}"
    if isinstance(body, dict):
        message = str(body.get("message") or body.get("error") or message)
    elif isinstance(body, str) and body.strip():
        message = body.strip()

    if status == 404:
        return NotFound(message, status=status)
    if payload and status in _PAYLOAD_REJECTED:
        errors = _field_errors(body.get("errors") if isinstance(body, dict) else None)
        return ValidationError(errors, message=message)
    return ServerError(message, status=status)


def _field_errors(raw: Any) -> Dict[str, str]:
    if isinstance(raw, dict):
        return {str(k): str(v.get("message", v) if isinstance(v, dict) else v) for k, v in raw.items()}
    if isinstance(raw, list):
        errors: Dict[str, str] = {}
        for item in raw:
            if not isinstance(item, dict):
                continue
            field = item.get("path") or item.get("param") or item.get("field")
            if field:
                errors[str(field)] = str(item.get("msg") or item.get("message") or "Invalid value")
        return errors
    return {}
