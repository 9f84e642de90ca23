"""Cache-aside helpers shared by the resource services."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from listing_api.cache import CacheClient
from listing_api.cache_keys import CacheKeyBuilder
from listing_api.exceptions import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def parse_id(value: Any, field: str = "id") -> int:
    """Return ``value`` as a positive integer id or raise ``ValidationError``."""
    if isinstance(value, bool):
        raise ValidationError.for_field(field, "Invalid id format")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValidationError.for_field(field, "Invalid id format")
    if parsed <= 0:
        raise ValidationError.for_field(field, "Invalid id format")
    return parsed


def validate_payload(schema: Type[M], data: Any) -> M:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    if not isinstance(data, Mapping):
        raise ValidationError.for_field("body", "Expected a JSON object")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc.errors())


def ensure_owner(owner_id: Any, caller_id: Any, action: str, resource: str = "property") -> None:
    if owner_id is None or caller_id is None or str(owner_id) != str(caller_id):
        raise AuthorizationError(f"You are not authorized to {action} this {resource}")


class CachedResourceService:
    def __init__(self, cache: CacheClient, keys: CacheKeyBuilder):
        self.cache = cache
        self.keys = keys

    async def _store(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        # Session calls block, so they run in a worker thread
        return await asyncio.to_thread(func, *args, **kwargs)

    async def _cache_read(self, key: str, adapter: TypeAdapter[T]) -> Optional[T]:
        cached = await self.cache.get_json(key)
        if cached is None:
            return None
        try:
            return adapter.validate_python(cached)
        except PydanticValidationError:
            logger.warning("Cached payload for %s no longer matches its schema", key)
            return None

    async def _cache_write(self, key: str, adapter: TypeAdapter[T], value: T) -> None:
        await self.cache.set_json(key, adapter.dump_python(value, mode="json", by_alias=True))
