import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import TypeAdapter

from listing_api.cache import CacheClient
from listing_api.cache_keys import (
    DEFAULT_EPOCH,
    FAVORITES,
    PROPERTIES,
    RECOMMENDATIONS,
    CacheKeyBuilder,
    new_epoch,
)
from listing_api.exceptions import ConflictError, NotFoundError, ValidationError
from listing_api.models.property import Property
from listing_api.repositories.property_repository import (
    DUPLICATE_MESSAGE,
    PropertyRepository,
)
from listing_api.schemas.property import (
    PropertyCreate,
    PropertyFilter,
    PropertyPage,
    PropertyResponse,
    PropertyUpdate,
)
from listing_api.services.base import (
    CachedResourceService,
    ensure_owner,
    parse_id,
    validate_payload,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

# Columns that may not be cleared by an update
_REQUIRED_FIELDS = ("title", "price", "location", "bedrooms", "bathrooms", "area", "type", "status")

_property_adapter = TypeAdapter(PropertyResponse)
_page_adapter = TypeAdapter(PropertyPage)
_search_adapter = TypeAdapter(list[PropertyResponse])


def _to_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Flatten schema field names onto the ``properties`` table columns."""
    columns = dict(values)
    location = columns.pop("location", None)
    if location is not None:
        columns.update(location)
    if "type" in columns:
        columns["property_type"] = columns.pop("type")
    return columns


class PropertyService(CachedResourceService):
    def __init__(
        self,
        properties: PropertyRepository,
        cache: CacheClient,
        keys: CacheKeyBuilder,
    ):
        super().__init__(cache, keys)
        self.properties = properties

    async def create_property(self, data: Any, caller_id: int) -> PropertyResponse:
        payload = validate_payload(PropertyCreate, data)
        location = payload.location
        if await self._store(
            self.properties.find_duplicate,
            location.address,
            location.city,
            location.zip_code,
            payload.type,
        ):
            raise ConflictError(DUPLICATE_MESSAGE)

        values = _to_columns(payload.model_dump())
        values["created_by"] = caller_id
        values["created_at"] = datetime.now(timezone.utc)
        new_property = await self._store(self.properties.add, values)

        await self._bump_list_epoch()
        logger.info("Property %s created by user %s", new_property.id, caller_id)
        return PropertyResponse.from_model(new_property)

    async def get_property(self, property_id: Any) -> PropertyResponse:
        pid = parse_id(property_id)
        key = self.keys.entity(PROPERTIES, pid)

        cached = await self._cache_read(key, _property_adapter)
        if cached is not None:
            return cached

        prop = await self._load(pid)
        result = PropertyResponse.from_model(prop)
        await self._cache_write(key, _property_adapter, result)
        return result

    async def get_properties(
        self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PropertyPage:
        errors = []
        if not isinstance(page, int) or isinstance(page, bool) or page < 1:
            errors.append({"field": "page", "message": "Page must be a positive integer"})
        if (
            not isinstance(limit, int)
            or isinstance(limit, bool)
            or not 1 <= limit <= MAX_PAGE_SIZE
        ):
            errors.append(
                {"field": "limit", "message": f"Limit must be between 1 and {MAX_PAGE_SIZE}"}
            )
        if errors:
            raise ValidationError(errors)

        key = self.keys.page(PROPERTIES, page, limit, await self._list_epoch())
        cached = await self._cache_read(key, _page_adapter)
        if cached is not None:
            return cached

        rows = await self._store(self.properties.page, offset=(page - 1) * limit, limit=limit)
        total_count = await self._store(self.properties.count)
        result = PropertyPage(
            properties=[PropertyResponse.from_model(row) for row in rows],
            has_more=page * limit < total_count,
        )
        await self._cache_write(key, _page_adapter, result)
        return result

    async def search_properties(self, filters: Any) -> list[PropertyResponse]:
        criteria = validate_payload(PropertyFilter, filters)
        key = self.keys.search(criteria, await self._list_epoch())

        cached = await self._cache_read(key, _search_adapter)
        if cached is not None:
            return cached

        rows = await self._store(self.properties.search, criteria)
        result = [PropertyResponse.from_model(row) for row in rows]
        await self._cache_write(key, _search_adapter, result)
        return result

    async def update_property(
        self, property_id: Any, caller_id: int, data: Any
    ) -> PropertyResponse:
        pid = parse_id(property_id)
        prop = await self._load(pid)
        # Ownership is decided before the payload is looked at
        ensure_owner(prop.created_by, caller_id, "update")

        changes = validate_payload(PropertyUpdate, data).model_dump(exclude_unset=True)
        cleared = [field for field in _REQUIRED_FIELDS if field in changes and changes[field] is None]
        if cleared:
            raise ValidationError(
                [{"field": field, "message": "Field cannot be null"} for field in cleared]
            )

        values = _to_columns(changes)
        await self._check_duplicate_on_update(prop, values)

        references = await self._store(self.properties.referencing_user_ids, pid)
        updated = await self._store(self.properties.update, prop, values)
        await self._invalidate(pid, references)
        logger.info("Property %s updated by user %s", pid, caller_id)
        return PropertyResponse.from_model(updated)

    async def delete_property(self, property_id: Any, caller_id: int) -> None:
        pid = parse_id(property_id)
        prop = await self._load(pid)
        ensure_owner(prop.created_by, caller_id, "delete")

        # Collected before the delete cascades the rows away
        references = await self._store(self.properties.referencing_user_ids, pid)
        await self._store(self.properties.delete, prop)
        await self._invalidate(pid, references)
        logger.info("Property %s deleted by user %s", pid, caller_id)

    async def _load(self, pid: int) -> Property:
        prop = await self._store(self.properties.get, pid)
        if prop is None:
            raise NotFoundError(f"Property with ID {pid} not found")
        return prop

    async def _check_duplicate_on_update(self, prop: Property, values: dict[str, Any]) -> None:
        identity = ("address", "city", "zip_code", "property_type")
        if not any(field in values for field in identity):
            return
        duplicate = await self._store(
            self.properties.find_duplicate,
            values.get("address", prop.address),
            values.get("city", prop.city),
            values.get("zip_code", prop.zip_code),
            values.get("property_type", prop.property_type),
            exclude_id=prop.id,
        )
        if duplicate:
            raise ConflictError(DUPLICATE_MESSAGE)

    async def _list_epoch(self) -> str:
        raw: Optional[bytes | str] = await self.cache.get(self.keys.epoch(PROPERTIES))
        if raw is None:
            return DEFAULT_EPOCH
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def _bump_list_epoch(self) -> None:
        await self.cache.set(self.keys.epoch(PROPERTIES), new_epoch())

    async def _invalidate(self, pid: int, references: dict[str, set[int]]) -> None:
        keys = [self.keys.entity(PROPERTIES, pid)]
        keys.extend(self.keys.collection(FAVORITES, uid) for uid in sorted(references["favorites"]))
        keys.extend(
            self.keys.collection(RECOMMENDATIONS, uid)
            for uid in sorted(references["recommendations"])
        )
        await self.cache.delete(*keys)
        await self._bump_list_epoch()
