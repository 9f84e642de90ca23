from fastapi import APIRouter, Body, Query
from typing import Annotated, Any, List, Optional

from starlette import status
from listing_api.models.property import PropertyType, PropertyStatus
from listing_api.schemas.common import ApiResponse
from listing_api.schemas.property import (
    PropertyCreate,
    PropertyFilter,
    PropertyPage,
    PropertyResponse,
)
from listing_api.dependencies import CurrentUser, PropertyServiceDependency
from listing_api.services.property_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post(
    "",
    response_model=ApiResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    property: PropertyCreate,
    current_user: CurrentUser,
    service: PropertyServiceDependency,
):
    result = await service.create_property(property, caller_id=current_user["id"])
    return ApiResponse(message="Property created successfully", data=result)


@router.get("", response_model=ApiResponse[PropertyPage])
async def get_properties(
    service: PropertyServiceDependency,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"
    ),
):
    result = await service.get_properties(page=page, limit=limit)
    return ApiResponse(message="Properties fetched successfully", data=result)


@router.get("/search", response_model=ApiResponse[List[PropertyResponse]])
async def search_properties(
    service: PropertyServiceDependency,
    # Location filters
    city: Optional[str] = Query(None, description="Filter by city (case-insensitive)"),
    state: Optional[str] = Query(None, description="Filter by state (case-insensitive)"),
    country: Optional[str] = Query(
        None, description="Filter by country (case-insensitive)"
    ),
    # Price filters
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    # Property details
    bedrooms: Optional[int] = Query(None, ge=0, description="Exact number of bedrooms"),
    bathrooms: Optional[float] = Query(
        None, ge=0, description="Exact number of bathrooms"
    ),
    min_area: Optional[float] = Query(None, alias="minArea", ge=0),
    max_area: Optional[float] = Query(None, alias="maxArea", ge=0),
    type: Optional[PropertyType] = Query(None, description="Type of property"),
    status: Optional[PropertyStatus] = Query(None, description="Property status"),
):
    """
    Search properties by location, price range, size and listing details.

    All filters are optional and combined with AND. Results are cached per
    distinct filter set, independent of the order of the query parameters.
    """
    filters = PropertyFilter(
        city=city,
        state=state,
        country=country,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_area=min_area,
        max_area=max_area,
        type=type,
        status=status,
    )
    result = await service.search_properties(filters)
    return ApiResponse(message="Properties fetched successfully", data=result)


@router.get("/{property_id}", response_model=ApiResponse[PropertyResponse])
async def get_property(property_id: str, service: PropertyServiceDependency):
    result = await service.get_property(property_id)
    return ApiResponse(message="Property fetched successfully", data=result)


@router.put("/{property_id}", response_model=ApiResponse[PropertyResponse])
async def update_property(
    property_id: str,
    payload: Annotated[Any, Body()],
    current_user: CurrentUser,
    service: PropertyServiceDependency,
):
    # The raw body is validated by the service after the ownership check
    result = await service.update_property(property_id, current_user["id"], payload)
    return ApiResponse(message="Property updated successfully", data=result)


@router.delete("/{property_id}", response_model=ApiResponse[None])
async def delete_property(
    property_id: str,
    current_user: CurrentUser,
    service: PropertyServiceDependency,
):
    await service.delete_property(property_id, current_user["id"])
    return ApiResponse(message="Property deleted successfully")
