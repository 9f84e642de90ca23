from fastapi import APIRouter, status
from typing import List

from listing_api.dependencies import CurrentUser, FavoriteServiceDependency
from listing_api.schemas.common import ApiResponse
from listing_api.schemas.favorite import FavoriteCreate, FavoriteResponse

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.post(
    "",
    response_model=ApiResponse[FavoriteResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    favorite: FavoriteCreate,
    current_user: CurrentUser,
    service: FavoriteServiceDependency,
):
    result = await service.add_favorite(current_user["id"], favorite)
    return ApiResponse(message="Added to favorites", data=result)


@router.get("", response_model=ApiResponse[List[FavoriteResponse]])
async def list_my_favorites(current_user: CurrentUser, service: FavoriteServiceDependency):
    result = await service.get_favorites(current_user["id"])
    return ApiResponse(message="Favorites fetched successfully", data=result)


@router.delete("/{property_id}", response_model=ApiResponse[None])
async def remove_favorite(
    property_id: str,
    current_user: CurrentUser,
    service: FavoriteServiceDependency,
):
    await service.remove_favorite(current_user["id"], property_id)
    return ApiResponse(message="Removed from favorites")
