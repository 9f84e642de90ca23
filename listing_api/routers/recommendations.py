from fastapi import APIRouter, status
from typing import List

from listing_api.dependencies import CurrentUser, RecommendationServiceDependency
from listing_api.schemas.common import ApiResponse
from listing_api.schemas.recommendation import (
    RecommendationCreate,
    RecommendationResponse,
)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post(
    "",
    response_model=ApiResponse[RecommendationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def recommend_property(
    recommendation: RecommendationCreate,
    current_user: CurrentUser,
    service: RecommendationServiceDependency,
):
    result = await service.recommend_property(current_user["id"], recommendation)
    return ApiResponse(message="Recommendation created successfully", data=result)


@router.get("", response_model=ApiResponse[List[RecommendationResponse]])
async def get_recommendations(
    current_user: CurrentUser, service: RecommendationServiceDependency
):
    result = await service.get_recommendations(current_user["id"])
    return ApiResponse(message="Recommendations fetched successfully", data=result)
