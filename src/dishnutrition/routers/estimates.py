"""API routes for dish nutrition estimates."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from dishnutrition.estimate.service import DishNutritionService
from dishnutrition.logging_config import LoggingContext, get_logger
from dishnutrition.reference.cache import ReferenceDataLoadError
from dishnutrition.reference.models import Ingredient
from dishnutrition.schemas import (
    DishEstimate,
    EstimateError,
    EstimateRequest,
    IngredientEstimateRequest,
    ReferenceStatsResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["estimates"])


def get_service(request: Request) -> DishNutritionService:
    """Get the service created during application startup."""
    return request.app.state.service


ServiceDep = Annotated[DishNutritionService, Depends(get_service)]


def _respond(result: DishEstimate | EstimateError) -> DishEstimate | JSONResponse:
    if isinstance(result, EstimateError):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=result.model_dump(),
        )
    return result


@router.post(
    "/estimates",
    response_model=DishEstimate,
    responses={503: {"model": EstimateError}},
)
async def estimate_dish(body: EstimateRequest, service: ServiceDep) -> DishEstimate | JSONResponse:
    """Estimate per-serving nutrition for a dish name."""
    with LoggingContext(request_id=str(uuid.uuid4())):
        return _respond(await service.estimate(body.dish_name))


@router.post(
    "/estimates/ingredients",
    response_model=DishEstimate,
    responses={503: {"model": EstimateError}},
)
async def estimate_from_ingredients(
    body: IngredientEstimateRequest,
    service: ServiceDep,
) -> DishEstimate | JSONResponse:
    """Estimate per-serving nutrition for a supplied ingredient list."""
    ingredients = [Ingredient(name=line.name, original_quantity=line.quantity) for line in body.ingredients]
    with LoggingContext(request_id=str(uuid.uuid4())):
        result = await service.estimate_from_ingredients(body.dish_name, ingredients, body.category)
    return _respond(result)


@router.get("/reference/stats", response_model=ReferenceStatsResponse)
async def reference_stats(service: ServiceDep, load: bool = False) -> ReferenceStatsResponse:
    """Report reference table sizes, optionally loading them first."""
    cache = service.cache
    if load:
        try:
            await cache.get()
        except ReferenceDataLoadError as e:
            logger.warning(f"Reference stats requested but load failed: {e}")

    if not cache.is_loaded:
        return ReferenceStatsResponse(loaded=False, source=cache.source.name)

    tables = await cache.get()
    return ReferenceStatsResponse(
        loaded=True,
        source=cache.source.name,
        foods=len(tables.nutrition),
        units=len(tables.units),
        categories=len(tables.categories),
    )


@router.post("/reference/reset", status_code=status.HTTP_202_ACCEPTED)
async def reset_reference_data(service: ServiceDep) -> dict:
    """Drop cached reference tables; the next request reloads them."""
    service.cache.reset()
    return {"status": "reset"}
