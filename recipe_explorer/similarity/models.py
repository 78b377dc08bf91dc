from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RecommendationRequest(BaseModel):
    title: str = Field(..., min_length=1, description="Exact recipe title, case-sensitive")
    required_ingredients: list[str] = Field(default_factory=list)
    min_rating: float | None = Field(default=None, ge=0.0, le=5.0)
    calorie_range: tuple[float, float] | None = Field(
        default=None,
        description="Inclusive [low, high] bounds in kcal",
    )
    limit: int = Field(default=10, ge=1, le=50)

    @field_validator("calorie_range")
    @classmethod
    def _check_range(cls, value: tuple[float, float] | None) -> tuple[float, float] | None:
        if value is not None and value[0] > value[1]:
            raise ValueError("calorie_range lower bound must not exceed upper bound")
        return value


class RecipeOut(BaseModel):
    title: str
    rating: float
    calories: float
    ingredients: list[str]


class RecommendationItem(BaseModel):
    recipe: RecipeOut
    distance: float


class RecommendationResponse(BaseModel):
    query: str
    recommendations: list[RecommendationItem]
    total_candidates: int
