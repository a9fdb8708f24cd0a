"""Models for meal analysis requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class AnalysisIngredient(BaseModel):
    """Single ingredient returned by the analysis service."""

    title: str
    weight: float = Field(ge=0)
    calories: float = Field(ge=0)
    proteins: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)


class MealAnalysisRequest(BaseModel):
    """Payload sent to the analysis service."""

    text: str | None = None
    image: str | None = None
    previous: None = None
    locale: str


class MealAnalysisResponse(BaseModel):
    """Structured meal breakdown returned by the analysis service."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    health: int = Field(ge=1, le=10)
    ingredients: list[AnalysisIngredient]
    is_food: bool | None = Field(default=None, alias="isFood")
    validation_error: str | None = Field(default=None, alias="validationError")
