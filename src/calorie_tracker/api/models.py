"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field

from calorie_tracker.domain.profile import ActivityLevel, UnitSystem


class IngredientPayload(BaseModel):
    """Ingredient as edited by the client."""

    title: str
    weight: float = Field(ge=0)
    calories: float = Field(ge=0)
    proteins: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)
    excluded: bool = False


class MealUpdate(BaseModel):
    """Partial meal update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1)
    health: int | None = Field(default=None, ge=1, le=10)
    ingredients: list[IngredientPayload] | None = None
    servings: float | None = Field(default=None, gt=0)


class TextAnalysisRequest(BaseModel):
    """Meal description to analyze."""

    text: str = Field(min_length=1)
    locale: str | None = None


class ImageAnalysisRequest(BaseModel):
    """Base64 meal photo to analyze."""

    image_base64: str = Field(min_length=1)
    locale: str | None = None
    image_uri: str | None = None


class WeightCreate(BaseModel):
    """Weight sample in kg, for today unless a day is given."""

    weight: float = Field(gt=0)
    date: str | None = None


class ProfileUpdate(BaseModel):
    """Partial profile update in metric units."""

    weight: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    age: int | None = Field(default=None, gt=0)
    goal_weight: float | None = Field(default=None, gt=0)
    activity_level: ActivityLevel | None = None
    unit_system: UnitSystem | None = None


class SettingsUpdate(BaseModel):
    """Partial app settings update."""

    save_photo_enabled: bool | None = None
    dont_show_photo_example: bool | None = None
