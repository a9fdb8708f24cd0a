"""Meal analysis: turn a photo or description into a logged meal."""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from calorie_tracker.domain.analysis import MealAnalysisRequest, MealAnalysisResponse
from calorie_tracker.domain.meals import Ingredient, MealRecord
from calorie_tracker.errors import MealAnalysisError, ValidationError
from calorie_tracker.services.meals import MealStore

DEFAULT_NOT_FOOD_MESSAGE = "This is not food"

# (offset, magic bytes, MIME type); HEIC covers iPhone gallery picks.
_IMAGE_SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (8, b"WEBP", "image/webp"),
    (4, b"ftypheic", "image/heic"),
    (4, b"ftypheix", "image/heic"),
    (4, b"ftypmif1", "image/heif"),
)

logger = logging.getLogger(__name__)


class MealAnalysisClient(Protocol):
    """Interface for the remote meal analysis service."""

    async def analyze(self, request: MealAnalysisRequest) -> dict[str, Any]:
        """Return the raw JSON response for a request."""


def parse_analysis_response(raw: object) -> MealAnalysisResponse:
    """Validate a raw response; reject malformed and non-food results."""
    if (
        not isinstance(raw, dict)
        or not raw.get("title")
        or not isinstance(raw.get("ingredients"), list)
    ):
        raise MealAnalysisError("Invalid response structure", MealAnalysisError.DECODE)
    if raw.get("isFood") is False:
        validation_error = raw.get("validationError")
        raise MealAnalysisError(
            validation_error or DEFAULT_NOT_FOOD_MESSAGE,
            MealAnalysisError.NOT_FOOD,
            validation_error,
        )
    try:
        return MealAnalysisResponse.model_validate(raw)
    except PydanticValidationError as exc:
        raise MealAnalysisError(
            "Invalid response structure", MealAnalysisError.DECODE
        ) from exc


def to_ingredients(response: MealAnalysisResponse) -> tuple[Ingredient, ...]:
    """Convert analyzed ingredients to domain records, all included."""
    return tuple(
        Ingredient(
            title=item.title,
            weight=item.weight,
            calories=item.calories,
            proteins=item.proteins,
            carbs=item.carbs,
            fats=item.fats,
        )
        for item in response.ingredients
    )


def build_correction_text(meal: MealRecord, correction: str) -> str:
    """Describe the current meal plus the user's correction for re-analysis."""
    lines = "\n".join(
        f"- {item.title} {_number(item.weight)}g ({_number(item.calories)} kcal)"
        for item in meal.ingredients
    )
    return (
        f"Current meal: {meal.title}\n"
        f"Ingredients:\n{lines}\n\n"
        f"User correction: {correction}"
    )


@dataclass
class MealAnalysisService:
    """Calls the analysis service and records successful results.

    Store mutations happen only after a complete, food response has been
    received and validated; a failed or abandoned request changes nothing.
    """

    client: MealAnalysisClient
    meal_store: MealStore
    default_locale: str = "en_US"

    async def analyze_image(
        self, image_bytes: bytes, locale: str | None = None
    ) -> MealAnalysisResponse:
        """Analyze a meal photo."""
        if not image_bytes:
            raise ValidationError("Image is empty")
        request = MealAnalysisRequest(
            image=_to_data_url(image_bytes), locale=locale or self.default_locale
        )
        return parse_analysis_response(await self.client.analyze(request))

    async def analyze_text(
        self, text: str, locale: str | None = None
    ) -> MealAnalysisResponse:
        """Analyze a typed or transcribed meal description."""
        cleaned = text.strip()
        if not cleaned:
            raise ValidationError("Description is empty")
        request = MealAnalysisRequest(
            text=cleaned, locale=locale or self.default_locale
        )
        return parse_analysis_response(await self.client.analyze(request))

    async def log_from_image(
        self,
        image_bytes: bytes,
        locale: str | None = None,
        image_uri: str | None = None,
    ) -> MealRecord:
        """Analyze a photo and log the resulting meal."""
        response = await self.analyze_image(image_bytes, locale)
        return self.log_response(response, image_uri=image_uri)

    async def log_from_text(self, text: str, locale: str | None = None) -> MealRecord:
        """Analyze a description and log the resulting meal."""
        response = await self.analyze_text(text, locale)
        return self.log_response(response)

    def log_response(
        self, response: MealAnalysisResponse, image_uri: str | None = None
    ) -> MealRecord:
        """Create a meal from an already validated response."""
        if response.is_food is False:
            raise MealAnalysisError(
                response.validation_error or DEFAULT_NOT_FOOD_MESSAGE,
                MealAnalysisError.NOT_FOOD,
                response.validation_error,
            )
        return self.meal_store.add_meal(
            response.title,
            response.health,
            to_ingredients(response),
            image_uri=image_uri,
        )

    async def correct_meal(
        self, meal_id: str, correction: str, locale: str | None = None
    ) -> MealRecord | None:
        """Re-analyze a meal with the user's correction and overwrite it.

        Title, health and ingredients are replaced; id, creation time and
        day stay as they were. Returns None when the meal does not exist.
        """
        cleaned = correction.strip()
        if not cleaned:
            raise ValidationError("Correction is empty")
        meal = self.meal_store.get_meal(meal_id)
        if meal is None:
            return None
        response = await self.analyze_text(
            build_correction_text(meal, cleaned), locale
        )
        logger.info("Applying correction to meal %s", meal_id)
        return self.meal_store.update_meal(
            meal_id,
            title=response.title,
            health=response.health,
            ingredients=to_ingredients(response),
        )


def _number(value: float) -> str:
    return f"{value:g}"


def _to_data_url(image_bytes: bytes) -> str:
    mime_type = sniff_image_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def sniff_image_type(image_bytes: bytes) -> str:
    """Return the MIME type of a camera or gallery image.

    Unrecognised data is sent as JPEG, the format the capture pipeline
    produces.
    """
    for offset, signature, mime_type in _IMAGE_SIGNATURES:
        if image_bytes[offset : offset + len(signature)] == signature:
            return mime_type
    return "image/jpeg"
