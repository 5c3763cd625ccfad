"""Data models for the recipe selection and adaptation pipeline.

Defines Pydantic models for recipes and user constraints plus the small
per-invocation value types the pipeline passes between stages.
Recipes are frozen: every transform returns a new value via model_copy().
Field aliases follow the mobile app's camelCase JSON so catalog payloads
validate as-is.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Iterator, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _canonical_token(value: str) -> str:
    """'extraSpicy' / 'extra_spicy' / ' Extra Spicy ' -> 'extra-spicy'."""
    value = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", value.strip())
    return re.sub(r"[\s_]+", "-", value).lower()


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class _TokenEnum(str, Enum):
    """Enum accepting the app's camelCase ids and a few legacy aliases."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        token = _canonical_token(value)
        token = cls._aliases().get(token, token)
        for member in cls:
            if member.value == token:
                return member
        return None


class DietaryPreference(_TokenEnum):
    ALL = "all"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    PESCATARIAN = "pescatarian"
    PALEO = "paleo"
    KETO = "keto"
    LOW_CARB = "low-carb"
    GLUTEN_FREE = "gluten-free"
    DAIRY_FREE = "dairy-free"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"no-restrictions": "all", "none": "all", "any": "all"}


class SpiceLevel(_TokenEnum):
    NONE = "none"
    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"
    EXTRA_SPICY = "extra-spicy"


class PortionSize(_TokenEnum):
    SINGLE = "single"
    COUPLE = "couple"
    FAMILY = "family"
    LARGE_GROUP = "large-group"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"large": "large-group"}


class MicroPreference(_TokenEnum):
    HIGH_PROTEIN = "high-protein"
    LOW_FAT = "low-fat"
    LOW_SODIUM = "low-sodium"
    HIGH_FIBER = "high-fiber"
    LOW_SUGAR = "low-sugar"


_FROZEN = ConfigDict(
    frozen=True,
    str_strip_whitespace=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


class RecipeStep(BaseModel):
    """One cooking instruction with an optional image and timer."""

    model_config = _FROZEN

    instruction: Annotated[str, Field(min_length=1, description="Instruction text")]
    image_url: Annotated[Optional[str], Field(None, description="Optional step image reference")]
    has_timer: Annotated[bool, Field(False, description="Whether the app should offer a timer")]
    timer_duration: Annotated[Optional[int], Field(None, ge=0, description="Timer length in minutes")]


class NutritionInfo(BaseModel):
    """Per-serving nutrition facts as unit-tagged strings ("600 kcal", "25g")."""

    model_config = _FROZEN

    calories: Optional[str] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None
    sodium: Optional[str] = None
    fiber: Optional[str] = None
    sugar: Optional[str] = None


class Recipe(BaseModel):
    """Domain model for a recipe.

    Catalog entries and pipeline output share this shape. Instances are
    immutable; adaptation builds new instances with model_copy(update=...).
    Times are unit-tagged strings such as "10 min" and are parsed on demand.
    """

    model_config = _FROZEN

    id: Annotated[Optional[str], Field(None, description="Unique identifier, assigned on output")]
    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe name (1-200 chars)")]
    description: Annotated[str, Field("", max_length=2000, description="Short description")]
    servings: Annotated[int, Field(ge=1, description="Number of servings (>= 1)")]
    prep_time: Annotated[str, Field("0 min", description="Preparation time, e.g. '10 min'")]
    cook_time: Annotated[str, Field("0 min", description="Cooking time, e.g. '15 min'")]
    total_time: Annotated[Optional[str], Field(None, description="Combined prep and cook time")]
    ingredients: Annotated[tuple[str, ...], Field(default_factory=tuple, description="Ingredient lines in order")]
    steps: Annotated[tuple[RecipeStep, ...], Field(default_factory=tuple, description="Ordered instructions")]
    nutrition_info: Annotated[Optional[NutritionInfo], Field(None, description="Per-serving nutrition facts")]
    category: Annotated[Optional[str], Field(None, description="e.g. 'Dinner', 'Breakfast', 'Italian'")]
    difficulty: Annotated[Optional[Difficulty], Field(None, description="Easy, Medium or Hard")]
    tags: Annotated[tuple[str, ...], Field(default_factory=tuple, description="Free-form tags")]
    hero_image: Annotated[Optional[str], Field(None, max_length=500, description="Hero image URL")]

    @field_validator("ingredients", "tags", mode="before")
    @classmethod
    def drop_blank_entries(cls, value):
        """Strip entries and drop empty ones."""
        if value is None:
            return ()
        return tuple(str(item).strip() for item in value if item is not None and str(item).strip())

    @field_validator("steps", mode="before")
    @classmethod
    def coerce_plain_steps(cls, value):
        """Allow plain instruction strings in place of step objects."""
        if value is None:
            return ()
        return tuple({"instruction": step} if isinstance(step, str) else step for step in value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def coerce_difficulty(cls, value):
        """Accept 'easy' as well as 'Easy'."""
        if value is None or isinstance(value, Difficulty):
            return value
        return Difficulty(value)


def _normalize_terms(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    seen: set[str] = set()
    terms: list[str] = []
    for item in value:
        term = str(item).strip()
        if term and term.lower() not in seen:
            seen.add(term.lower())
            terms.append(term)
    return tuple(terms)


class ConstraintSet(BaseModel):
    """User constraints for one pipeline call.

    All fields are optional. Defaults: dietary preference "all", spice
    "medium", portion "couple", empty collections, and 0 (unbounded) for
    numeric limits. Collections accept lists or comma-separated strings.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, populate_by_name=True, alias_generator=to_camel)

    allergies: Annotated[tuple[str, ...], Field(default_factory=tuple, description="Safety-critical exclusions")]
    disliked_ingredients: Annotated[tuple[str, ...], Field(default_factory=tuple, description="Soft exclusions")]
    dietary_preference: Annotated[DietaryPreference, Field(DietaryPreference.ALL, description="Diet tag or 'all'")]
    cuisine_types: Annotated[tuple[str, ...], Field(default_factory=tuple, description="Ranking hint")]
    cooking_time_limit_minutes: Annotated[int, Field(0, ge=0, description="Max prep+cook minutes, 0 = unbounded")]
    max_calories: Annotated[int, Field(0, ge=0, description="Max calories per serving, 0 = unbounded")]
    micro_preferences: Annotated[
        tuple[MicroPreference, ...], Field(default_factory=tuple, description="Nutrition-shape preferences")
    ]
    spice_level: Annotated[SpiceLevel, Field(SpiceLevel.MEDIUM, description="Target heat")]
    portion_size: Annotated[PortionSize, Field(PortionSize.COUPLE, description="Target portion")]

    @field_validator("allergies", "disliked_ingredients", "cuisine_types", mode="before")
    @classmethod
    def normalize_terms(cls, value):
        """Strip, drop blanks and de-duplicate case-insensitively."""
        return _normalize_terms(value)

    @field_validator("micro_preferences", mode="before")
    @classmethod
    def normalize_micro_preferences(cls, value):
        """De-duplicate micro-preferences while keeping first-seen order."""
        terms = _normalize_terms(value)
        unique: list[MicroPreference] = []
        for term in terms:
            preference = MicroPreference(term)
            if preference not in unique:
                unique.append(preference)
        return tuple(unique)

    @field_validator("dietary_preference", "spice_level", "portion_size", mode="before")
    @classmethod
    def coerce_choice(cls, value, info):
        """Treat None or "" as 'use the default'; accept the app's camelCase ids."""
        enum_type = _CHOICE_FIELDS[info.field_name]
        if value is None or (isinstance(value, str) and not value.strip()):
            return _CHOICE_DEFAULTS[info.field_name]
        return enum_type(value)


_CHOICE_FIELDS = {
    "dietary_preference": DietaryPreference,
    "spice_level": SpiceLevel,
    "portion_size": PortionSize,
}

_CHOICE_DEFAULTS = {
    "dietary_preference": DietaryPreference.ALL,
    "spice_level": SpiceLevel.MEDIUM,
    "portion_size": PortionSize.COUPLE,
}


@dataclass(frozen=True)
class CandidatePool:
    """Ordered recipe references produced by one pipeline stage.

    Never owns catalog data: it only narrows or reorders references.
    `notes` records which soft constraints were relaxed, for logging only.
    """

    recipes: tuple[Recipe, ...] = ()
    notes: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.recipes)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self.recipes)

    def __bool__(self) -> bool:
        return bool(self.recipes)

    def with_recipes(self, recipes) -> "CandidatePool":
        return CandidatePool(tuple(recipes), self.notes)

    def with_note(self, note: str) -> "CandidatePool":
        return CandidatePool(self.recipes, self.notes + (note,))


class ScoreRecord(NamedTuple):
    """Ranking data for one candidate inside the selector."""

    recipe: Recipe
    micro_score: int
    ingredient_matches: int
