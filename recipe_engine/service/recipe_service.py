"""Recipe service: the caller-facing entry points of the pipeline.

Synchronous operations run the full flow in-process:

    catalog -> ConstraintPipeline -> ScoringSelector -> AdaptationEngine -> IdentityAssigner

The *_async variants are the service boundary: optional simulated latency,
then the pure pipeline call in a worker thread, with the caller's wait
bounded by REQUEST_TIMEOUT_SECONDS. They are also the only entry points
that can load a remote catalog (CATALOG_SOURCE=remote), and every failure
they raise is a RecipeServiceError.

Allergy exhaustion is not an error. It returns a placeholder recipe so
callers always have something to display.
"""

import asyncio
import random
from typing import Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from recipe_engine.catalog.catalog import CandidateCatalog, load_catalog
from recipe_engine.catalog.remote import load_catalog_async
from recipe_engine.models.models import (
    ConstraintSet,
    NutritionInfo,
    PortionSize,
    Recipe,
    RecipeStep,
)
from recipe_engine.pipeline.adaptation import AdaptationEngine, normalize_key
from recipe_engine.pipeline.filters import ConstraintPipeline, matches_any_term
from recipe_engine.pipeline.identity import IdentityAssigner
from recipe_engine.pipeline.selector import ScoringSelector
from recipe_engine.utils.config import Config, config as default_config
from recipe_engine.utils.errors import RecipeErrorType, RecipeServiceError, ValidationError, classify_error
from recipe_engine.utils.logger import logger
from recipe_engine.utils.parsing import format_minutes

NO_SAFE_MATCH_INSTRUCTION = (
    "We couldn't find a matching recipe that avoids your allergies. "
    "Please create a custom recipe or adjust your allergen settings."
)

FALLBACK_SERVINGS = {
    PortionSize.SINGLE: 1,
    PortionSize.COUPLE: 2,
    PortionSize.FAMILY: 4,
    PortionSize.LARGE_GROUP: 8,
}


# ============================================================================
# Input normalization
# ============================================================================


def normalize_ingredients(ingredients) -> tuple[str, ...]:
    """Strip, drop blanks and de-duplicate (case-insensitive) user ingredients.

    Accepts a sequence or a comma-separated string.

    Raises:
        ValidationError: If no ingredient remains.
    """
    if ingredients is None:
        ingredients = ()
    elif isinstance(ingredients, str):
        ingredients = ingredients.split(",")

    seen: set[str] = set()
    cleaned: list[str] = []
    for ingredient in ingredients:
        ingredient = str(ingredient).strip()
        key = normalize_key(ingredient)
        if key and key not in seen:
            seen.add(key)
            cleaned.append(ingredient)

    if not cleaned:
        raise ValidationError("Please provide at least one ingredient")
    return tuple(cleaned)


def coerce_constraints(constraints) -> ConstraintSet:
    """Accept None, a ConstraintSet, or a dict in the app's camelCase or snake_case shape."""
    if constraints is None:
        return ConstraintSet()
    if isinstance(constraints, ConstraintSet):
        return constraints
    try:
        return ConstraintSet.model_validate(constraints)
    except (PydanticValidationError, ValueError) as e:
        raise ValidationError("Invalid recipe preferences", details=str(e)) from e


def split_allergen_ingredients(
    ingredients: Iterable[str], allergies: Iterable[str]
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Partition ingredients into (safe, matching an allergen)."""
    allergies = tuple(allergies)
    safe: list[str] = []
    blocked: list[str] = []
    for ingredient in ingredients:
        (blocked if matches_any_term(ingredient, allergies) else safe).append(ingredient)
    return tuple(safe), tuple(blocked)


# ============================================================================
# Degrade-to-safe recipes
# ============================================================================


def build_safety_placeholder(ingredients: Iterable[str], constraints: ConstraintSet) -> Recipe:
    """Placeholder returned when the allergy stage leaves nothing to choose from."""
    safe, _ = split_allergen_ingredients(ingredients, constraints.allergies)
    return Recipe(
        title="Custom Recipe",
        description="A recipe tailored to your dietary needs and preferences.",
        servings=2,
        prep_time="15 min",
        cook_time="20 min",
        total_time="35 min",
        ingredients=safe,
        steps=[RecipeStep(instruction=NO_SAFE_MATCH_INSTRUCTION)],
    )


def build_fallback_recipe(ingredients: tuple[str, ...], constraints: ConstraintSet) -> Recipe:
    """Simple recipe built from the user's ingredients when the catalog offers no candidates."""
    first = ingredients[0]
    limit = constraints.cooking_time_limit_minutes
    prep, cook = (limit // 3, limit * 2 // 3) if limit > 0 else (15, 20)

    steps = [
        f"Prepare the {first} by washing and cutting it into bite-sized pieces.",
        "Heat a pan over medium heat with a bit of oil.",
        f"Add {first} and cook until tender.",
        f"Add {ingredients[1]} and continue cooking for a few minutes." if len(ingredients) > 1 else "Season to taste.",
        "Serve hot and enjoy!",
    ]

    nutrition = None
    if constraints.max_calories > 0:
        nutrition = NutritionInfo(calories=f"{constraints.max_calories} kcal", protein="15g", carbs="25g", fat="10g")

    return Recipe(
        title=f"Custom Recipe with {first}",
        description="A custom recipe made with your ingredients.",
        servings=FALLBACK_SERVINGS[constraints.portion_size],
        prep_time=format_minutes(prep),
        cook_time=format_minutes(cook),
        total_time=format_minutes(prep + cook),
        ingredients=ingredients,
        steps=steps,
        nutrition_info=nutrition,
    )


# ============================================================================
# Service
# ============================================================================


class RecipeService:
    """Wires a catalog to the pipeline components.

    Components hold no per-call state, so one instance can be shared
    by concurrent callers. Each call gets its own random source.
    """

    def __init__(
        self,
        catalog: Optional[CandidateCatalog] = None,
        *,
        pipeline: Optional[ConstraintPipeline] = None,
        selector: Optional[ScoringSelector] = None,
        adapter: Optional[AdaptationEngine] = None,
        identity: Optional[IdentityAssigner] = None,
        cfg: Optional[Config] = None,
    ) -> None:
        self.cfg = cfg or default_config
        self.catalog = catalog
        self.pipeline = pipeline or ConstraintPipeline()
        self.selector = selector or ScoringSelector(
            tie_threshold=self.cfg.SELECTION_TIE_THRESHOLD,
            tie_pool=self.cfg.SELECTION_TIE_POOL,
        )
        self.adapter = adapter or AdaptationEngine()
        self.identity = identity or IdentityAssigner()

    def _catalog(self, catalog: Optional[CandidateCatalog]) -> CandidateCatalog:
        if catalog is not None:
            return catalog
        if self.catalog is None:
            self.catalog = load_catalog(self.cfg)
        return self.catalog

    def _rng(self, rng: Optional[random.Random]) -> random.Random:
        if rng is not None:
            return rng
        # Random(None) seeds from system entropy
        return random.Random(self.cfg.RANDOM_SEED)

    def _select_and_adapt(
        self,
        ingredients: tuple[str, ...],
        constraints: ConstraintSet,
        catalog: CandidateCatalog,
        rng: random.Random,
        exclude_titles: Iterable[str] = (),
    ) -> Optional[Recipe]:
        """Run the pipeline; None when no candidate survived."""
        pool = self.pipeline.filter(catalog.list_candidates(), constraints, exclude_titles=exclude_titles)
        if not pool:
            return None

        safe_ingredients, blocked = split_allergen_ingredients(ingredients, constraints.allergies)
        if blocked:
            logger.warning(f"Dropped user ingredients matching declared allergies: {', '.join(blocked)}")

        selected = self.selector.select(pool, safe_ingredients, constraints.micro_preferences, rng=rng)
        adapted = self.adapter.adapt(
            selected,
            constraints.spice_level,
            constraints.portion_size,
            constraints.allergies,
            user_ingredients=safe_ingredients,
            rng=rng,
        )
        return self.identity.stamp(adapted)

    def generate_recipe(
        self,
        ingredients,
        constraints=None,
        *,
        catalog: Optional[CandidateCatalog] = None,
        rng: Optional[random.Random] = None,
    ) -> Recipe:
        """Pick the best catalog recipe for the ingredients and adapt it to the constraints.

        Args:
            ingredients: User ingredients (sequence or comma-separated string).
            constraints: ConstraintSet, dict, or None for defaults.
            catalog: Overrides the service's catalog for this call.
            rng: Random source; defaults to one seeded from RANDOM_SEED.

        Returns:
            Adapted recipe with a fresh id, the safety placeholder when the
            allergies exclude every candidate, or a simple custom recipe when
            the catalog is empty.

        Raises:
            ValidationError: If no ingredient is given or the constraints are invalid.
        """
        ingredients = normalize_ingredients(ingredients)
        constraints = coerce_constraints(constraints)
        catalog = self._catalog(catalog)
        rng = self._rng(rng)

        logger.info(
            f"Generating recipe for {len(ingredients)} ingredients: {', '.join(ingredients)}",
            extra={"operation": "generate_recipe"},
        )
        recipe = self._select_and_adapt(ingredients, constraints, catalog, rng)
        if recipe is None:
            return self._empty_pool_recipe(ingredients, constraints, catalog)
        logger.info(f"✓ Generated '{recipe.title}'", extra={"operation": "generate_recipe", "recipe_id": recipe.id})
        return recipe

    def _empty_pool_recipe(
        self, ingredients: tuple[str, ...], constraints: ConstraintSet, catalog: CandidateCatalog
    ) -> Recipe:
        """Recipe for an empty terminal pool: safety placeholder or simple fallback."""
        safe, _ = split_allergen_ingredients(ingredients, constraints.allergies)
        if (constraints.allergies and catalog.list_candidates()) or not safe:
            logger.warning("No recipes found that avoid all allergies, returning placeholder")
            return self.identity.stamp(build_safety_placeholder(ingredients, constraints))
        logger.warning("Catalog offered no candidates, building a simple recipe from the ingredients")
        return self.identity.stamp(build_fallback_recipe(safe, constraints))

    def modify_recipe(
        self,
        original: Optional[Recipe],
        new_ingredients,
        constraints=None,
        *,
        rng: Optional[random.Random] = None,
    ) -> Recipe:
        """Turn a user's recipe into a variation using new ingredients and preferences.

        Allergens in the recipe and the new ingredients are substituted, or
        flagged inline when no substitute is known.

        Raises:
            ValidationError: If original is missing or no ingredient is given.
        """
        if original is None:
            raise ValidationError("Original recipe is required")
        if not isinstance(original, Recipe):
            try:
                original = Recipe.model_validate(original)
            except PydanticValidationError as e:
                raise ValidationError("Original recipe is invalid", details=str(e)) from e
        new_ingredients = normalize_ingredients(new_ingredients)
        constraints = coerce_constraints(constraints)
        rng = self._rng(rng)

        existing = {normalize_key(line) for line in original.ingredients}
        changed = [ingredient for ingredient in new_ingredients if normalize_key(ingredient) not in existing]

        logger.info(
            f"Creating variation of '{original.title}' with {len(changed)} new ingredients",
            extra={"operation": "modify_recipe"},
        )
        adapted = self.adapter.adapt(
            original,
            constraints.spice_level,
            constraints.portion_size,
            constraints.allergies,
            user_ingredients=new_ingredients,
            variation=True,
            rng=rng,
        )
        recipe = self.identity.stamp(adapted, variation=True, changed_ingredients=changed)
        logger.info(f"✓ Created '{recipe.title}'", extra={"operation": "modify_recipe", "recipe_id": recipe.id})
        return recipe

    def regenerate_recipe(
        self,
        ingredients,
        previous: Recipe,
        constraints=None,
        *,
        catalog: Optional[CandidateCatalog] = None,
        rng: Optional[random.Random] = None,
    ) -> Recipe:
        """Pick a different recipe than `previous` for the same inputs.

        Falls back to a variation of `previous` when no other candidate survives.

        Raises:
            ValidationError: If previous is missing or no ingredient is given.
        """
        if previous is None:
            raise ValidationError("Original recipe is required")
        ingredients = normalize_ingredients(ingredients)
        constraints = coerce_constraints(constraints)
        catalog = self._catalog(catalog)
        rng = self._rng(rng)

        logger.info(f"Regenerating recipe, excluding '{previous.title}'", extra={"operation": "regenerate_recipe"})
        recipe = self._select_and_adapt(ingredients, constraints, catalog, rng, exclude_titles=(previous.title,))
        if recipe is not None:
            logger.info(
                f"✓ Regenerated '{recipe.title}'", extra={"operation": "regenerate_recipe", "recipe_id": recipe.id}
            )
            return recipe

        logger.info("No alternative recipe survived the constraints, returning a variation instead")
        return self.modify_recipe(previous, ingredients, constraints, rng=rng)

    # ------------------------------------------------------------------------
    # Async boundary
    # ------------------------------------------------------------------------

    async def _ensure_catalog(self, catalog: Optional[CandidateCatalog]) -> None:
        """Load the configured catalog up front; remote sources are only reachable here."""
        if catalog is not None or self.catalog is not None:
            return
        try:
            self.catalog = await load_catalog_async(self.cfg)
        except RecipeServiceError:
            raise
        except Exception as e:
            error = classify_error(e)
            logger.error(f"Catalog loading failed: {error.message}", exc_info=True)
            raise error from e

    async def _bounded(self, operation: str, func, *args, **kwargs) -> Recipe:
        """Run func in a worker thread after the simulated latency, bounding the caller's wait.

        The worker is not cancelled on timeout; only the wait is abandoned.
        Failures always surface as RecipeServiceError.
        """
        if self.cfg.SIMULATED_LATENCY_MS > 0:
            await asyncio.sleep(self.cfg.SIMULATED_LATENCY_MS / 1000)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs),
                timeout=self.cfg.REQUEST_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out after {self.cfg.REQUEST_TIMEOUT_SECONDS}s", extra={"operation": operation})
            raise RecipeServiceError(
                RecipeErrorType.TIMEOUT,
                f"{operation} timed out after {self.cfg.REQUEST_TIMEOUT_SECONDS}s",
            ) from e
        except RecipeServiceError:
            raise
        except Exception as e:
            error = classify_error(e)
            logger.error(f"Failed: {error.to_dict()}", exc_info=True, extra={"operation": operation})
            raise error from e

    async def generate_recipe_async(self, ingredients, constraints=None, **kwargs) -> Recipe:
        await self._ensure_catalog(kwargs.get("catalog"))
        return await self._bounded("generate_recipe", self.generate_recipe, ingredients, constraints, **kwargs)

    async def modify_recipe_async(self, original, new_ingredients, constraints=None, **kwargs) -> Recipe:
        return await self._bounded("modify_recipe", self.modify_recipe, original, new_ingredients, constraints, **kwargs)

    async def regenerate_recipe_async(self, ingredients, previous, constraints=None, **kwargs) -> Recipe:
        await self._ensure_catalog(kwargs.get("catalog"))
        return await self._bounded(
            "regenerate_recipe", self.regenerate_recipe, ingredients, previous, constraints, **kwargs
        )


# ============================================================================
# Module-level API over a shared default service
# ============================================================================

_DEFAULT_SERVICE: Optional[RecipeService] = None


def get_service() -> RecipeService:
    """Shared service over the configured catalog, created on first use."""
    global _DEFAULT_SERVICE
    if _DEFAULT_SERVICE is None:
        _DEFAULT_SERVICE = RecipeService()
    return _DEFAULT_SERVICE


def generate_recipe(ingredients, constraints=None, *, catalog=None, rng=None) -> Recipe:
    return get_service().generate_recipe(ingredients, constraints, catalog=catalog, rng=rng)


def modify_recipe(original, new_ingredients, constraints=None, *, rng=None) -> Recipe:
    return get_service().modify_recipe(original, new_ingredients, constraints, rng=rng)


def regenerate_recipe(ingredients, previous, constraints=None, *, catalog=None, rng=None) -> Recipe:
    return get_service().regenerate_recipe(ingredients, previous, constraints, catalog=catalog, rng=rng)


async def generate_recipe_async(ingredients, constraints=None, *, catalog=None, rng=None) -> Recipe:
    return await get_service().generate_recipe_async(ingredients, constraints, catalog=catalog, rng=rng)


async def modify_recipe_async(original, new_ingredients, constraints=None, *, rng=None) -> Recipe:
    return await get_service().modify_recipe_async(original, new_ingredients, constraints, rng=rng)


async def regenerate_recipe_async(ingredients, previous, constraints=None, *, catalog=None, rng=None) -> Recipe:
    return await get_service().regenerate_recipe_async(ingredients, previous, constraints, catalog=catalog, rng=rng)
