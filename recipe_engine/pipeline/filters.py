"""Ordered constraint stages over a candidate pool.

Stage order is fixed by priority:

1. allergies            - safety-critical, never relaxed
2. disliked ingredients - soft
3. dietary preference   - soft
4. cuisine types        - reorders only (cuisine matches first)
5. cooking time limit   - soft, prep + cook minutes
6. max calories         - soft, calories per serving
7. micro-preferences    - scored by the selector, never eliminates

Every stage runs under RelaxationController. Matching is case-insensitive
substring matching on whole ingredient strings, so "cream" also matches
"ice cream"; compound ingredient names are not disambiguated.
"""

from functools import partial
from typing import Iterable, Optional

from recipe_engine.models.models import (
    CandidatePool,
    ConstraintSet,
    DietaryPreference,
    MicroPreference,
    NutritionInfo,
    Recipe,
)
from recipe_engine.pipeline.relaxation import RelaxationController
from recipe_engine.utils.logger import logger
from recipe_engine.utils.parsing import extract_first_int, total_minutes


def matches_any_term(text: str, terms: Iterable[str]) -> bool:
    """True if any term is a case-insensitive substring of text."""
    lowered = text.lower()
    return any(term.lower() in lowered for term in terms if term)


def contains_any_term(recipe: Recipe, terms: Iterable[str]) -> bool:
    """True if any ingredient of the recipe contains any of the terms."""
    terms = tuple(terms)
    return any(matches_any_term(ingredient, terms) for ingredient in recipe.ingredients)


# ============================================================================
# Stage functions: pure, tuple in -> recipes out
# ============================================================================


def exclude_terms(recipes: tuple[Recipe, ...], terms: tuple[str, ...]) -> list[Recipe]:
    return [recipe for recipe in recipes if not contains_any_term(recipe, terms)]


def keep_dietary(recipes: tuple[Recipe, ...], preference: DietaryPreference) -> list[Recipe]:
    wanted = preference.value
    return [recipe for recipe in recipes if any(tag.lower() == wanted for tag in recipe.tags)]


def cuisine_matches(recipe: Recipe, cuisines: tuple[str, ...]) -> bool:
    fields = [recipe.category or "", *recipe.tags]
    return any(matches_any_term(field, cuisines) for field in fields)


def rank_cuisines(recipes: tuple[Recipe, ...], cuisines: tuple[str, ...]) -> list[Recipe]:
    # sorted() is stable: pool order is kept inside each group
    return sorted(recipes, key=lambda recipe: 0 if cuisine_matches(recipe, cuisines) else 1)


def recipe_minutes(recipe: Recipe) -> Optional[int]:
    return total_minutes(recipe.prep_time, recipe.cook_time)


def keep_within_time(recipes: tuple[Recipe, ...], limit: int) -> list[Recipe]:
    kept = []
    for recipe in recipes:
        minutes = recipe_minutes(recipe)
        if minutes is not None and minutes <= limit:
            kept.append(recipe)
    return kept


def recipe_calories(recipe: Recipe) -> Optional[int]:
    if recipe.nutrition_info is None:
        return None
    return extract_first_int(recipe.nutrition_info.calories)


def keep_within_calories(recipes: tuple[Recipe, ...], limit: int) -> list[Recipe]:
    kept = []
    for recipe in recipes:
        calories = recipe_calories(recipe)
        if calories is not None and calories <= limit:
            kept.append(recipe)
    return kept


# (nutrition field, comparison, threshold)
MICRO_PREFERENCE_RULES: dict[MicroPreference, tuple[str, str, int]] = {
    MicroPreference.LOW_SODIUM: ("sodium", "<", 1500),
    MicroPreference.HIGH_PROTEIN: ("protein", ">", 25),
    MicroPreference.LOW_SUGAR: ("sugar", "<", 5),
    MicroPreference.HIGH_FIBER: ("fiber", ">", 5),
    MicroPreference.LOW_FAT: ("fat", "<", 10),
}


def satisfies_micro_preference(nutrition: Optional[NutritionInfo], preference: MicroPreference) -> bool:
    """Check one nutrition threshold. Missing or unparsable data never satisfies it."""
    if nutrition is None:
        return False
    field, comparison, threshold = MICRO_PREFERENCE_RULES[preference]
    amount = extract_first_int(getattr(nutrition, field))
    if amount is None:
        return False
    return amount < threshold if comparison == "<" else amount > threshold


def micro_preference_score(recipe: Recipe, preferences: Iterable[MicroPreference]) -> int:
    """Number of micro-preferences the recipe's nutrition facts satisfy."""
    return sum(1 for preference in preferences if satisfies_micro_preference(recipe.nutrition_info, preference))


# ============================================================================
# Pipeline
# ============================================================================


class ConstraintPipeline:
    """Runs the priority-ordered stages over a pool for one constraint set.

    Holds no per-call state; a single instance can serve concurrent callers.
    """

    def __init__(self, controller: Optional[RelaxationController] = None) -> None:
        self.controller = controller or RelaxationController()

    def stages(self, constraints: ConstraintSet) -> list[tuple[str, object, bool]]:
        """Active stages for these constraints as (name, stage_fn, is_safety_critical)."""
        stages: list[tuple[str, object, bool]] = []
        if constraints.allergies:
            stages.append(("allergies", partial(exclude_terms, terms=constraints.allergies), True))
        if constraints.disliked_ingredients:
            stages.append(
                ("disliked_ingredients", partial(exclude_terms, terms=constraints.disliked_ingredients), False)
            )
        if constraints.dietary_preference != DietaryPreference.ALL:
            stages.append(
                ("dietary_preference", partial(keep_dietary, preference=constraints.dietary_preference), False)
            )
        if constraints.cuisine_types:
            stages.append(("cuisine_types", partial(rank_cuisines, cuisines=constraints.cuisine_types), False))
        if constraints.cooking_time_limit_minutes > 0:
            stages.append(
                (
                    "cooking_time_limit",
                    partial(keep_within_time, limit=constraints.cooking_time_limit_minutes),
                    False,
                )
            )
        if constraints.max_calories > 0:
            stages.append(("max_calories", partial(keep_within_calories, limit=constraints.max_calories), False))
        # Micro-preferences are scored by the selector, not applied here.
        return stages

    def filter(
        self,
        pool: CandidatePool | Iterable[Recipe],
        constraints: ConstraintSet,
        exclude_titles: Iterable[str] = (),
    ) -> CandidatePool:
        """Apply every active stage in priority order.

        Args:
            pool: Starting candidates (a CandidatePool or any iterable of recipes).
            constraints: User constraints for this call.
            exclude_titles: Titles removed before any stage (case-insensitive).

        Returns:
            The final pool. Empty only when the catalog was empty, every
            candidate was excluded by title, or allergies eliminated everything.
        """
        if not isinstance(pool, CandidatePool):
            pool = CandidatePool(tuple(pool))

        excluded = {title.strip().lower() for title in exclude_titles if title}
        if excluded:
            pool = pool.with_recipes(recipe for recipe in pool if recipe.title.strip().lower() not in excluded)

        for name, stage_fn, is_safety_critical in self.stages(constraints):
            if not pool:
                logger.debug(f"Pool empty, skipping remaining stages from '{name}'")
                break
            pool = self.controller.apply_stage(pool, stage_fn, is_safety_critical, name=name)

        logger.info(
            f"Constraint pipeline finished with {len(pool)} candidates"
            + (f" ({len(pool.notes)} soft constraints relaxed)" if pool.notes else "")
        )
        return pool
