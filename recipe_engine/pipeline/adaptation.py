"""Post-selection content rewriting.

AdaptationEngine.adapt() never mutates its input: it builds a new Recipe
with adjusted ingredients, description, steps, servings and timing.

- Spice: ingredients containing a spice term get their leading quantity
  capped (none/mild) or scaled (spicy/extra-spicy) plus a suffix. Medium
  is the identity.
- Allergens: matching ingredients are swapped for a category substitute,
  or flagged inline with a WARNING when no substitute is known.
- Portions: servings scale by a fixed factor, rounded half up, min 1.
- Timing: variations get a small random bump to prep/cook/total time.
"""

import math
import random
import re
from fractions import Fraction
from typing import Iterable, Optional

from recipe_engine.models.models import PortionSize, Recipe, RecipeStep, SpiceLevel
from recipe_engine.pipeline.filters import matches_any_term
from recipe_engine.utils.logger import logger
from recipe_engine.utils.parsing import (
    extract_first_int,
    format_minutes,
    format_quantity,
    split_leading_quantity,
    total_minutes,
)

SPICE_TERMS: tuple[str, ...] = (
    "pepper",
    "chili",
    "cayenne",
    "hot sauce",
    "paprika",
    "curry",
    "ginger",
    "horseradish",
    "wasabi",
    "sriracha",
)

SPICE_SUFFIXES: dict[SpiceLevel, str] = {
    SpiceLevel.NONE: "(optional, omit for no heat)",
    SpiceLevel.MILD: "(reduced for mild heat)",
    SpiceLevel.SPICY: "(extra for more heat)",
    SpiceLevel.EXTRA_SPICY: "(doubled for extra heat)",
}

# Quantity cap for milder levels, multiplier for hotter ones.
# The cap is min(quantity, cap): amounts already below it are kept as they are.
REDUCED_QUANTITIES: dict[SpiceLevel, Fraction] = {
    SpiceLevel.NONE: Fraction(1, 4),
    SpiceLevel.MILD: Fraction(1, 2),
}
SPICE_MULTIPLIERS: dict[SpiceLevel, Fraction] = {
    SpiceLevel.SPICY: Fraction(3, 2),
    SpiceLevel.EXTRA_SPICY: Fraction(2),
}

# Added only when the recipe has no spice ingredient at all
HEAT_INGREDIENTS: dict[SpiceLevel, tuple[str, ...]] = {
    SpiceLevel.SPICY: ("Red pepper flakes",),
    SpiceLevel.EXTRA_SPICY: ("Hot sauce", "Cayenne pepper"),
}

SPICE_DESCRIPTION_NOTES: dict[SpiceLevel, str] = {
    SpiceLevel.NONE: "Made with no added spice for a mild flavor.",
    SpiceLevel.MILD: "Prepared with a touch of spice for subtle flavor.",
    SpiceLevel.SPICY: "Kicked up with extra spice for heat lovers.",
    SpiceLevel.EXTRA_SPICY: "Made extra spicy for those who love intense heat.",
}

SPICY_STEP_NOTE = "Add extra red pepper flakes for heat."
EXTRA_SPICY_STEP_NOTE = "Add generous amounts of chili flakes, cayenne pepper, and hot sauce for maximum heat."
_NO_SPICE_PHRASE = re.compile(r"add.*pepper|add.*spice|add.*chili", re.IGNORECASE)

# (allergen names, pattern to replace, substitute)
ALLERGEN_SUBSTITUTES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("milk", "dairy"), r"milk|dairy|cream", "almond milk"),
    (("egg", "eggs"), r"eggs?", "egg substitute"),
    (("peanut", "peanuts"), r"peanuts?", "sunflower seed"),
    (("tree nut", "tree nuts"), r"almonds?|walnuts?|pecans?|cashews?", "seed"),
    (("wheat", "gluten"), r"flour|wheat|bread", "gluten-free alternative"),
)
WARNING_MARKER = "(WARNING: Contains"

PORTION_FACTORS: dict[PortionSize, float] = {
    PortionSize.SINGLE: 0.5,
    PortionSize.COUPLE: 1,
    PortionSize.FAMILY: 2,
    PortionSize.LARGE_GROUP: 4,
}

SEASONING_NOTE = "Adjust seasoning to taste."


# ============================================================================
# Ingredient helpers
# ============================================================================


def normalize_key(ingredient: str) -> str:
    return " ".join(ingredient.split()).lower()


def merge_ingredients(*groups: Iterable[str]) -> tuple[str, ...]:
    """Ordered union of ingredient lists, de-duplicated case-insensitively (first wins)."""
    seen: set[str] = set()
    merged: list[str] = []
    for group in groups:
        for ingredient in group:
            ingredient = ingredient.strip()
            key = normalize_key(ingredient)
            if key and key not in seen:
                seen.add(key)
                merged.append(ingredient)
    return tuple(merged)


def is_spice_ingredient(ingredient: str) -> bool:
    return matches_any_term(ingredient, SPICE_TERMS)


def strip_spice_suffix(ingredient: str) -> str:
    stripped = ingredient.rstrip()
    changed = True
    while changed:
        changed = False
        for suffix in SPICE_SUFFIXES.values():
            if stripped.endswith(suffix):
                stripped = stripped[: -len(suffix)].rstrip()
                changed = True
    return stripped


def adjust_spice_ingredient(ingredient: str, level: SpiceLevel) -> str:
    """Rewrite one spice ingredient for the target level (medium returns it unchanged)."""
    if level == SpiceLevel.MEDIUM:
        return ingredient
    base = strip_spice_suffix(ingredient)
    quantity, rest = split_leading_quantity(base)
    if quantity is not None:
        if level in REDUCED_QUANTITIES:
            quantity = min(quantity, REDUCED_QUANTITIES[level])
        else:
            quantity = quantity * SPICE_MULTIPLIERS[level]
        base = f"{format_quantity(quantity)} {rest}".strip()
    return f"{base} {SPICE_SUFFIXES[level]}"


def substitute_allergen(ingredient: str, allergies: Iterable[str]) -> str:
    """Swap the first matching allergen for a safe alternative, or flag it inline.

    Unknown allergen categories produce an explicit WARNING instead of
    passing the ingredient through silently.
    """
    lowered = ingredient.lower()
    matched = next((allergen for allergen in allergies if allergen and allergen.lower() in lowered), None)
    if matched is None:
        return ingredient

    for names, pattern, substitute in ALLERGEN_SUBSTITUTES:
        if matched.lower() in names:
            # Already substituted; substitutes may still contain the allergen word
            if substitute.lower() in lowered:
                return ingredient
            replaced, count = re.subn(pattern, substitute, ingredient, count=1, flags=re.IGNORECASE)
            if count:
                return replaced
            break

    if WARNING_MARKER in ingredient:
        return ingredient
    return f"{ingredient} {WARNING_MARKER} {matched} - please substitute)"


def scale_servings(servings: int, portion_size: PortionSize) -> int:
    """Scale and round half up; never below 1."""
    return max(1, math.floor(servings * PORTION_FACTORS[portion_size] + 0.5))


# ============================================================================
# Text helpers
# ============================================================================


def _append_sentence(text: str, sentence: str) -> str:
    if sentence in text:
        return text
    return f"{text} {sentence}".strip()


def _strip_spice_notes(description: str) -> str:
    for note in SPICE_DESCRIPTION_NOTES.values():
        description = description.replace(f" {note}", "").replace(note, "")
    return description.strip()


def _mentions(text: str, words: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


def adjust_spice_steps(steps: tuple[RecipeStep, ...], level: SpiceLevel) -> tuple[RecipeStep, ...]:
    adjusted = []
    for step in steps:
        instruction = step.instruction
        if level == SpiceLevel.NONE and _mentions(instruction, ("pepper", "spice", "chili")):
            instruction = _NO_SPICE_PHRASE.sub("omit any spicy ingredients", instruction, count=1)
        elif level == SpiceLevel.SPICY and _mentions(instruction, ("season", "spice", "pepper")):
            instruction = _append_sentence(instruction, SPICY_STEP_NOTE)
        elif level == SpiceLevel.EXTRA_SPICY and _mentions(instruction, ("season", "spice")):
            instruction = _append_sentence(instruction, EXTRA_SPICY_STEP_NOTE)
        adjusted.append(step if instruction == step.instruction else step.model_copy(update={"instruction": instruction}))
    return tuple(adjusted)


def _with_instruction(steps: list[RecipeStep], index: int, sentence: str) -> None:
    step = steps[index]
    updated = _append_sentence(step.instruction, sentence)
    if updated != step.instruction:
        steps[index] = step.model_copy(update={"instruction": updated})


# ============================================================================
# Engine
# ============================================================================


class AdaptationEngine:
    """Builds adapted copies of recipes."""

    def adapt(
        self,
        recipe: Recipe,
        spice_level: SpiceLevel = SpiceLevel.MEDIUM,
        portion_size: PortionSize = PortionSize.COUPLE,
        allergies: Iterable[str] = (),
        *,
        user_ingredients: Iterable[str] = (),
        variation: bool = False,
        rng: Optional[random.Random] = None,
    ) -> Recipe:
        """Produce an adapted copy of recipe.

        Args:
            recipe: Source recipe; left untouched.
            spice_level: Target heat. Medium leaves ingredients and description as they are.
            portion_size: Target portion; scales servings.
            allergies: Allergens to substitute or flag. Heat ingredients matching them are never added.
            user_ingredients: Merged after the recipe's own ingredients (case-insensitive union).
            variation: Apply variation-only changes (timing jitter, seasoning notes).
            rng: Random source for step placement and jitter.

        Returns:
            A new Recipe. Identity fields (id, title) are left for IdentityAssigner.
        """
        spice_level = SpiceLevel(spice_level)
        portion_size = PortionSize(portion_size)
        allergies = tuple(term for term in allergies if term)
        rng = rng or random.Random()

        # Allergen substitution
        recipe_lines = list(recipe.ingredients)
        user_lines = [ingredient.strip() for ingredient in user_ingredients if ingredient.strip()]
        substituted = False
        if allergies:
            safe_recipe_lines = [substitute_allergen(line, allergies) for line in recipe_lines]
            safe_user_lines = [substitute_allergen(line, allergies) for line in user_lines]
            substituted = safe_recipe_lines != recipe_lines or safe_user_lines != user_lines
            recipe_lines, user_lines = safe_recipe_lines, safe_user_lines

        # Spice transform on the recipe's own ingredients
        steps = recipe.steps
        description = recipe.description
        if spice_level != SpiceLevel.MEDIUM:
            has_spice = any(is_spice_ingredient(line) for line in recipe_lines)
            recipe_lines = [
                adjust_spice_ingredient(line, spice_level) if is_spice_ingredient(line) else line
                for line in recipe_lines
            ]
            if not has_spice:
                additions = [
                    extra for extra in HEAT_INGREDIENTS.get(spice_level, ()) if not matches_any_term(extra, allergies)
                ]
                recipe_lines.extend(additions)
            steps = adjust_spice_steps(steps, spice_level)
            description = _append_sentence(_strip_spice_notes(description), SPICE_DESCRIPTION_NOTES[spice_level])

        if substituted:
            description = _append_sentence(description, f"(Modified to avoid allergens: {', '.join(allergies)})")

        # Merge user ingredients; genuinely new ones get a mention in a middle step
        existing = [normalize_key(line) for line in recipe_lines]
        step_list = list(steps)
        for ingredient in user_lines:
            key = normalize_key(ingredient)
            already_included = any(key in line or line in key for line in existing)
            if not already_included and len(step_list) > 3:
                _with_instruction(step_list, rng.randrange(1, len(step_list) - 1), f"Add {ingredient} as well.")
        ingredients = merge_ingredients(recipe_lines, user_lines)

        update = {
            "ingredients": ingredients,
            "description": description,
            "servings": scale_servings(recipe.servings, portion_size),
        }

        prep_time, cook_time, total_time = recipe.prep_time, recipe.cook_time, recipe.total_time
        if variation:
            prep = extract_first_int(prep_time)
            cook = extract_first_int(cook_time)
            if prep is not None:
                prep_time = format_minutes(prep + rng.randint(0, 4))
            if cook is not None:
                cook_time = format_minutes(cook + rng.randint(0, 6))
            total = extract_first_int(total_time)
            if total is not None:
                total_time = format_minutes(total + rng.randint(0, 9))
            for index in range(len(step_list)):
                if rng.random() > 0.7:
                    _with_instruction(step_list, index, SEASONING_NOTE)
        if total_time is None:
            summed = total_minutes(prep_time, cook_time)
            if summed is not None:
                total_time = format_minutes(summed)

        update.update(
            {"prep_time": prep_time, "cook_time": cook_time, "total_time": total_time, "steps": tuple(step_list)}
        )

        logger.debug(
            f"Adapted '{recipe.title}': spice={spice_level.value}, portion={portion_size.value}, "
            f"servings {recipe.servings}->{update['servings']}, variation={variation}"
        )
        return recipe.model_copy(update=update)
