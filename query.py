#!/usr/bin/env python3
"""Ad hoc query runner for the recipe pipeline.

Run the selection and adaptation pipeline directly from the terminal.

Usage:
    python query.py chicken broccoli
    python query.py --allergies milk,eggs --spice extra-spicy chicken rice
    python query.py --time 20 --portion family --seed 7 chicken
    python query.py --debug chicken broccoli  # Show full JSON recipe

Features:
- Every ConstraintSet field available as a flag
- Markdown rendering of the adapted recipe
- Debug mode to display the full recipe JSON
- Reproducible output with --seed
"""

import asyncio
import random
import sys
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from recipe_engine.models.models import Recipe
from recipe_engine.service.recipe_service import get_service
from recipe_engine.utils.errors import classify_error, user_friendly_message
from recipe_engine.utils.logger import logger

console = Console()

USAGE = "Usage: python query.py [--debug] [--allergies a,b] [--dislikes a,b] [--diet X] [--cuisines a,b] " \
        "[--time N] [--calories N] [--micro a,b] [--spice X] [--portion X] [--seed N] <ingredient> [...]"

# flag -> ConstraintSet field
VALUE_FLAGS = {
    "--allergies": "allergies",
    "--dislikes": "disliked_ingredients",
    "--diet": "dietary_preference",
    "--cuisines": "cuisine_types",
    "--time": "cooking_time_limit_minutes",
    "--calories": "max_calories",
    "--micro": "micro_preferences",
    "--spice": "spice_level",
    "--portion": "portion_size",
}


class UsageError(Exception):
    """Bad command-line arguments."""


def parse_args(argv: list[str]) -> tuple[dict, list[str], bool, Optional[int]]:
    """Split argv into (constraints, ingredients, debug, seed).

    Raises:
        UsageError: On an unknown flag, a flag missing its value, or a non-numeric seed.
    """
    constraints: dict = {}
    debug = False
    seed = None
    index = 0

    while index < len(argv) and argv[index].startswith("--"):
        flag = argv[index]
        if flag == "--debug":
            debug = True
            index += 1
            continue
        if flag not in VALUE_FLAGS and flag != "--seed":
            raise UsageError(f"Unknown flag: {flag}")
        if index + 1 >= len(argv):
            raise UsageError(f"{flag} flag requires a value")
        value = argv[index + 1]
        if flag == "--seed":
            try:
                seed = int(value)
            except ValueError:
                raise UsageError(f"--seed must be an integer, got: {value}") from None
        else:
            constraints[VALUE_FLAGS[flag]] = value
        index += 2

    # Ingredients may be separate arguments or comma-separated
    ingredients = [item.strip() for arg in argv[index:] for item in arg.split(",") if item.strip()]
    return constraints, ingredients, debug, seed


def render_recipe_markdown(recipe: Recipe) -> str:
    """Format a recipe as markdown for the terminal."""
    lines = [f"# {recipe.title}", ""]
    if recipe.description:
        lines += [recipe.description, ""]

    facts = [f"**Servings:** {recipe.servings}", f"**Prep:** {recipe.prep_time}", f"**Cook:** {recipe.cook_time}"]
    if recipe.total_time:
        facts.append(f"**Total:** {recipe.total_time}")
    if recipe.difficulty:
        facts.append(f"**Difficulty:** {recipe.difficulty.value}")
    lines += [" | ".join(facts), ""]

    lines += ["## Ingredients", ""]
    lines += [f"- {ingredient}" for ingredient in recipe.ingredients]
    lines += ["", "## Steps", ""]
    lines += [f"{number}. {step.instruction}" for number, step in enumerate(recipe.steps, start=1)]

    nutrition = recipe.nutrition_info
    if nutrition is not None:
        values = {name: value for name, value in nutrition.model_dump().items() if value}
        if values:
            lines += ["", "## Nutrition (per serving)", ""]
            lines += [f"- **{name.capitalize()}:** {value}" for name, value in values.items()]

    if recipe.tags:
        lines += ["", f"*Tags: {', '.join(recipe.tags)}*"]
    return "\n".join(lines)


def run_query(ingredients: list[str], constraints: dict, debug: bool = False, seed: Optional[int] = None) -> int:
    """Run the pipeline once and print the recipe. Returns the process exit code."""
    try:
        logger.info(f"Running pipeline for: {', '.join(ingredients)}")
        rng = random.Random(seed) if seed is not None else None
        recipe = asyncio.run(get_service().generate_recipe_async(ingredients, constraints, rng=rng))

        console.print()

        if debug:
            console.print("[bold cyan]Debug Mode: Full Recipe[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print_json(data=recipe.model_dump(mode="json", by_alias=True))
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        console.print(Markdown(render_recipe_markdown(recipe)))
        return 0

    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        return 0
    except Exception as e:
        error = classify_error(e)
        logger.error(f"Query execution failed: {error.to_dict()}", exc_info=error is not e)
        console.print(f"[red]✗ {user_friendly_message(error)}[/red]")
        if error.is_retryable:
            console.print("[dim]This looks temporary. Run the query again in a moment.[/dim]")
        return 1


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        constraints, ingredients, debug, seed = parse_args(argv)
    except UsageError as e:
        print(f"Error: {e}")
        print(USAGE)
        return 1

    if not ingredients:
        print("Error: No ingredients provided")
        print(USAGE)
        print("")
        print("Examples:")
        print("  python query.py chicken broccoli")
        print("  python query.py --allergies milk,eggs --spice extra-spicy chicken rice")
        print("  python query.py --debug --seed 7 --portion family chicken")
        return 1

    return run_query(ingredients, constraints, debug=debug, seed=seed)


if __name__ == "__main__":
    sys.exit(main())
