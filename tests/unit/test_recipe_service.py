"""Unit tests for the recipe service entry points."""

import asyncio
import logging
import random
import time
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from recipe_engine.catalog.catalog import InMemoryCatalog
from recipe_engine.catalog.remote import RemoteCatalog
from recipe_engine.models.models import ConstraintSet, NutritionInfo, PortionSize, Recipe
from recipe_engine.service import recipe_service
from recipe_engine.service.recipe_service import (
    NO_SAFE_MATCH_INSTRUCTION,
    RecipeService,
    build_fallback_recipe,
    build_safety_placeholder,
    coerce_constraints,
    normalize_ingredients,
    split_allergen_ingredients,
)
from recipe_engine.utils.config import Config
from recipe_engine.utils.errors import RecipeErrorType, RecipeServiceError, ValidationError


def make_recipe(title, ingredients, servings=2, prep="10 min", cook="10 min", tags=(), steps=("Cook.",), **nutrition):
    return Recipe(
        id=title.lower().replace(" ", "-"),
        title=title,
        description=f"{title} description.",
        servings=servings,
        prep_time=prep,
        cook_time=cook,
        ingredients=ingredients,
        steps=steps,
        tags=tags,
        nutrition_info=NutritionInfo(**nutrition) if nutrition else None,
    )


@pytest.fixture
def catalog():
    return InMemoryCatalog(
        [
            make_recipe("Pancakes", ["Flour", "Milk", "Egg"], tags=["breakfast"]),
            make_recipe("Stir-Fry", ["Chicken Breast", "Broccoli", "Soy Sauce"], tags=["asian"]),
            make_recipe("Rice Bowl", ["Rice", "Broccoli", "Tofu"], tags=["vegan"]),
        ]
    )


@pytest.fixture
def cfg(monkeypatch):
    for name in ("RANDOM_SEED", "SIMULATED_LATENCY_MS", "REQUEST_TIMEOUT_SECONDS", "CATALOG_SOURCE"):
        monkeypatch.delenv(name, raising=False)
    return Config()


@pytest.fixture
def service(catalog, cfg):
    return RecipeService(catalog, cfg=cfg)


class TestInputNormalization:
    def test_ingredients_stripped_and_deduplicated(self):
        assert normalize_ingredients([" chicken ", "Chicken", "", "rice"]) == ("chicken", "rice")

    def test_comma_separated_ingredients(self):
        assert normalize_ingredients("chicken, rice") == ("chicken", "rice")

    @pytest.mark.parametrize("value", [None, [], ["", "  "], ""])
    def test_empty_ingredients_rejected(self, value):
        with pytest.raises(ValidationError, match="at least one ingredient"):
            normalize_ingredients(value)

    def test_constraints_from_dict(self):
        constraints = coerce_constraints({"spiceLevel": "extraSpicy", "portionSize": "family"})
        assert constraints.portion_size == PortionSize.FAMILY

    def test_invalid_constraints_are_validation_errors(self):
        with pytest.raises(ValidationError) as exc:
            coerce_constraints({"cookingTimeLimitMinutes": -1})
        assert exc.value.type == RecipeErrorType.VALIDATION

    def test_split_allergen_ingredients(self):
        safe, blocked = split_allergen_ingredients(["Milk", "rice", "eggs"], ["milk", "egg"])
        assert safe == ("rice",)
        assert blocked == ("Milk", "eggs")


class TestDegradeRecipes:
    def test_safety_placeholder(self):
        placeholder = build_safety_placeholder(("milk", "rice"), ConstraintSet(allergies=["milk"]))

        assert placeholder.title == "Custom Recipe"
        assert placeholder.servings == 2
        assert placeholder.prep_time == "15 min"
        assert placeholder.cook_time == "20 min"
        assert placeholder.ingredients == ("rice",)
        assert [step.instruction for step in placeholder.steps] == [NO_SAFE_MATCH_INSTRUCTION]

    def test_fallback_defaults(self):
        recipe = build_fallback_recipe(("chicken",), ConstraintSet())

        assert recipe.title == "Custom Recipe with chicken"
        assert recipe.servings == 2
        assert (recipe.prep_time, recipe.cook_time) == ("15 min", "20 min")
        assert len(recipe.steps) == 5
        assert recipe.steps[3].instruction == "Season to taste."
        assert recipe.nutrition_info is None

    def test_fallback_follows_constraints(self):
        constraints = ConstraintSet(cooking_time_limit_minutes=30, max_calories=500, portion_size="large-group")
        recipe = build_fallback_recipe(("chicken", "rice"), constraints)

        assert recipe.servings == 8
        assert (recipe.prep_time, recipe.cook_time) == ("10 min", "20 min")
        assert recipe.steps[3].instruction == "Add rice and continue cooking for a few minutes."
        assert recipe.nutrition_info.calories == "500 kcal"


class TestGenerateRecipe:
    def test_picks_best_match_and_merges_ingredients(self, service):
        recipe = service.generate_recipe(["chicken", "broccoli"], rng=random.Random(0))

        lowered = [line.lower() for line in recipe.ingredients]
        assert recipe.description.startswith("Stir-Fry")
        assert "chicken" in lowered
        assert "broccoli" in lowered
        assert "soy sauce" in lowered

    def test_output_has_fresh_id(self, service, catalog):
        recipe = service.generate_recipe(["chicken"])
        assert recipe.id not in {candidate.id for candidate in catalog.list_candidates()}

    def test_catalog_untouched(self, service, catalog):
        before = [candidate.model_dump() for candidate in catalog.list_candidates()]
        service.generate_recipe(["chicken"], {"spiceLevel": "extra-spicy", "portionSize": "family"})
        assert [candidate.model_dump() for candidate in catalog.list_candidates()] == before

    def test_empty_ingredients_rejected(self, service):
        with pytest.raises(ValidationError):
            service.generate_recipe([])

    def test_allergy_exhaustion_returns_placeholder(self, service):
        constraints = {"allergies": ["flour", "chicken", "rice"]}

        recipe = service.generate_recipe(["broccoli", "rice"], constraints)

        assert recipe.title == "Custom Recipe"
        assert recipe.ingredients == ("broccoli",)
        assert recipe.id

    def test_allergen_user_ingredients_dropped(self, service):
        recipe = service.generate_recipe(["chicken", "milk"], {"allergies": ["milk"]})

        assert not any("milk" in line.lower() for line in recipe.ingredients)

    def test_empty_catalog_builds_fallback(self, cfg):
        service = RecipeService(InMemoryCatalog([]), cfg=cfg)

        recipe = service.generate_recipe(["chicken", "rice"], {"portionSize": "family"})

        assert recipe.title == "Custom Recipe with chicken"
        assert recipe.servings == 4

    def test_logs_carry_operation_context(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="recipe_engine"):
            recipe = service.generate_recipe(["chicken"])

        done = [record for record in caplog.records if getattr(record, "recipe_id", None) == recipe.id]
        assert [record.operation for record in done] == ["generate_recipe"]

    def test_catalog_override_per_call(self, service):
        other = InMemoryCatalog([make_recipe("Soup", ["Water"])])
        assert service.generate_recipe(["water"], catalog=other).title == "Soup"

    def test_seeded_config_is_reproducible(self, catalog, monkeypatch):
        monkeypatch.setenv("RANDOM_SEED", "5")
        service = RecipeService(catalog, cfg=Config())

        first = service.generate_recipe(["tofu"])
        second = service.generate_recipe(["tofu"])

        assert first.model_dump(exclude={"id"}) == second.model_dump(exclude={"id"})
        assert first.id != second.id


class TestModifyRecipe:
    def test_creates_variation(self, service, catalog):
        original = catalog.list_candidates()[1]

        recipe = service.modify_recipe(original, ["chicken", "rice"], rng=random.Random(1))

        assert recipe.title == "Stir-Fry Variation"
        assert recipe.id != original.id
        assert recipe.description.startswith("A variation of the original recipe with modified ingredients: chicken, rice.")
        assert "rice" in [line.lower() for line in recipe.ingredients]

    def test_missing_original_rejected(self, service):
        with pytest.raises(ValidationError, match="Original recipe is required"):
            service.modify_recipe(None, ["rice"])

    def test_empty_ingredients_rejected(self, service, catalog):
        with pytest.raises(ValidationError, match="at least one ingredient"):
            service.modify_recipe(catalog.list_candidates()[0], [])

    def test_original_from_dict(self, service):
        recipe = service.modify_recipe({"title": "Soup", "servings": 2, "ingredients": ["Water"]}, ["salt"])
        assert recipe.title == "Soup Variation"

    def test_allergens_substituted(self, service, catalog):
        pancakes = catalog.list_candidates()[0]

        recipe = service.modify_recipe(pancakes, ["sugar"], {"allergies": ["milk"]})

        assert "almond milk" in recipe.ingredients
        assert "Milk" not in recipe.ingredients
        assert "Modified to avoid allergens: milk" in recipe.description

    def test_repeated_variation_keeps_substitutes_stable(self, service, catalog):
        pancakes = catalog.list_candidates()[0]
        constraints = {"allergies": ["milk", "egg"]}

        once = service.modify_recipe(pancakes, ["sugar"], constraints, rng=random.Random(2))
        twice = service.modify_recipe(once, ["sugar"], constraints, rng=random.Random(3))

        assert once.ingredients == ("Flour", "almond milk", "egg substitute", "sugar")
        assert twice.ingredients == once.ingredients

    def test_variation_twice_keeps_single_suffix(self, service, catalog):
        once = service.modify_recipe(catalog.list_candidates()[1], ["rice"])
        twice = service.modify_recipe(once, ["tofu"])
        assert twice.title.count("Variation") == 1


class TestRegenerateRecipe:
    def test_excludes_previous_title(self, service, catalog):
        previous = catalog.list_candidates()[1]
        recipe = service.regenerate_recipe(["broccoli"], previous)
        assert recipe.description.startswith("Rice Bowl")

    def test_falls_back_to_variation(self, cfg):
        only = make_recipe("Soup", ["Water"])
        service = RecipeService(InMemoryCatalog([only]), cfg=cfg)

        recipe = service.regenerate_recipe(["water"], only)

        assert recipe.title == "Soup Variation"

    def test_missing_previous_rejected(self, service):
        with pytest.raises(ValidationError):
            service.regenerate_recipe(["rice"], None)


class TestAsyncBoundary:
    @pytest.mark.asyncio
    async def test_generate_async(self, service):
        recipe = await service.generate_recipe_async(["chicken", "broccoli"])
        assert recipe.description.startswith("Stir-Fry")

    @pytest.mark.asyncio
    async def test_validation_error_propagates(self, service):
        with pytest.raises(ValidationError):
            await service.generate_recipe_async([])

    @pytest.mark.asyncio
    async def test_simulated_latency(self, catalog, monkeypatch):
        monkeypatch.setenv("SIMULATED_LATENCY_MS", "1500")
        service = RecipeService(catalog, cfg=Config())

        with patch("recipe_engine.service.recipe_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await service.generate_recipe_async(["rice"])

        mock_sleep.assert_awaited_once_with(1.5)

    @pytest.mark.asyncio
    async def test_timeout_bounds_the_wait(self, catalog, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0.05")
        service = RecipeService(catalog, cfg=Config())

        def slow_generate(*args, **kwargs):
            time.sleep(0.5)

        with patch.object(service, "generate_recipe", side_effect=slow_generate):
            with pytest.raises(RecipeServiceError) as exc:
                await service.generate_recipe_async(["rice"])

        assert exc.value.type == RecipeErrorType.TIMEOUT
        assert exc.value.is_retryable

    @pytest.mark.asyncio
    async def test_remote_catalog_loaded_on_async_path(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SOURCE", "remote")
        monkeypatch.setenv("CATALOG_URL", "https://example.com/recipes.json")
        service = RecipeService(cfg=Config())
        payload = [{"title": "Soup", "servings": 2, "ingredients": ["Water"]}]

        with patch.object(RemoteCatalog, "_fetch_json", new_callable=AsyncMock, return_value=payload) as mock_fetch:
            first = await service.generate_recipe_async(["water"])
            second = await service.regenerate_recipe_async(["water"], first)

        assert first.title == "Soup"
        assert second.title == "Soup Variation"
        mock_fetch.assert_awaited_once()

    def test_remote_catalog_on_sync_path_is_service_error(self, monkeypatch):
        monkeypatch.setenv("CATALOG_SOURCE", "remote")
        monkeypatch.setenv("CATALOG_URL", "https://example.com/recipes.json")

        with pytest.raises(ValidationError, match="async entry points"):
            RecipeService(cfg=Config()).generate_recipe(["chicken"])

    @pytest.mark.asyncio
    @patch("recipe_engine.catalog.remote.asyncio.sleep", new_callable=AsyncMock)
    async def test_remote_catalog_failure_keeps_error_shape(self, mock_sleep, monkeypatch):
        monkeypatch.setenv("CATALOG_SOURCE", "remote")
        monkeypatch.setenv("CATALOG_URL", "https://example.com/recipes.json")
        service = RecipeService(cfg=Config())

        with patch.object(
            RemoteCatalog, "_fetch_json", new_callable=AsyncMock, side_effect=aiohttp.ClientConnectionError("down")
        ):
            with pytest.raises(RecipeServiceError) as exc:
                await service.generate_recipe_async(["water"])

        assert exc.value.type == RecipeErrorType.NETWORK
        assert exc.value.is_retryable

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_classified(self, service):
        with patch.object(service, "generate_recipe", side_effect=ConnectionError("connection reset")):
            with pytest.raises(RecipeServiceError) as exc:
                await service.generate_recipe_async(["rice"])

        assert exc.value.type == RecipeErrorType.NETWORK
        assert exc.value.to_dict()["details"] == "connection reset"

    @pytest.mark.asyncio
    async def test_modify_and_regenerate_async(self, service, catalog):
        previous = catalog.list_candidates()[1]

        modified = await service.modify_recipe_async(previous, ["rice"])
        regenerated = await service.regenerate_recipe_async(["broccoli"], previous)

        assert modified.title == "Stir-Fry Variation"
        assert regenerated.description.startswith("Rice Bowl")


class TestModuleLevelApi:
    def test_default_service_is_shared(self):
        assert recipe_service.get_service() is recipe_service.get_service()

    def test_generate_with_explicit_catalog(self):
        catalog = InMemoryCatalog([make_recipe("Soup", ["Water"])])
        assert recipe_service.generate_recipe(["water"], catalog=catalog).title == "Soup"

    @pytest.mark.asyncio
    async def test_generate_async_with_explicit_catalog(self):
        catalog = InMemoryCatalog([make_recipe("Soup", ["Water"])])
        recipe = await recipe_service.generate_recipe_async(["water"], catalog=catalog)
        assert recipe.title == "Soup"

    def test_timeout_error_shape(self):
        error = RecipeServiceError(RecipeErrorType.TIMEOUT, "generate_recipe timed out")
        assert error.to_dict()["type"] == "timeout"
