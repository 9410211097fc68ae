import logging
import random

from domain.cache import CachedResource
from domain.errors import DegradedFetch, NoEligibleRecipe
from domain.models import FilterTag, Recipe
from domain.repository import NotionRecipeRepository


logger = logging.getLogger(__name__)


def candidate_pool(recipes: list[Recipe], previous_id: str | None) -> list[Recipe]:
    return [r for r in recipes if r.id != previous_id]


def filtered_candidate_pool(
    recipes: list[Recipe],
    previous_id: str | None,
    active: set[str],
) -> list[Recipe]:
    """Recipes sharing a tag with ``active``, else every recipe but the previous."""
    matching = [r for r in candidate_pool(recipes, previous_id) if r.tags & active]
    if matching:
        return matching
    if not active:
        logger.warning("No active filters, choosing from all recipes")
    else:
        logger.warning(
            "No recipes match active filters %s, choosing from all recipes",
            sorted(active),
        )
    return candidate_pool(recipes, previous_id)


def choose_recipe(pool: list[Recipe], rng: random.Random) -> Recipe:
    if not pool:
        raise NoEligibleRecipe("No eligible recipe to choose from")
    return pool[int(rng.random() * len(pool))]


def missing_tags(schema_tags: list[str], existing: list[str]) -> list[str]:
    seen = set(existing)
    missing: list[str] = []
    for tag in schema_tags:
        if tag not in seen:
            seen.add(tag)
            missing.append(tag)
    return missing


async def load_filter_tags(
    filter_tags: CachedResource[list[FilterTag]],
) -> tuple[list[FilterTag], bool]:
    """Cached filter tags and whether the list is complete.

    A partial list is handed back for this cycle only and never cached.
    """
    try:
        return await filter_tags.get(), True
    except DegradedFetch as e:
        return e.partial, False


async def sync_filter_tags(
    *,
    repository: NotionRecipeRepository,
    schema_tags: CachedResource[list[str]],
    filter_tags: CachedResource[list[FilterTag]],
) -> list[str]:
    """Append a filter entry for every schema tag the filter list lacks."""
    tags = await schema_tags.get()
    current, complete = await load_filter_tags(filter_tags)
    if not complete:
        logger.warning("Filter list only partly read, not adding tags")
        return []
    existing = [t.label for t in current]
    missing = missing_tags(tags, existing)
    if not missing:
        return []
    await repository.append_filter_tags(missing)
    filter_tags.invalidate()
    logger.info("Added filter tags %s", missing)
    return missing
