import asyncio
import logging
import random
import time
from typing import Callable

from domain.cache import CACHE_TTL, CachedResource
from domain.models import (
    PROCESSING_SUFFIX,
    FilterTag,
    Recipe,
    active_labels,
    mentioned_page_id,
)
from domain.repository import NotionRecipeRepository
from domain.services import (
    candidate_pool,
    choose_recipe,
    filtered_candidate_pool,
    load_filter_tags,
    sync_filter_tags,
)


logger = logging.getLogger(__name__)


class Poller:
    """Watches the trigger and swaps the selection for a random recipe.

    With a filter list configured the pick is limited to recipes carrying an
    active tag, and the filter list is kept in step with the database's tags.
    """

    def __init__(
        self,
        repository: NotionRecipeRepository,
        *,
        ttl: float = CACHE_TTL,
        timer: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
        interval: float = 0,
    ) -> None:
        self.repository = repository
        self.rng = random.Random() if rng is None else rng
        self.interval = interval
        self.recipes: CachedResource[list[Recipe]] = CachedResource(
            repository.fetch_recipes, ttl=ttl, timer=timer
        )
        self.schema_tags: CachedResource[list[str]] = CachedResource(
            repository.fetch_schema_tags, ttl=ttl, timer=timer
        )
        self.filter_tags: CachedResource[list[FilterTag]] = CachedResource(
            repository.fetch_filter_tags, ttl=ttl, timer=timer
        )

    @property
    def filtering(self) -> bool:
        return self.repository.filter_list_block_id is not None

    async def run_cycle(self) -> Recipe | None:
        trigger = await self.repository.trigger()
        if not trigger.checked:
            return None

        logger.info("Trigger checked, choosing a random recipe")
        label = trigger.label
        await self.repository.set_trigger_label(trigger, label + PROCESSING_SUFFIX)

        previous_id = mentioned_page_id(await self.repository.selection())
        recipes = await self.recipes.get()

        if self.filtering:
            tags, _ = await load_filter_tags(self.filter_tags)
            active = active_labels(tags)
            pool = filtered_candidate_pool(recipes, previous_id, active)
        else:
            pool = candidate_pool(recipes, previous_id)

        recipe = choose_recipe(pool, self.rng)
        await self.repository.set_selection(recipe)
        await self.repository.reset_trigger(trigger, label)
        logger.info("Selected %r", recipe)
        return recipe

    async def sync_tags(self) -> list[str]:
        return await sync_filter_tags(
            repository=self.repository,
            schema_tags=self.schema_tags,
            filter_tags=self.filter_tags,
        )

    async def poll_once(self) -> None:
        """One cycle. Failures are logged and never propagate."""
        try:
            await self.run_cycle()
        except Exception:
            logger.exception("Selection cycle failed")

        if not self.filtering:
            return
        try:
            await self.sync_tags()
        except Exception:
            logger.exception("Filter tag sync failed")

    async def run_forever(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)
