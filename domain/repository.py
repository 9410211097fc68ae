import logging

from domain.errors import DegradedFetch, ExternalCallError
from domain.models import (
    FilterTag,
    Recipe,
    Trigger,
    page_mention,
    schema_tag_names,
    text_runs,
)
from notion import Block, NotionClient


logger = logging.getLogger(__name__)


def filter_tags(blocks: list[Block]) -> list[FilterTag]:
    return [FilterTag.from_block(b) for b in blocks if b.get("type") == "to_do"]


class NotionRecipeRepository:
    """The blocks and database the poller reads and writes.

    Every Notion failure comes out as an ``ExternalCallError`` naming the step.
    """

    def __init__(
        self,
        client: NotionClient,
        *,
        recipes_database_id: str,
        trigger_block_id: str,
        selection_block_id: str,
        filter_list_block_id: str | None = None,
        tags_property: str = "Tags",
    ) -> None:
        self.client = client
        self.recipes_database_id = recipes_database_id
        self.trigger_block_id = trigger_block_id
        self.selection_block_id = selection_block_id
        self.filter_list_block_id = filter_list_block_id
        self.tags_property = tags_property

    async def trigger(self) -> Trigger:
        try:
            block = await self.client.retrieve_block(self.trigger_block_id)
        except Exception as e:
            raise ExternalCallError("Unable to fetch trigger", e) from e
        return Trigger.from_block(block)

    async def set_trigger_label(self, trigger: Trigger, label: str) -> None:
        try:
            await self.client.update_block(
                trigger.id, {"to_do": {"rich_text": text_runs(label)}}
            )
        except Exception as e:
            raise ExternalCallError("Unable to update trigger block", e) from e

    async def reset_trigger(self, trigger: Trigger, label: str) -> None:
        try:
            await self.client.update_block(
                trigger.id,
                {"to_do": {"checked": False, "rich_text": text_runs(label)}},
            )
        except Exception as e:
            raise ExternalCallError("Unable to reset trigger", e) from e

    async def selection(self) -> Block:
        try:
            return await self.client.retrieve_block(self.selection_block_id)
        except Exception as e:
            raise ExternalCallError("Unable to get selection block", e) from e

    async def set_selection(self, recipe: Recipe) -> None:
        try:
            await self.client.update_block(
                self.selection_block_id,
                {"paragraph": {"rich_text": page_mention(recipe.id)}},
            )
        except Exception as e:
            raise ExternalCallError("Unable to set selection", e) from e

    async def fetch_recipes(self) -> list[Recipe]:
        pages: list[Block] = []
        cursor: str | None = None
        while True:
            try:
                resp = await self.client.query_database(
                    self.recipes_database_id, cursor=cursor
                )
                pages.extend(resp["results"])
            except Exception as e:
                raise ExternalCallError("Unable to fetch recipes", e) from e
            cursor = resp.get("next_cursor")
            if not resp.get("has_more") or not cursor:
                break
        return [Recipe.from_page(p, tags_property=self.tags_property) for p in pages]

    async def fetch_schema_tags(self) -> list[str]:
        try:
            database = await self.client.retrieve_database(self.recipes_database_id)
        except Exception as e:
            raise ExternalCallError("Unable to fetch recipes database", e) from e
        return schema_tag_names(database, tags_property=self.tags_property)

    async def fetch_filter_tags(self) -> list[FilterTag]:
        """Filter list children.

        A failing page ends the walk early with ``DegradedFetch`` carrying the
        tags read so far, so a short list is never mistaken for the whole one.
        """
        if self.filter_list_block_id is None:
            return []
        blocks: list[Block] = []
        cursor: str | None = None
        while True:
            try:
                resp = await self.client.list_children(
                    self.filter_list_block_id, cursor=cursor
                )
                results = resp["results"]
            except Exception as e:
                err = DegradedFetch(
                    "Unable to fetch filter tags", e, partial=filter_tags(blocks)
                )
                logger.warning("%s, keeping %d fetched", err, len(err.partial))
                raise err from e
            blocks.extend(results)
            cursor = resp.get("next_cursor")
            if not resp.get("has_more") or not cursor:
                break
        return filter_tags(blocks)

    async def append_filter_tags(self, labels: list[str]) -> None:
        if self.filter_list_block_id is None:
            raise ExternalCallError("No filter list block configured")
        try:
            await self.client.append_children(
                self.filter_list_block_id,
                [FilterTag.new_block(label) for label in labels],
            )
        except Exception as e:
            raise ExternalCallError("Unable to append filter tags", e) from e
