import asyncio
import logging

from rich.logging import RichHandler

import config
from domain.poller import Poller
from domain.repository import NotionRecipeRepository
from notion import NotionClient, notion_client_factory


CONFIG = config.Config()


logger = logging.getLogger("recipe_roulette")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def build_poller(cfg: config.Config, client: NotionClient) -> Poller:
    repository = NotionRecipeRepository(
        client,
        recipes_database_id=cfg.recipes_database_id,
        trigger_block_id=cfg.trigger_block_id,
        selection_block_id=cfg.selection_block_id,
        filter_list_block_id=cfg.filter_list_block_id or None,
        tags_property=cfg.tags_property,
    )
    return Poller(repository, ttl=cfg.cache_ttl, interval=cfg.poll_interval)


async def run(cfg: config.Config) -> None:
    client = NotionClient(
        notion_client_factory(
            cfg.notion_key,
            version=cfg.notion_version,
            timeout=cfg.request_timeout,
        )
    )
    poller = build_poller(cfg, client)
    logger.info(
        "Polling trigger %s (%s)",
        cfg.trigger_block_id,
        "with tag filters" if poller.filtering else "no tag filters",
    )
    try:
        await poller.run_forever()
    finally:
        await client.aclose()


def main() -> None:
    configure_logging(CONFIG.log_level)
    missing = CONFIG.missing()
    if missing:
        logger.warning("Missing settings: %s", ", ".join(missing))
    try:
        asyncio.run(run(CONFIG))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
