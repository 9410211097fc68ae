import copy
from typing import Any

import pytest

from domain.repository import NotionRecipeRepository


def todo(id: str, label: str, checked: bool = False) -> dict[str, Any]:
    return {
        "object": "block",
        "id": id,
        "type": "to_do",
        "to_do": {
            "checked": checked,
            "rich_text": [{"type": "text", "plain_text": label}],
        },
    }


def paragraph(id: str, mention: str | None = None) -> dict[str, Any]:
    runs: list[dict[str, Any]] = [{"type": "text", "plain_text": "Tonight: "}]
    if mention is not None:
        runs.append({"type": "mention", "mention": {"type": "page", "page": {"id": mention}}})
    return {"object": "block", "id": id, "type": "paragraph", "paragraph": {"rich_text": runs}}


def recipe_page(id: str, *tags: str) -> dict[str, Any]:
    return {
        "object": "page",
        "id": id,
        "properties": {
            "Name": {"type": "title", "title": [{"plain_text": id.upper()}]},
            "Tags": {"type": "multi_select", "multi_select": [{"name": t} for t in tags]},
        },
    }


def database(*tags: str) -> dict[str, Any]:
    return {
        "object": "database",
        "id": "db",
        "properties": {
            "Tags": {
                "type": "multi_select",
                "multi_select": {"options": [{"name": t} for t in tags]},
            }
        },
    }


class FakeNotion:
    """In-memory stand in for ``notion.NotionClient``."""

    def __init__(self, *, page_size: int = 2) -> None:
        self.page_size = page_size
        self.blocks: dict[str, dict[str, Any]] = {}
        self.children: dict[str, list[dict[str, Any]]] = {}
        self.pages: list[dict[str, Any]] = []
        self.schema: dict[str, Any] = database()
        self.calls: list[tuple[str, str]] = []
        self.fail: dict[str, Exception] = {}
        self.fail_once: dict[str, Exception] = {}
        self.fail_children_after: int | None = None
        self._next_id = 0

    def _call(self, name: str, id: str) -> None:
        self.calls.append((name, id))
        if name in self.fail:
            raise self.fail[name]
        if name in self.fail_once:
            raise self.fail_once.pop(name)

    def count(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)

    def _page(self, items: list[dict[str, Any]], cursor: str | None) -> dict[str, Any]:
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        more = end < len(items)
        return {
            "results": copy.deepcopy(items[start:end]),
            "has_more": more,
            "next_cursor": str(end) if more else None,
        }

    async def retrieve_block(self, block_id: str) -> dict[str, Any]:
        self._call("retrieve_block", block_id)
        return copy.deepcopy(self.blocks[block_id])

    async def update_block(self, block_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        self._call("update_block", block_id)
        block = self.blocks[block_id]
        for kind, body in patch.items():
            body = copy.deepcopy(body)
            for run in body.get("rich_text", []):
                if run.get("type") == "text":
                    run["plain_text"] = run["text"]["content"]
            block[kind].update(body)
        return copy.deepcopy(block)

    async def query_database(self, database_id: str, cursor: str | None = None) -> dict[str, Any]:
        self._call("query_database", database_id)
        return self._page(self.pages, cursor)

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        self._call("retrieve_database", database_id)
        return copy.deepcopy(self.schema)

    async def list_children(self, block_id: str, cursor: str | None = None) -> dict[str, Any]:
        self._call("list_children", block_id)
        if self.fail_children_after is not None and int(cursor or 0) >= self.fail_children_after:
            raise RuntimeError("children page failed")
        return self._page(self.children.get(block_id, []), cursor)

    async def append_children(self, block_id: str, children: list[dict[str, Any]]) -> None:
        self._call("append_children", block_id)
        for child in copy.deepcopy(children):
            self._next_id += 1
            child["id"] = f"new-{self._next_id}"
            for run in child["to_do"]["rich_text"]:
                run["plain_text"] = run["text"]["content"]
            self.children.setdefault(block_id, []).append(child)

    def label(self, block_id: str) -> str:
        runs = self.blocks[block_id]["to_do"]["rich_text"]
        return "".join(r["plain_text"] for r in runs)


class FakeTimer:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def notion() -> FakeNotion:
    fake = FakeNotion()
    fake.blocks["trigger"] = todo("trigger", "Pick a recipe", checked=True)
    fake.blocks["selection"] = paragraph("selection", mention="r1")
    fake.pages = [recipe_page("r1"), recipe_page("r2"), recipe_page("r3")]
    return fake


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


def make_repository(fake: FakeNotion, filter_list: str | None = None) -> NotionRecipeRepository:
    return NotionRecipeRepository(
        fake,  # pyright: ignore[reportArgumentType]
        recipes_database_id="db",
        trigger_block_id="trigger",
        selection_block_id="selection",
        filter_list_block_id=filter_list,
    )
