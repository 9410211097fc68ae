from typing import Any


PROCESSING_SUFFIX = " (choosing random recipe, will uncheck when finished...)"


def rich_text(block_body: dict[str, Any]) -> list[dict[str, Any]]:
    # Payloads from before the 2022 API version call this "text".
    runs = block_body.get("rich_text")
    if runs is None:
        runs = block_body.get("text")
    return runs or []


def plain_text(runs: list[dict[str, Any]]) -> str:
    return "".join(r.get("plain_text", "") for r in runs)


def text_runs(content: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


def page_mention(page_id: str) -> list[dict[str, Any]]:
    return [{"type": "mention", "mention": {"type": "page", "page": {"id": page_id}}}]


def mentioned_page_id(block: dict[str, Any]) -> str | None:
    """Id of the first page mentioned in a paragraph block, if any."""
    paragraph = block.get("paragraph")
    if not paragraph:
        return None
    for run in rich_text(paragraph):
        page = (run.get("mention") or {}).get("page")
        if page:
            return page["id"]
    return None


class Recipe:
    def __init__(self, *, id: str, name: str = "", tags: frozenset[str]) -> None:
        self.id = id
        self.name = name
        self.tags = tags

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, name={self.name})>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Recipe) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def from_page(cls, page: dict[str, Any], *, tags_property: str = "Tags") -> "Recipe":
        properties = page.get("properties", {})
        tags_prop = properties.get(tags_property) or {}
        tags = frozenset(opt["name"] for opt in tags_prop.get("multi_select") or [])
        name = ""
        for prop in properties.values():
            if prop.get("type") == "title":
                name = plain_text(prop.get("title") or [])
                break
        return cls(id=page["id"], name=name, tags=tags)


class Trigger:
    """The to-do block that starts a selection cycle."""

    def __init__(self, *, id: str, checked: bool, label: str) -> None:
        self.id = id
        self.checked = checked
        self.label = label

    @classmethod
    def from_block(cls, block: dict[str, Any]) -> "Trigger":
        to_do = block["to_do"]
        return cls(
            id=block["id"],
            checked=bool(to_do.get("checked")),
            label=plain_text(rich_text(to_do)),
        )


class FilterTag:
    def __init__(self, *, id: str, label: str, checked: bool) -> None:
        self.id = id
        self.label = label
        self.checked = checked

    def __repr__(self) -> str:
        return f"<FilterTag(label={self.label}, checked={self.checked})>"

    @classmethod
    def from_block(cls, block: dict[str, Any]) -> "FilterTag":
        to_do = block["to_do"]
        return cls(
            id=block["id"],
            label=plain_text(rich_text(to_do)),
            checked=bool(to_do.get("checked")),
        )

    @staticmethod
    def new_block(label: str) -> dict[str, Any]:
        return {
            "object": "block",
            "type": "to_do",
            "to_do": {"rich_text": text_runs(label), "checked": False},
        }


def active_labels(tags: list[FilterTag]) -> set[str]:
    return {t.label for t in tags if t.checked}


def schema_tag_names(database: dict[str, Any], *, tags_property: str = "Tags") -> list[str]:
    """Option names of the tags multi-select, in the order Notion lists them."""
    prop = database.get("properties", {}).get(tags_property) or {}
    options = (prop.get("multi_select") or {}).get("options") or []
    return [opt["name"] for opt in options]
