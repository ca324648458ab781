from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    category: str = ""
    image_name: str | None = None

    @field_validator("image_name", mode="before")
    @classmethod
    def _empty_image_name(cls, value):
        # Documents written by older clients use "" for "no image"
        return value or None

    def to_document(self) -> dict:
        """Serialize for storage and responses, omitting an unset image."""
        return self.model_dump(exclude_none=True)


class Catalog(BaseModel):
    """Ordered collection of items, in the order they were added."""

    items: list[Item] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_ids(self) -> "Catalog":
        seen: set[str] = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"duplicate item id: {item.id}")
            seen.add(item.id)
        return self

    def with_item(self, item: Item) -> "Catalog":
        """Return a new catalog with ``item`` appended."""
        return Catalog(items=[*self.items, item])

    def to_document(self) -> dict:
        return {"items": [item.to_document() for item in self.items]}
