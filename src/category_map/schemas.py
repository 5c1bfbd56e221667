from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PATH_SEPARATOR = "/"


class DTOBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Category(DTOBase):
    id: int = Field(gt=0)
    parent_id: int | None = Field(default=None, gt=0)
    name: str
    path: str
    level: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("category name must not be empty")
        return normalized

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> str:
        return str(value or "").strip().strip(PATH_SEPARATOR)

    @model_validator(mode="after")
    def validate_path(self) -> Category:
        segments = split_path(self.path)
        if segments[-1] != self.id:
            raise ValueError("category path must end with the category id")
        if self.parent_id is not None:
            if len(segments) < 2 or segments[-2] != self.parent_id:
                raise ValueError("category path must include parent_id before id")
        self.level = len(segments) - 1
        return self

    @property
    def ancestor_ids(self) -> list[int]:
        return split_path(self.path)[:-1]


def split_path(path: str) -> list[int]:
    """Parse a materialized path like ``1/2/5`` into its ids, root first."""
    raw_segments = path.split(PATH_SEPARATOR) if path else []
    if not raw_segments:
        raise ValueError("category path must not be empty")

    segments: list[int] = []
    for raw in raw_segments:
        if not raw.isdigit() or int(raw) < 1:
            raise ValueError(f"invalid category path segment: {raw!r}")
        segments.append(int(raw))
    return segments


def join_path(parent_path: str | None, category_id: int) -> str:
    if not parent_path:
        return str(category_id)
    return f"{parent_path}{PATH_SEPARATOR}{category_id}"
