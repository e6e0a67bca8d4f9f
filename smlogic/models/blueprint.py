"""Wire format documents: the blueprint body and its description file."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Blueprint format revision understood by the game
BLUEPRINT_VERSION = 4

NO_DESCRIPTION = "#{STEAM_WORKSHOP_NO_DESCRIPTION}"


class Body(BaseModel):
    # child records are produced by each unit's own build hook
    childs: list[dict[str, Any]] = Field(default_factory=list)


class Blueprint(BaseModel):
    bodies: list[Body] = Field(default_factory=list)
    version: int = BLUEPRINT_VERSION

    @classmethod
    def from_childs(cls, childs: list[dict[str, Any]]) -> Blueprint:
        return cls(bodies=[Body(childs=childs)])

    def units_count(self) -> int:
        return sum(len(body.childs) for body in self.bodies)


class BlueprintDescription(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str = NO_DESCRIPTION
    local_id: str = Field(alias="localId")
    name: str
    type: str = "Blueprint"
    version: int = 0

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
