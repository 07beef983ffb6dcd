from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Direction = Literal["up", "down"]

UP: Direction = "up"
DOWN: Direction = "down"

# Pointer value stored when nothing is applied.
NO_VERSION = "0"


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    identifier: str
    direction: Direction

    def as_tuple(self) -> tuple[str, str]:
        return (self.identifier, self.direction)

    def __str__(self) -> str:
        return f"{self.direction} {self.identifier}"
