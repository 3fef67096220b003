from dataclasses import dataclass
from enum import StrEnum


class Category(StrEnum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"


@dataclass(frozen=True)
class Candidate:
    id: str
    first_name: str
    last_name: str
    category: Category
    team: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def search_name(self) -> str:
        return self.display_name.lower()

    @property
    def label(self) -> str:
        if self.team:
            return f"{self.display_name} ({self.team})"
        return self.display_name


@dataclass(frozen=True)
class FilterState:
    name_query: str = ""
    category: Category | None = None
