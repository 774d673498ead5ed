from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Final

FALLBACK_ICON: Final[str] = "application-x-executable"


class EntryKind(Enum):
    """Determines how a selected entry is launched downstream."""

    APPLICATION = "application"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class DesktopAction:
    """A sub-launcher exposed by a descriptor (e.g. "New Window").

    Attributes:
        name: Display name of the action.
        exec: Command line with placeholder tokens removed.
        icon: Optional icon id overriding the parent's icon.
    """

    name: str
    exec: str
    icon: str | None = None


@dataclass(slots=True)
class CatalogueEntry:
    """One indexable application launcher or filesystem object.

    `launch_count` and `last_used` are a denormalized copy of the usage store and
    are updated in place by the catalogue after a launch.
    """

    name: str
    exec: str = ""
    icon: str = FALLBACK_ICON
    description: str = ""
    path: str = ""
    kind: EntryKind = EntryKind.APPLICATION
    launch_count: int = 0
    last_used: int | None = None
    score_boost: int = 0
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    terminal: bool = False
    actions: list[DesktopAction] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FILE and self.icon == "folder"

    def copy(self, **changes) -> "CatalogueEntry":
        """Returns an independent copy, optionally overriding fields."""
        values = {
            "keywords": list(self.keywords),
            "categories": list(self.categories),
            "actions": list(self.actions),
        }
        values.update(changes)
        return replace(self, **values)


@dataclass(frozen=True, slots=True)
class UsageRecord:
    """Persisted launch statistics for one entry name."""

    count: int
    last_used: int


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A ranked result. `entry` is a copy owned by the caller."""

    entry: CatalogueEntry
    score: int
