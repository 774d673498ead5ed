from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PresetEngine(Enum):
    DUCKDUCKGO = "duckduckgo"
    GOOGLE = "google"
    BING = "bing"
    BRAVE = "brave"
    ECOSIA = "ecosia"
    STARTPAGE = "startpage"


_PRESET_URLS: dict[PresetEngine, str] = {
    PresetEngine.DUCKDUCKGO: "https://duckduckgo.com/?q=",
    PresetEngine.GOOGLE: "https://www.google.com/search?q=",
    PresetEngine.BING: "https://www.bing.com/search?q=",
    PresetEngine.BRAVE: "https://search.brave.com/search?q=",
    PresetEngine.ECOSIA: "https://www.ecosia.org/search?q=",
    PresetEngine.STARTPAGE: "https://www.startpage.com/do/search?q=",
}


class EngineKind(Enum):
    PRESET = "preset"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class SearchEngine:
    """Web search engine, either a known preset or a custom URL template.

    Use `SearchEngine.preset(...)` or `SearchEngine.custom(...)` rather than the
    constructor so that exactly one of `engine` / `url` is set.
    """

    kind: EngineKind
    engine: PresetEngine | None = None
    url: str = ""

    @classmethod
    def preset(cls, engine: PresetEngine) -> "SearchEngine":
        return cls(kind=EngineKind.PRESET, engine=engine)

    @classmethod
    def custom(cls, url: str) -> "SearchEngine":
        return cls(kind=EngineKind.CUSTOM, url=url)

    def resolve_url(self) -> str:
        """Returns the URL template the search term is appended to."""
        if self.kind is EngineKind.PRESET:
            return _PRESET_URLS[self.engine or PresetEngine.DUCKDUCKGO]
        return self.url

    @classmethod
    def from_mapping(cls, value: object) -> "SearchEngine":
        """Parses `{"preset": "<name>"}` or `{"custom": "<url>"}`.

        Raises:
            ValueError: If the value is not exactly one of the tagged forms.
        """
        if not isinstance(value, Mapping) or len(value) != 1:
            raise ValueError(
                "web_search.engine must be {'preset': name} or {'custom': url}"
            )
        (tag, payload), = value.items()
        if tag == "preset":
            try:
                return cls.preset(PresetEngine(str(payload).lower()))
            except ValueError:
                names = ", ".join(e.value for e in PresetEngine)
                raise ValueError(
                    f"unknown preset engine {payload!r} (expected one of: {names})"
                ) from None
        if tag == "custom":
            if not isinstance(payload, str) or not payload.strip():
                raise ValueError("custom engine url must be a non-empty string")
            return cls.custom(payload.strip())
        raise ValueError(f"unknown engine tag {tag!r}")


def _default_engine() -> SearchEngine:
    return SearchEngine.preset(PresetEngine.DUCKDUCKGO)


@dataclass(frozen=True, slots=True)
class SearchPrefix:
    """A `prefix:term` shortcut mapped to a URL template (e.g. "gh")."""

    prefix: str
    url: str


@dataclass(frozen=True, slots=True)
class WebSearchConfig:
    enabled: bool = False
    engine: SearchEngine = field(default_factory=_default_engine)
    prefixes: tuple[SearchPrefix, ...] = ()
    always_show: bool = False

    def find_prefix(self, prefix: str) -> SearchPrefix | None:
        for item in self.prefixes:
            if item.prefix == prefix:
                return item
        return None


@dataclass(frozen=True, slots=True)
class DmenuConfig:
    allow_invalid: bool = False
    case_sensitive: bool = False


@dataclass(frozen=True, slots=True)
class ResolvedSearchConfig:
    """Read-only configuration snapshot consumed by the ranking engine.

    Attributes:
        max_results: Upper bound on the number of results per query.
        show_actions: Whether desktop actions are matched as separate results.
        calculator_enabled: Whether digit-leading queries may be evaluated.
        web_search: Web search fallback settings.
        dmenu: Dmenu filter settings.
        show_hidden: Whether path mode lists dotfiles.
    """

    max_results: int = 50
    show_actions: bool = False
    calculator_enabled: bool = True
    web_search: WebSearchConfig = field(default_factory=WebSearchConfig)
    dmenu: DmenuConfig = field(default_factory=DmenuConfig)
    show_hidden: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ResolvedSearchConfig":
        """Builds a snapshot from an already-parsed configuration mapping.

        Missing sections and keys keep their defaults.

        Raises:
            ValueError: If a section or value has the wrong shape.
        """
        window = _section(data, "window")
        calculator = _section(data, "calculator")
        dmenu = _section(data, "dmenu")
        web = _section(data, "web_search")

        max_results = window.get("max_entries", 50)
        if isinstance(max_results, bool) or not isinstance(max_results, int):
            raise ValueError("window.max_entries must be an integer")
        if max_results < 0:
            raise ValueError("window.max_entries must not be negative")

        prefixes: list[SearchPrefix] = []
        for item in web.get("prefixes", []) or []:
            if not isinstance(item, Mapping) or "prefix" not in item or "url" not in item:
                raise ValueError("web_search.prefixes entries need 'prefix' and 'url'")
            prefixes.append(SearchPrefix(prefix=str(item["prefix"]), url=str(item["url"])))

        engine = (
            SearchEngine.from_mapping(web["engine"])
            if "engine" in web
            else _default_engine()
        )

        return cls(
            max_results=max_results,
            show_actions=bool(window.get("show_actions", False)),
            calculator_enabled=bool(calculator.get("enabled", True)),
            web_search=WebSearchConfig(
                enabled=bool(web.get("enabled", False)),
                engine=engine,
                prefixes=tuple(prefixes),
                always_show=bool(web.get("always_show", False)),
            ),
            dmenu=DmenuConfig(
                allow_invalid=bool(dmenu.get("allow_invalid", False)),
                case_sensitive=bool(dmenu.get("case_sensitive", False)),
            ),
            show_hidden=bool(window.get("show_hidden", False)),
        )


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"[{name}] must be a table")
    return value
