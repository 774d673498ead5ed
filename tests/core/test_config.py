import pytest

from quicklaunch.core.config import (
    EngineKind,
    PresetEngine,
    ResolvedSearchConfig,
    SearchEngine,
    SearchPrefix,
)


def test_defaults_match_launcher_defaults() -> None:
    config = ResolvedSearchConfig()

    assert config.max_results == 50
    assert config.show_actions is False
    assert config.calculator_enabled is True
    assert config.web_search.enabled is False
    assert config.web_search.engine.resolve_url() == "https://duckduckgo.com/?q="
    assert config.dmenu.allow_invalid is False
    assert config.show_hidden is False


def test_preset_and_custom_engines_resolve_urls() -> None:
    assert (
        SearchEngine.preset(PresetEngine.GOOGLE).resolve_url()
        == "https://www.google.com/search?q="
    )
    custom = SearchEngine.custom("https://search.example.org/?q={}")
    assert custom.kind is EngineKind.CUSTOM
    assert custom.resolve_url() == "https://search.example.org/?q={}"


def test_engine_from_mapping_requires_tagged_form() -> None:
    assert SearchEngine.from_mapping({"preset": "Brave"}) == SearchEngine.preset(
        PresetEngine.BRAVE
    )
    assert SearchEngine.from_mapping({"custom": " https://x.test/?q= "}).url == (
        "https://x.test/?q="
    )

    with pytest.raises(ValueError):
        SearchEngine.from_mapping("google")
    with pytest.raises(ValueError):
        SearchEngine.from_mapping({"preset": "altavista"})
    with pytest.raises(ValueError):
        SearchEngine.from_mapping({"custom": ""})
    with pytest.raises(ValueError):
        SearchEngine.from_mapping({"preset": "google", "custom": "https://x"})


def test_from_mapping_reads_all_sections() -> None:
    config = ResolvedSearchConfig.from_mapping(
        {
            "window": {"max_entries": 10, "show_actions": True, "show_hidden": True},
            "calculator": {"enabled": False},
            "dmenu": {"allow_invalid": True, "case_sensitive": True},
            "web_search": {
                "enabled": True,
                "always_show": True,
                "engine": {"preset": "startpage"},
                "prefixes": [{"prefix": "gh", "url": "https://github.com/search?q="}],
            },
        }
    )

    assert config.max_results == 10
    assert config.show_actions is True
    assert config.show_hidden is True
    assert config.calculator_enabled is False
    assert config.dmenu.allow_invalid is True
    assert config.dmenu.case_sensitive is True
    assert config.web_search.enabled is True
    assert config.web_search.always_show is True
    assert config.web_search.engine.engine is PresetEngine.STARTPAGE
    assert config.web_search.find_prefix("gh") == SearchPrefix(
        prefix="gh", url="https://github.com/search?q="
    )
    assert config.web_search.find_prefix("yt") is None


def test_from_mapping_rejects_invalid_shapes() -> None:
    with pytest.raises(ValueError):
        ResolvedSearchConfig.from_mapping({"window": []})
    with pytest.raises(ValueError):
        ResolvedSearchConfig.from_mapping({"window": {"max_entries": "ten"}})
    with pytest.raises(ValueError):
        ResolvedSearchConfig.from_mapping({"window": {"max_entries": -1}})
    with pytest.raises(ValueError):
        ResolvedSearchConfig.from_mapping({"web_search": {"prefixes": [{"prefix": "gh"}]}})


def test_from_mapping_with_empty_mapping_uses_defaults() -> None:
    assert ResolvedSearchConfig.from_mapping({}) == ResolvedSearchConfig()
