import pytest

from quicklaunch.core.catalogue import Catalogue
from quicklaunch.core.config import ResolvedSearchConfig
from quicklaunch.core.entry_types import CatalogueEntry
from quicklaunch.core.query_router import QueryMode, QueryRouter, classify_query
from quicklaunch.core.scoring import RUNNING_PENALTY
from quicklaunch.core.usage_store import UsageStore


@pytest.mark.parametrize(
    ("query", "mode"),
    [
        ("", QueryMode.BROWSE),
        ("~", QueryMode.PATH),
        ("~/Documents", QueryMode.PATH),
        ("$HOME", QueryMode.PATH),
        ("/usr", QueryMode.PATH),
        ("firefox", QueryMode.FUZZY),
        ("2+2", QueryMode.FUZZY),
        (" /usr", QueryMode.FUZZY),
    ],
)
def test_classify_query(query: str, mode: QueryMode) -> None:
    assert classify_query(query) is mode


@pytest.fixture
def catalogue(tmp_path, write_desktop, make_desktop_text, monkeypatch) -> Catalogue:
    monkeypatch.setenv("LANG", "C")
    monkeypatch.delenv("LC_ALL", raising=False)
    monkeypatch.delenv("LC_MESSAGES", raising=False)
    monkeypatch.delenv("XDG_CURRENT_DESKTOP", raising=False)
    apps = tmp_path / "apps"
    write_desktop("firefox.desktop", make_desktop_text("Firefox", Icon="firefox"), apps)
    write_desktop("files.desktop", make_desktop_text("Files", Icon="nautilus"), apps)
    catalogue = Catalogue(UsageStore(tmp_path / "heatmap.json"))
    catalogue.reload([apps])
    return catalogue


def test_browse_mode_lists_applications(catalogue) -> None:
    router = QueryRouter(catalogue, make_file_entry=lambda p: None)

    results = router.run("", ResolvedSearchConfig())

    assert [r.entry.name for r in results] == ["Files", "Firefox"]


def test_fuzzy_mode_applies_window_probe_once(catalogue) -> None:
    calls: list[int] = []

    def window_classes() -> list[str]:
        calls.append(1)
        return ["firefox"]

    router = QueryRouter(catalogue, make_file_entry=lambda p: None, window_classes=window_classes)
    quiet = QueryRouter(catalogue, make_file_entry=lambda p: None)

    penalized = router.run("fi", ResolvedSearchConfig())
    plain = quiet.run("fi", ResolvedSearchConfig())

    assert calls == [1]
    scores = {r.entry.name: r.score for r in penalized}
    plain_scores = {r.entry.name: r.score for r in plain}
    assert plain_scores["Firefox"] - scores["Firefox"] == RUNNING_PENALTY
    assert plain_scores["Files"] == scores["Files"]


def test_path_mode_uses_file_entry_factory(catalogue, tmp_path) -> None:
    (tmp_path / "apps" / "extra.txt").write_text("x", encoding="utf-8")
    seen: list[str] = []

    def make_entry(path: str) -> CatalogueEntry:
        seen.append(path)
        return CatalogueEntry(name=path.rsplit("/", 1)[-1], path=path)

    router = QueryRouter(catalogue, make_file_entry=make_entry)
    results = router.run(f"{tmp_path}/apps/extr", ResolvedSearchConfig())

    assert [r.entry.name for r in results] == ["..", "extra.txt"]
    assert f"{tmp_path}/apps/extra.txt" in seen


def test_fuzzy_mode_uses_binary_probe_and_calculator(catalogue) -> None:
    router = QueryRouter(
        catalogue,
        make_file_entry=lambda p: None,
        find_binary=lambda q: None,
        evaluate=lambda q: "42",
    )

    results = router.run("6*7", ResolvedSearchConfig())

    assert [r.entry.name for r in results] == ["42"]
