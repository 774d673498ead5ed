import argparse
import sys
from collections.abc import Sequence

from PySide6.QtCore import QCoreApplication

from quicklaunch.application.launcher_controller import LauncherController
from quicklaunch.core.config import DmenuConfig, ResolvedSearchConfig, WebSearchConfig
from quicklaunch.logging import init_logger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="quicklaunch",
        description="Rank installed applications and files against a query.",
    )
    ap.add_argument("query", nargs="?", default="", help="search query (empty browses)")
    ap.add_argument("-d", "--dmenu", action="store_true", help="filter lines read from stdin")
    ap.add_argument("--max-results", type=int, default=50)
    ap.add_argument("--show-actions", action="store_true")
    ap.add_argument("--show-hidden", action="store_true")
    ap.add_argument("--no-calculator", action="store_true")
    ap.add_argument("--web-search", action="store_true")
    ap.add_argument("--allow-invalid", action="store_true")
    ap.add_argument("--case-sensitive", action="store_true")
    ap.add_argument("--launch", metavar="NAME", help="record a launch of NAME")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def config_from_args(args: argparse.Namespace) -> ResolvedSearchConfig:
    return ResolvedSearchConfig(
        max_results=max(0, args.max_results),
        show_actions=args.show_actions,
        calculator_enabled=not args.no_calculator,
        web_search=WebSearchConfig(enabled=args.web_search),
        dmenu=DmenuConfig(
            allow_invalid=args.allow_invalid, case_sensitive=args.case_sensitive
        ),
        show_hidden=args.show_hidden,
    )


def run_dmenu(controller: LauncherController, query: str) -> int:
    lines = [line.rstrip("\n") for line in sys.stdin]
    selected = controller.filter_dmenu(query, lines).result()
    for line in selected:
        print(line)
    return 0 if selected else 1


def run_launch(controller: LauncherController, name: str) -> int:
    controller.reload_catalogue().result()
    entry = controller.catalogue.get(name)
    if entry is None:
        print(f"unknown entry: {name}", file=sys.stderr)
        return 1
    print(controller.record_launch(entry))
    return 0


def run_search(controller: LauncherController, query: str) -> int:
    controller.reload_catalogue().result()
    for result in controller.search(query).result():
        print(f"{result.score}\t{result.entry.name}\t{result.entry.exec}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_logger(level="DEBUG" if args.verbose else "WARNING")

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    controller = LauncherController(config=config_from_args(args), parent=app)
    try:
        if args.dmenu:
            return run_dmenu(controller, args.query)
        if args.launch:
            return run_launch(controller, args.launch)
        return run_search(controller, args.query)
    finally:
        controller.shutdown(drain=True)


if __name__ == "__main__":
    sys.exit(main())
