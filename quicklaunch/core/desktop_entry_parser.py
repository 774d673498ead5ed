import configparser
import os
from pathlib import Path

from logly import logger

from .entry_types import FALLBACK_ICON, CatalogueEntry, DesktopAction, EntryKind

_MAIN_SECTION = "Desktop Entry"


def strip_field_codes(command: str) -> str:
    """Removes desktop-entry placeholder tokens (`%f`, `%U`, ...) from a command.

    The filter is whole-token: arguments that merely contain `%` are kept.
    """
    return " ".join(arg for arg in command.split() if not arg.startswith("%"))


def split_list(value: str | None) -> list[str]:
    """Splits a semicolon-separated desktop-entry list, dropping empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(";") if item.strip()]


def current_locale() -> str:
    """Returns the locale used for localized keys (`LC_ALL`, `LC_MESSAGES`, `LANG`)."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var, "")
        if value:
            return value
    return ""


def locale_variants(locale: str) -> list[str]:
    """Expands a POSIX locale into the key suffixes to probe, most specific first.

    `de_DE.UTF-8@euro` yields `de_DE@euro`, `de_DE`, `de@euro`, `de`.
    """
    if not locale or locale in ("C", "POSIX"):
        return []

    base, _, modifier = locale.partition("@")
    base = base.partition(".")[0]
    lang, _, country = base.partition("_")

    variants: list[str] = []
    if country and modifier:
        variants.append(f"{lang}_{country}@{modifier}")
    if country:
        variants.append(f"{lang}_{country}")
    if modifier:
        variants.append(f"{lang}@{modifier}")
    if lang:
        variants.append(lang)
    return variants


def _localized(
    section: configparser.SectionProxy, key: str, variants: list[str]
) -> str | None:
    for variant in variants:
        value = section.get(f"{key}[{variant}]")
        if value:
            return value
    return section.get(key)


def _is_true(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


def _desktops(current_desktop: str) -> list[str]:
    return [d.upper() for d in current_desktop.split(":")]


def _shown_in_desktop(section: configparser.SectionProxy, current_desktop: str) -> bool:
    desktops = _desktops(current_desktop)

    only_show_in = section.get("OnlyShowIn")
    if only_show_in is not None:
        allowed = [d.upper() for d in split_list(only_show_in)]
        if not any(d in allowed for d in desktops):
            return False

    not_show_in = section.get("NotShowIn")
    if not_show_in is not None:
        excluded = [d.upper() for d in split_list(not_show_in)]
        if any(d in excluded for d in desktops):
            return False

    return True


def _read_keyfile(path: Path) -> configparser.ConfigParser | None:
    parser = configparser.ConfigParser(
        interpolation=None, strict=False, delimiters=("=",)
    )
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            parser.read_file(f)
    except (OSError, configparser.Error) as e:
        logger.debug(f"Skipping unreadable desktop file path={path} error={e}")
        return None
    return parser


def _parse_actions(parser: configparser.ConfigParser, value: str | None) -> list[DesktopAction]:
    actions: list[DesktopAction] = []
    for action_id in split_list(value):
        section_name = f"Desktop Action {action_id}"
        if not parser.has_section(section_name):
            continue
        section = parser[section_name]
        raw_exec = section.get("Exec")
        if not raw_exec:
            continue
        actions.append(
            DesktopAction(
                name=section.get("Name") or action_id,
                exec=strip_field_codes(raw_exec),
                icon=section.get("Icon") or None,
            )
        )
    return actions


def parse_desktop_file(
    path: str | Path,
    current_desktop: str | None = None,
    locale: str | None = None,
) -> CatalogueEntry | None:
    """Parses a `.desktop` descriptor into a catalogue entry.

    Args:
        path: Descriptor path.
        current_desktop: Colon-separated desktop names. Defaults to
            `XDG_CURRENT_DESKTOP`.
        locale: Locale for localized keys. Defaults to the process locale.

    Returns:
        The parsed entry, or None if the descriptor is malformed, hidden, or
        excluded for the current desktop environment.
    """
    path = Path(path)
    parser = _read_keyfile(path)
    if parser is None or not parser.has_section(_MAIN_SECTION):
        return None
    section = parser[_MAIN_SECTION]

    if current_desktop is None:
        current_desktop = os.environ.get("XDG_CURRENT_DESKTOP", "")
    if not _shown_in_desktop(section, current_desktop):
        return None

    if _is_true(section.get("NoDisplay")) or _is_true(section.get("Hidden")):
        return None
    entry_type = section.get("Type")
    if entry_type is not None and entry_type.strip() != "Application":
        return None

    variants = locale_variants(current_locale() if locale is None else locale)
    name = _localized(section, "Name", variants)
    if not name:
        return None

    description = (
        _localized(section, "Comment", variants)
        or _localized(section, "GenericName", variants)
        or ""
    )

    return CatalogueEntry(
        name=name,
        exec=strip_field_codes(section.get("Exec", "")),
        icon=section.get("Icon") or FALLBACK_ICON,
        description=description,
        path=str(path),
        kind=EntryKind.APPLICATION,
        keywords=split_list(_localized(section, "Keywords", variants)),
        categories=split_list(section.get("Categories")),
        terminal=_is_true(section.get("Terminal")),
        actions=_parse_actions(parser, section.get("Actions")),
    )
