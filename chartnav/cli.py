"""Command line interface for chartnav."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from .errors import ChartnavError, SettingsError
from .hierarchy import CONFIGURABLE_LEVELS
from .io_spec import load_spec
from .render import export_table, render_outline, tree_to_table
from .settings import (
    TOKEN_DESCRIPTIONS,
    default_settings,
    load_settings,
    prettify_token_tuples,
    save_settings,
)
from .tokens import author_description
from .tree import build_tree


def _parse_selections(items: Iterable[str]) -> dict[str, str]:
    selections: dict[str, str] = {}
    for item in items:
        level, sep, preset = item.partition("=")
        if not sep or not preset:
            raise SystemExit(f"--level-preset expects LEVEL=PRESET, got {item!r}")
        if level not in CONFIGURABLE_LEVELS:
            raise SystemExit(
                f"Unknown level {level!r}; choose from {', '.join(CONFIGURABLE_LEVELS)}"
            )
        selections[level] = preset
    return selections


def _load_tree(spec_path: Path):
    try:
        spec = load_spec(spec_path)
        return spec, build_tree(spec)
    except FileNotFoundError as exc:
        raise SystemExit(f"Spec file not found: {spec_path}") from exc
    except (ChartnavError, ValidationError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc


def cmd_tree(args: argparse.Namespace) -> None:
    spec, tree = _load_tree(args.spec)
    selections = _parse_selections(args.level_preset or [])
    try:
        settings = load_settings(args.settings) if args.settings else default_settings()
        outline = render_outline(tree, settings, selections)
    except ChartnavError as exc:
        raise SystemExit(str(exc)) from exc
    preface = author_description(spec)
    if preface:
        print(preface)
    print(outline)


def cmd_table(args: argparse.Namespace) -> None:
    _, tree = _load_tree(args.spec)
    if args.out is None:
        print(tree_to_table(tree).to_string(index=False))
        return
    try:
        path = export_table(tree, args.out)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    print(f"Table written to {path}")


def cmd_settings_init(args: argparse.Namespace) -> None:
    save_settings(default_settings(), args.out)
    print(f"Settings written to {args.out}")


def cmd_settings_show(args: argparse.Namespace) -> None:
    try:
        settings = load_settings(args.settings) if args.settings else default_settings()
    except SettingsError as exc:
        raise SystemExit(str(exc)) from exc
    for level, presets in settings.items():
        print(f"{level}:")
        for name, pairs in presets.items():
            print(f"  {name}: {prettify_token_tuples(pairs)}")
    print("tokens:")
    for token, text in TOKEN_DESCRIPTIONS.items():
        print(f"  {token}: {text}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Navigable text descriptions of charts for screen reader users"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log tree construction details."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_tree = subparsers.add_parser("tree", help="Print the accessibility tree")
    parser_tree.add_argument(
        "--spec", type=Path, required=True, help="Chart spec as .json or .yaml."
    )
    parser_tree.add_argument(
        "--settings", type=Path, help="YAML file with verbosity presets."
    )
    parser_tree.add_argument(
        "--level-preset",
        action="append",
        metavar="LEVEL=PRESET",
        help="Preset used for a hierarchy level, e.g. axis=low (repeatable).",
    )
    parser_tree.set_defaults(func=cmd_tree)

    parser_table = subparsers.add_parser("table", help="Show the chart's data table")
    parser_table.add_argument(
        "--spec", type=Path, required=True, help="Chart spec as .json or .yaml."
    )
    parser_table.add_argument(
        "--out", type=Path, help="Write the table to a .csv or .html file."
    )
    parser_table.set_defaults(func=cmd_table)

    parser_settings = subparsers.add_parser("settings", help="Verbosity presets")
    settings_subparsers = parser_settings.add_subparsers(
        dest="settings_command", required=True
    )
    parser_settings_init = settings_subparsers.add_parser(
        "init", help="Write the default presets to a YAML file"
    )
    parser_settings_init.add_argument(
        "--out", type=Path, default=Path("chartnav_settings.yaml")
    )
    parser_settings_init.set_defaults(func=cmd_settings_init)

    parser_settings_show = settings_subparsers.add_parser(
        "show", help="List the available presets"
    )
    parser_settings_show.add_argument("--settings", type=Path)
    parser_settings_show.set_defaults(func=cmd_settings_show)

    return parser


def main(argv: Iterable[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    args.func(args)


if __name__ == "__main__":
    main()
