"""CLI entry point for nutritrack."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from .config import NutritrackConfig, load_config
from .db import CustomFoodsDB, FoodLogDB, GoalsDB, RecentFoodsDB
from .models import MEALS, FoodRecord, Servings
from .nutrition.calculator import (
    daily_totals,
    goals_from_profile,
    make_logged_entry,
    meal_totals,
    period_dates,
    progress,
    summarize_period,
)
from .nutrition.portions import portion_presets, servings_for_amount, step_size
from .nutrition.ranking import query_terms, relevance_score
from .nutrition.units import (
    convert_unit,
    format_conversion_factor,
    get_compatible_units,
    normalize_unit,
    parse_amount,
    unit_display_name,
)
from .nutrition.validator import nutrition_confidence
from .sources import SourceError, make_custom_food, parse_product, search_candidates
from .sources.custom import is_custom_id

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="nutritrack",
        description="Food search normalization, portion math and a local food log",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )

    sub = parser.add_subparsers(dest="command")

    # search
    search_parser = sub.add_parser("search", help="Validate and rank a saved FDC search response")
    search_parser.add_argument("file", help="FDC /foods/search JSON ('-' for stdin)")
    search_parser.add_argument("query", help="The search query")
    search_parser.add_argument("--json", action="store_true", help="Print JSON")

    # barcode
    barcode_parser = sub.add_parser("barcode", help="Read a saved Open Food Facts product response")
    barcode_parser.add_argument("file", help="Product JSON ('-' for stdin)")
    barcode_parser.add_argument("code", help="The scanned barcode")
    barcode_parser.add_argument("--json", action="store_true", help="Print JSON")

    # convert
    convert_parser = sub.add_parser("convert", help="Convert an amount between units")
    convert_parser.add_argument("value", type=float)
    convert_parser.add_argument("from_unit")
    convert_parser.add_argument("to_unit")

    # presets
    presets_parser = sub.add_parser("presets", help="Show portion presets for a food")
    presets_parser.add_argument("food", help="Food id (custom/recent) or food JSON file")

    # custom
    custom_parser = sub.add_parser("custom", help="Manage custom foods")
    custom_sub = custom_parser.add_subparsers(dest="custom_command")
    custom_add = custom_sub.add_parser("add", help="Create a custom food")
    custom_add.add_argument("name")
    for nutrient in ("calories", "protein", "carbs", "fat", "fiber"):
        custom_add.add_argument(f"--{nutrient}", type=float, default=0.0)
    custom_add.add_argument("--serving-size", type=float, default=1.0)
    custom_add.add_argument("--serving-unit", default="serving")
    custom_add.add_argument("--brand", default=None)
    custom_list = custom_sub.add_parser("list", help="List custom foods")
    custom_list.add_argument("query", nargs="?", default=None)
    custom_delete = custom_sub.add_parser("delete", help="Delete a custom food")
    custom_delete.add_argument("food_id")

    # log
    log_parser = sub.add_parser("log", help="Log a food")
    log_parser.add_argument("food", help="Food id (custom/recent) or food JSON file")
    amount_group = log_parser.add_mutually_exclusive_group()
    amount_group.add_argument("--servings", type=float, default=None)
    amount_group.add_argument("--amount", type=str, default=None, help='e.g. "1/2 cup"')
    log_parser.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")
    log_parser.add_argument("--meal", choices=MEALS, default="snacks")

    # day
    day_parser = sub.add_parser("day", help="Show a day's log and goal progress")
    day_parser.add_argument("--date", default=None)
    day_parser.add_argument("--json", action="store_true", help="Print JSON")

    # copy
    copy_parser = sub.add_parser("copy", help="Copy a day's entries to another day")
    copy_parser.add_argument("--from", dest="source_date", required=True)
    copy_parser.add_argument("--to", dest="target_date", default=None)

    # summary
    summary_parser = sub.add_parser("summary", help="Weekly or monthly summary")
    summary_parser.add_argument("view", choices=("weekly", "monthly"))
    summary_parser.add_argument("--json", action="store_true", help="Print JSON")

    # goals
    goals_parser = sub.add_parser("goals", help="Show, set or calculate daily goals")
    for nutrient in ("calories", "protein", "carbs", "fat", "fiber"):
        goals_parser.add_argument(f"--{nutrient}", type=float, default=None)
    goals_parser.add_argument("--weight", type=float, default=None, help="kg")
    goals_parser.add_argument("--height", type=float, default=None, help="cm")
    goals_parser.add_argument("--age", type=float, default=None)
    goals_parser.add_argument("--sex", choices=("male", "female"), default="female")
    goals_parser.add_argument("--activity", default="sedentary")
    goals_parser.add_argument("--goal-type", default="balanced")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    config = load_config(args.config or os.environ.get("NUTRITRACK_CONFIG"))
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Using database %s", config.database.path)

    try:
        match args.command:
            case "search":
                _cmd_search(config, args)
            case "barcode":
                _cmd_barcode(config, args)
            case "convert":
                _cmd_convert(args)
            case "presets":
                _cmd_presets(config, args)
            case "custom":
                _cmd_custom(config, args, custom_parser)
            case "log":
                _cmd_log(config, args)
            case "day":
                _cmd_day(config, args)
            case "copy":
                _cmd_copy(config, args)
            case "summary":
                _cmd_summary(config, args)
            case "goals":
                _cmd_goals(config, args)
    except (SourceError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _read_json(path: str):
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _fmt(x: float) -> str:
    return f"{x:.1f}".rstrip("0").rstrip(".")


def _resolve_food(config: NutritrackConfig, ref: str) -> FoodRecord:
    """Find a food by id in custom/recent foods, or load it from a JSON file."""
    if Path(ref).is_file():
        return FoodRecord.from_dict(_read_json(ref))

    if is_custom_id(ref):
        customs = CustomFoodsDB(config.database.path)
        try:
            food = customs.get(ref)
        finally:
            customs.close()
        if food is not None:
            return food

    recents = RecentFoodsDB(config.database.path, max_items=config.recent.max_items)
    try:
        for food in recents.get_all():
            if food.source_id == ref:
                return food
    finally:
        recents.close()

    raise ValueError(f"Unknown food {ref!r} (not a custom or recent food, nor a file)")


def _cmd_search(config: NutritrackConfig, args) -> None:
    payload = _read_json(args.file)
    results = search_candidates(
        payload, args.query, min_query_length=config.search.min_query_length
    )[: config.search.page_size]

    if args.json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return

    if not results:
        print("No foods found.")
        return

    terms = query_terms(args.query)
    print(f"🔍 {len(results)} foods for {args.query!r}:")
    for r in results:
        brand = f" [{r.brand_name}]" if r.brand_name else ""
        print(
            f"  {relevance_score(r, terms):6.1f}  {r.name}{brand}  "
            f"{_fmt(r.calories)} kcal / {_fmt(r.serving_size)} {unit_display_name(r.serving_unit)}"
            f"  (id {r.source_id}, confidence {nutrition_confidence(r)})"
        )


def _cmd_barcode(config: NutritrackConfig, args) -> None:
    food = parse_product(_read_json(args.file), args.code)
    if food is None:
        print(f"Barcode {args.code} not found in database. Try manual search.", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(food.to_dict(), ensure_ascii=False, indent=2))
        return

    brand = f" [{food.brand_name}]" if food.brand_name else ""
    print(f"{food.name}{brand}  (id {food.source_id})")
    print(
        f"  per {_fmt(food.serving_size)} {food.serving_unit}: {_fmt(food.calories)} kcal, "
        f"P {_fmt(food.protein)} g, C {_fmt(food.carbs)} g, F {_fmt(food.fat)} g"
    )


def _cmd_convert(args) -> None:
    result = convert_unit(args.value, args.from_unit, args.to_unit)
    if result is None:
        print(
            f"Cannot convert {args.from_unit} to {args.to_unit} "
            f"(try: {', '.join(get_compatible_units(args.from_unit))})",
            file=sys.stderr,
        )
        sys.exit(1)
    factor = format_conversion_factor(convert_unit(1, args.from_unit, args.to_unit))
    print(
        f"{_fmt(args.value)} {normalize_unit(args.from_unit)} = "
        f"{result:.4g} {normalize_unit(args.to_unit)}  ({factor})"
    )


def _cmd_presets(config: NutritrackConfig, args) -> None:
    food = _resolve_food(config, args.food)
    print(f"{food.name}: 1 serving = {_fmt(food.serving_size)} {food.serving_unit}")
    for p in portion_presets(food):
        servings = servings_for_amount(food, p.amount, p.unit)
        multiplier = f"{servings.value:.2f} servings" if servings else "n/a"
        print(f"  {p.label:<6} {_fmt(p.amount)} {p.unit:<6} → {multiplier}")
    units = ", ".join(get_compatible_units(food.serving_unit))
    print(f"  units: {units}  (step {step_size(food.serving_unit)})")


def _cmd_custom(config: NutritrackConfig, args, custom_parser) -> None:
    db = CustomFoodsDB(config.database.path)
    try:
        match args.custom_command:
            case "add":
                food = make_custom_food(
                    args.name,
                    calories=args.calories,
                    protein=args.protein,
                    carbs=args.carbs,
                    fat=args.fat,
                    fiber=args.fiber,
                    serving_size=args.serving_size,
                    serving_unit=args.serving_unit,
                    brand_name=args.brand,
                )
                db.add(food)
                print(f"Created custom food {food.name!r} (id {food.source_id})")
            case "list":
                foods = db.search(args.query)
                if not foods:
                    print("No custom foods.")
                for f in foods:
                    print(f"  {f.source_id}  {f.name}  {_fmt(f.calories)} kcal")
            case "delete":
                db.delete(args.food_id)
                print(f"Deleted {args.food_id}")
            case _:
                custom_parser.print_help()
                sys.exit(1)
    finally:
        db.close()


def _cmd_log(config: NutritrackConfig, args) -> None:
    food = _resolve_food(config, args.food)

    if args.amount:
        amount, unit = parse_amount(args.amount)
        servings = servings_for_amount(food, amount, unit or food.serving_unit)
        if servings is None:
            raise ValueError(
                f"Cannot log {args.amount!r}: {food.name} is measured in {food.serving_unit}"
            )
    else:
        servings = Servings(args.servings if args.servings is not None else 1.0)

    entry = make_logged_entry(
        food, servings, args.date or date.today().isoformat(), args.meal
    )

    log_db = FoodLogDB(config.database.path)
    recents = RecentFoodsDB(config.database.path, max_items=config.recent.max_items)
    try:
        log_db.add_entry(entry)
        recents.add(food)
    finally:
        log_db.close()
        recents.close()

    print(
        f"Logged {food.name} × {servings.value:.2f} to {entry.meal} on {entry.date}: "
        f"{_fmt(entry.calories)} kcal"
    )


def _cmd_day(config: NutritrackConfig, args) -> None:
    day = args.date or date.today().isoformat()
    log_db = FoodLogDB(config.database.path)
    goals_db = GoalsDB(config.database.path, defaults=config.goals)
    try:
        entries = log_db.get_entries(day)
        goals = goals_db.get()
    finally:
        log_db.close()
        goals_db.close()

    totals = daily_totals(entries, day)
    pct = progress(totals, goals)

    if args.json:
        data = {
            "date": day,
            "entries": [
                {
                    "id": e.entry_id,
                    "meal": e.meal,
                    "food": e.food.to_dict(),
                    "quantity": e.quantity,
                    **e.nutrients.as_dict(),
                }
                for e in entries
            ],
            "totals": totals.as_dict(),
            "goals": goals.as_dict(),
            "progress": {k: round(v, 1) for k, v in pct.items()},
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    print(f"📅 {day}")
    by_meal = meal_totals(entries)
    for meal in MEALS:
        meal_entries = [e for e in entries if e.meal == meal]
        if not meal_entries:
            continue
        print(f"  {meal} ({_fmt(by_meal[meal].calories)} kcal)")
        for e in meal_entries:
            print(f"    #{e.entry_id} {e.food.name} × {e.quantity:.2f}  {_fmt(e.calories)} kcal")
    for key, value in totals.as_dict().items():
        print(f"  {key:<8} {_fmt(value):>7} / {_fmt(getattr(goals, key)):<7} {pct[key]:5.0f}%")


def _cmd_copy(config: NutritrackConfig, args) -> None:
    target = args.target_date or date.today().isoformat()
    log_db = FoodLogDB(config.database.path)
    try:
        ids = [e.entry_id for e in log_db.get_entries(args.source_date)]
        new_ids = log_db.copy_entries(ids, target)
    finally:
        log_db.close()
    print(f"Copied {len(new_ids)} entries from {args.source_date} to {target}")


def _cmd_summary(config: NutritrackConfig, args) -> None:
    dates = period_dates(args.view)
    log_db = FoodLogDB(config.database.path)
    goals_db = GoalsDB(config.database.path, defaults=config.goals)
    try:
        entries = log_db.get_entries_between(dates[0], dates[-1])
        goals = goals_db.get()
    finally:
        log_db.close()
        goals_db.close()

    summary = summarize_period(entries, goals, dates)
    data = summary.summary_dict()

    if args.json:
        data["days"] = [
            {"date": d.date, "on_track": d.on_track, **d.totals.as_dict()} for d in summary.days
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    print(f"{args.view.capitalize()} summary ({dates[0]} – {dates[-1]})")
    for key, value in data.items():
        print(f"  {key:<15} {value}")


def _cmd_goals(config: NutritrackConfig, args) -> None:
    goals_db = GoalsDB(config.database.path, defaults=config.goals)
    try:
        goals = goals_db.get()
        if args.weight is not None and args.height is not None and args.age is not None:
            goals = goals_from_profile(
                args.weight,
                args.height,
                args.age,
                args.sex,
                activity_level=args.activity,
                goal_type=args.goal_type,
                fiber=goals.fiber,
            )
            goals_db.set(goals)
        else:
            overrides = {
                k: getattr(args, k)
                for k in ("calories", "protein", "carbs", "fat", "fiber")
                if getattr(args, k) is not None
            }
            if overrides:
                goals = replace(goals, **overrides)
                goals_db.set(goals)
    finally:
        goals_db.close()

    for key, value in asdict(goals).items():
        print(f"  {key:<8} {_fmt(value)}")
