"""
Recipe Costing CLI Utility

Command-line interface for costing stored recipes and managing custom unit
conversions. No UI required - designed for scripted and testing use.

Usage Examples:
    # Create the database tables
    recipe-costing init-db

    # Cost a recipe with per-ingredient breakdown
    recipe-costing cost 42

    # List unit mismatches (exit code 2 when any line cannot be costed)
    recipe-costing check 42

    # Record that 1 g of item 7 is 0.002 of its purchase unit
    recipe-costing add-conversion 7 g unit 0.002

    # Suggest a factor for using item 7 by the "each"
    recipe-costing suggest 7 each
"""

import argparse
import logging
import sys
from decimal import Decimal
from typing import List, Optional

from recipe_costing.services import recipe_cost_service
from recipe_costing.services.database import close_connections, initialize_app_database
from recipe_costing.services.exceptions import ServiceError
from recipe_costing.services.recipe_cost_calculator import summarize_mismatches
from recipe_costing.utils.config import get_config

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISMATCH = 2


def init_db_cmd() -> int:
    """Create database tables."""
    print(f"Database ready at {get_config().database_path}")
    return EXIT_OK


def cost_cmd(recipe_id: int) -> int:
    """Print a recipe's cost breakdown."""
    try:
        summary = recipe_cost_service.get_recipe_cost_summary(recipe_id)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return EXIT_ERROR

    print(f"{summary['recipe_name']} (recipe {summary['recipe_id']})")
    for line in summary["lines"]:
        marker = " !" if line["has_unit_mismatch"] else ""
        print(
            f"  {line['quantity']} {line['unit']} {line['name']}: "
            f"{line['formatted_cost']} [{line['status']}]{marker}"
        )
    print(f"Total: {summary['formatted_total']}")
    if summary["formatted_cost_per_serving"] is not None:
        print(f"Per serving: {summary['formatted_cost_per_serving']}")
    if summary["food_cost_percentage"] is not None:
        percentage = summary["food_cost_percentage"].quantize(Decimal("0.1"))
        print(f"Food cost: {percentage}%")
    print(f"Linked: {summary['linked_count']} of {summary['total_ingredients']} ingredients")

    if summary["mismatches"]:
        print("Total is a lower bound; these lines cost nothing until converted:")
        for message in summarize_mismatches(summary["mismatches"]):
            print(f"  {message}")
    return EXIT_OK


def check_cmd(recipe_id: int) -> int:
    """Print unit mismatches; exit code 2 when any line cannot be costed."""
    try:
        warnings = recipe_cost_service.check_recipe_units(recipe_id)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return EXIT_ERROR

    if not warnings:
        print("All ingredient units match their inventory units")
        return EXIT_OK

    for warning, message in zip(warnings, summarize_mismatches(warnings)):
        prefix = "ok  " if warning.can_convert else "FAIL"
        print(f"{prefix} {message}")

    if any(not warning.can_convert for warning in warnings):
        return EXIT_MISMATCH
    return EXIT_OK


def add_conversion_cmd(
    inventory_item_id: int,
    recipe_unit: str,
    inventory_unit: str,
    conversion_factor: str,
    notes: Optional[str],
) -> int:
    """Create a custom unit conversion."""
    try:
        conversion = recipe_cost_service.create_unit_conversion(
            inventory_item_id, recipe_unit, inventory_unit, conversion_factor, notes=notes
        )
    except ServiceError as e:
        print(f"ERROR: {e}")
        return EXIT_ERROR

    print(
        f"Created conversion {conversion.id}: 1 {conversion.recipe_unit} = "
        f"{conversion.conversion_factor} {conversion.inventory_unit}"
    )
    return EXIT_OK


def suggest_cmd(inventory_item_id: int, recipe_unit: str) -> int:
    """Print a suggested conversion factor."""
    try:
        factor = recipe_cost_service.suggest_unit_conversion(inventory_item_id, recipe_unit)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return EXIT_ERROR

    if factor is None:
        print("No suggestion available for this unit pair")
    else:
        print(f"Suggested factor: {factor}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="recipe-costing",
        description="Recipe costing from linked inventory pricing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Cost a recipe:
    recipe-costing cost 42

  Check units before saving:
    recipe-costing check 42

  Add a custom conversion (1 g = 0.002 unit for item 7):
    recipe-costing add-conversion 7 g unit 0.002
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create database tables")

    cost_parser = subparsers.add_parser("cost", help="Cost a recipe")
    cost_parser.add_argument("recipe_id", type=int, help="Recipe ID")

    check_parser = subparsers.add_parser("check", help="List unit mismatches for a recipe")
    check_parser.add_argument("recipe_id", type=int, help="Recipe ID")

    add_parser = subparsers.add_parser("add-conversion", help="Add a custom unit conversion")
    add_parser.add_argument("inventory_item_id", type=int, help="Inventory item ID")
    add_parser.add_argument("recipe_unit", help="Unit used by recipes")
    add_parser.add_argument("inventory_unit", help="Purchase unit of the item")
    add_parser.add_argument("conversion_factor", help="Inventory units per recipe unit")
    add_parser.add_argument("--notes", default=None, help="Optional notes")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest a conversion factor")
    suggest_parser.add_argument("inventory_item_id", type=int, help="Inventory item ID")
    suggest_parser.add_argument("recipe_unit", help="Unit used by recipes")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    initialize_app_database()
    try:
        return _dispatch(args)
    finally:
        close_connections()


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "init-db":
        return init_db_cmd()
    elif args.command == "cost":
        return cost_cmd(args.recipe_id)
    elif args.command == "check":
        return check_cmd(args.recipe_id)
    elif args.command == "add-conversion":
        return add_conversion_cmd(
            args.inventory_item_id,
            args.recipe_unit,
            args.inventory_unit,
            args.conversion_factor,
            args.notes,
        )
    elif args.command == "suggest":
        return suggest_cmd(args.inventory_item_id, args.recipe_unit)
    else:
        print(f"Unknown command: {args.command}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
