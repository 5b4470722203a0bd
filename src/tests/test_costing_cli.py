"""Tests for the recipe costing command-line interface."""

import pytest

from recipe_costing.utils import costing_cli


@pytest.fixture
def cli_db(test_db, monkeypatch):
    """Run CLI commands against the test database."""
    monkeypatch.setattr(costing_cli, "initialize_app_database", lambda: None)
    monkeypatch.setattr(costing_cli, "close_connections", lambda: None)
    return test_db


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_prints_help(self, cli_db, capsys):
        assert costing_cli.main([]) == 1
        assert "usage: recipe-costing" in capsys.readouterr().out

    def test_add_conversion_arguments(self):
        args = costing_cli.build_parser().parse_args(
            ["add-conversion", "7", "g", "unit", "0.002", "--notes", "500 g leg"]
        )
        assert args.inventory_item_id == 7
        assert args.recipe_unit == "g"
        assert args.inventory_unit == "unit"
        assert args.conversion_factor == "0.002"
        assert args.notes == "500 g leg"

    def test_recipe_id_must_be_integer(self):
        with pytest.raises(SystemExit):
            costing_cli.build_parser().parse_args(["cost", "abc"])


class TestCommands:
    """Tests for command execution."""

    def test_init_db(self, cli_db, capsys):
        assert costing_cli.main(["init-db"]) == 0
        assert "Database ready at" in capsys.readouterr().out

    def test_cost(self, cli_db, sample_recipe, capsys):
        assert costing_cli.main(["cost", str(sample_recipe.id)]) == 0
        out = capsys.readouterr().out
        assert "Ham Sandwich" in out
        assert "Total: $2.40" in out
        assert "Per serving: $0.60" in out
        assert "Food cost: 12.0%" in out
        assert "Linked: 2 of 3 ingredients" in out
        assert "Ham Leg: recipe uses 'grams', inventory uses 'each'" in out

    def test_cost_missing_recipe(self, cli_db, capsys):
        assert costing_cli.main(["cost", "999"]) == 1
        assert "Recipe with ID 999 not found" in capsys.readouterr().out

    def test_connections_closed_after_each_command(self, cli_db, sample_recipe, monkeypatch):
        closed = []
        monkeypatch.setattr(costing_cli, "close_connections", lambda: closed.append("closed"))
        assert costing_cli.main(["cost", str(sample_recipe.id)]) == 0
        assert costing_cli.main(["cost", "999"]) == 1
        assert closed == ["closed", "closed"]

    def test_connections_closed_when_command_raises(self, cli_db, monkeypatch):
        closed = []
        monkeypatch.setattr(costing_cli, "close_connections", lambda: closed.append("closed"))

        def explode(recipe_id):
            raise RuntimeError("disk gone")

        monkeypatch.setattr(costing_cli, "cost_cmd", explode)
        with pytest.raises(RuntimeError):
            costing_cli.main(["cost", "1"])
        assert closed == ["closed"]

    def test_check_with_mismatch(self, cli_db, sample_recipe, capsys):
        assert costing_cli.main(["check", str(sample_recipe.id)]) == 2
        assert "FAIL Ham Leg" in capsys.readouterr().out

    def test_check_resolved(self, cli_db, sample_recipe, ham_conversion, capsys):
        assert costing_cli.main(["check", str(sample_recipe.id)]) == 0
        assert "(custom factor 0.002)" in capsys.readouterr().out

    def test_check_without_mismatch(self, cli_db, sample_items, capsys):
        from recipe_costing.models import Recipe, RecipeIngredient

        session = cli_db()
        recipe = Recipe(name="Dough")
        recipe.recipe_ingredients = [
            RecipeIngredient(
                name="flour", quantity="500", unit="g", inventory_item_id=sample_items["flour"].id
            )
        ]
        session.add(recipe)
        session.commit()

        assert costing_cli.main(["check", str(recipe.id)]) == 0
        assert "All ingredient units match" in capsys.readouterr().out

    def test_add_conversion_then_cost(self, cli_db, sample_recipe, sample_items, capsys):
        ham_id = str(sample_items["ham"].id)
        assert costing_cli.main(["add-conversion", ham_id, "grams", "each", "0.002"]) == 0
        assert "1 g = 0.002 unit" in capsys.readouterr().out

        assert costing_cli.main(["cost", str(sample_recipe.id)]) == 0
        assert "Total: $8.40" in capsys.readouterr().out

    def test_add_conversion_invalid(self, cli_db, sample_items, capsys):
        ham_id = str(sample_items["ham"].id)
        assert costing_cli.main(["add-conversion", ham_id, "g", "unit", "-1"]) == 1
        assert "Conversion factor must be positive" in capsys.readouterr().out

    def test_suggest(self, cli_db, capsys):
        from recipe_costing.models import InventoryItem

        session = cli_db()
        eggs = InventoryItem(
            name="Eggs", purchase_quantity="600", purchase_unit="g", purchase_price="6.00"
        )
        session.add(eggs)
        session.commit()

        assert costing_cli.main(["suggest", str(eggs.id), "each"]) == 0
        assert "Suggested factor: 60" in capsys.readouterr().out

    def test_suggest_nothing(self, cli_db, sample_items, capsys):
        assert costing_cli.main(["suggest", str(sample_items["ham"].id), "g"]) == 0
        assert "No suggestion available" in capsys.readouterr().out

    def test_suggest_missing_item(self, cli_db, capsys):
        assert costing_cli.main(["suggest", "999", "each"]) == 1
        assert "Inventory item with ID 999 not found" in capsys.readouterr().out
