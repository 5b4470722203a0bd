"""Pytest configuration and fixtures for recipe costing tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from recipe_costing.models import InventoryItem, Recipe, RecipeIngredient, UnitConversion
from recipe_costing.models.base import Base
from recipe_costing.services.dto import InventoryPurchaseRecord, RecipeIngredientLine
from recipe_costing.utils.config import reset_config


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import recipe_costing.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from the developer's environment and config singleton."""
    monkeypatch.delenv("RECIPE_COSTING_ENV", raising=False)
    monkeypatch.delenv("RECIPE_COSTING_CURRENCY_SYMBOL", raising=False)
    monkeypatch.delenv("RECIPE_COSTING_CURRENCY_DECIMALS", raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Value-type fixtures for the pure cost engine
# ============================================================================


@pytest.fixture
def flour_record():
    """1000 g of flour for 12.00."""
    return InventoryPurchaseRecord(
        id=1, name="Flour", purchase_quantity="1000", purchase_unit="g", purchase_price="12.00"
    )


@pytest.fixture
def ham_record():
    """Ham bought by the leg: 1 unit for 30.00."""
    return InventoryPurchaseRecord(
        id=2, name="Ham Leg", purchase_quantity="1", purchase_unit="unit", purchase_price="30.00"
    )


@pytest.fixture
def flour_line(flour_record):
    return RecipeIngredientLine(quantity="200", unit="g", inventory_item=flour_record, name="flour")


@pytest.fixture
def ham_line(ham_record):
    return RecipeIngredientLine(quantity="100", unit="g", inventory_item=ham_record, name="ham")


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
def sample_items(test_db):
    """Persist flour (priced by weight) and ham (priced by the unit)."""
    session = test_db()
    flour = InventoryItem(
        name="Flour", purchase_quantity="1", purchase_unit="kg", purchase_price="12.00"
    )
    ham = InventoryItem(
        name="Ham Leg", purchase_quantity="1", purchase_unit="each", purchase_price="30.00"
    )
    session.add_all([flour, ham])
    session.commit()
    return {"flour": flour, "ham": ham}


@pytest.fixture
def sample_recipe(test_db, sample_items):
    """Persist a sandwich recipe: 200 g flour, 100 g ham, and an unlinked pinch of salt."""
    session = test_db()
    recipe = Recipe(name="Ham Sandwich", category="sandwiches", servings="4", retail_price="5.00")
    recipe.recipe_ingredients = [
        RecipeIngredient(
            name="flour", quantity="200", unit="g", inventory_item_id=sample_items["flour"].id
        ),
        RecipeIngredient(
            name="ham", quantity="100", unit="grams", inventory_item_id=sample_items["ham"].id
        ),
        RecipeIngredient(name="salt", quantity="1", unit="pinch"),
    ]
    session.add(recipe)
    session.commit()
    return recipe


@pytest.fixture
def ham_conversion(test_db, sample_items):
    """Persist 1 g of ham = 0.002 units (a 500 g leg)."""
    session = test_db()
    conversion = UnitConversion(
        inventory_item_id=sample_items["ham"].id,
        recipe_unit="g",
        inventory_unit="unit",
        conversion_factor="0.002",
    )
    session.add(conversion)
    session.commit()
    return conversion
