import importlib.util
from pathlib import Path
import pytest
import sqlalchemy as sa
from alembic import op
from storefront.db.session import Base
from storefront.db import models  # noqa: F401

MIGRATION = Path(__file__).resolve().parents[1] / 'alembic' / 'versions' / '20261018120000_init_storefront.py'

@pytest.fixture
def migrated_tables(monkeypatch):
    tables = {}

    def create_table(name, *items, **kw):
        tables[name] = {c.name: c for c in items if isinstance(c, sa.Column)}

    monkeypatch.setattr(op, 'create_table', create_table)
    spec = importlib.util.spec_from_file_location('init_storefront', MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    module.upgrade()
    return tables

def test_migration_creates_every_model_table(migrated_tables):
    assert set(migrated_tables) == set(Base.metadata.tables)

def test_migration_columns_match_models(migrated_tables):
    for name, table in Base.metadata.tables.items():
        columns = migrated_tables[name]
        assert set(columns) == set(table.columns.keys()), name
        for column in table.columns:
            assert columns[column.name].nullable == column.nullable, f'{name}.{column.name}'

def test_product_text_columns_default_to_empty(migrated_tables):
    products = migrated_tables['products']
    for column in ('description', 'image_url'):
        assert products[column].nullable is False
        assert products[column].server_default.arg == ''
