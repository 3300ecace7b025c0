"""
Pytest configuration and fixtures for the intelligence tests
"""
import os
import tempfile
from datetime import datetime, timedelta

import pytest

os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='intelligence-logs-'))

from app import create_app
from app import db as _db
from app.build import insert_critical_data
from app.buisness.core.engine_context import EngineContext
from app.buisness.core.week_calendar import trailing_weeks, week_start_datetime
from app.data.core.major_location import Location
from app.data.core.supply.supplier import Supplier
from app.data.core.supply.product import Product, ProductVariant
from app.data.inventory.base import DemandForecast, InventoryLevel, SaleRecord

# Wednesday afternoon; the current week starts Monday 2024-03-11
FIXED_NOW = datetime(2024, 3, 13, 15, 0)


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create Flask application backed by a throwaway SQLite database"""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'intelligence.db'}",
        'RATELIMIT_ENABLED': False,
        'JOB_BACKOFF_SECONDS': 0.0,
    })

    with app.app_context():
        _db.create_all()
        insert_critical_data()
        yield app
        app.extensions['intelligence_jobs'].shutdown()
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def db(app):
    return _db


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def context(app):
    """Engine context with a frozen clock"""
    return EngineContext.from_app(app, clock=lambda: FIXED_NOW)


class Factory:
    """Creates and commits reference and inventory rows for tests"""

    def __init__(self, session, now=FIXED_NOW):
        self.session = session
        self.now = now
        self._counter = 0

    def _next(self):
        self._counter += 1
        return self._counter

    def _save(self, row):
        self.session.add(row)
        self.session.commit()
        return row

    def variant(self, lead_days=10, sku=None, is_active=True):
        n = self._next()
        supplier = self._save(Supplier(name=f"Supplier {n}", default_lead_days=lead_days))
        product = self._save(Product(sku=f"P-{n}", name=f"Product {n}", supplier_id=supplier.id, unit_cost=5.0))
        return self._save(ProductVariant(product_id=product.id, sku=sku or f"P-{n}-V", is_active=is_active))

    def location(self, code, location_type='STORE', tier='B', is_active=True):
        return self._save(Location(
            code=code, name=code.title(), location_type=location_type, revenue_tier=tier, is_active=is_active
        ))

    def warehouse(self, code='WH-01'):
        return self.location(code, location_type='WAREHOUSE', tier='A')

    def stock(self, variant, location, on_hand, reserved=0.0):
        return self._save(InventoryLevel(
            product_variant_id=variant.id, location_id=location.id,
            quantity_on_hand=on_hand, quantity_reserved=reserved,
        ))

    def weekly_sales(self, variant, location, quantities, now=None):
        """One sale per week, the last one in the most recent complete week"""
        weeks = trailing_weeks(now or self.now, len(quantities))
        for week, qty in zip(weeks, quantities):
            if qty:
                self.session.add(SaleRecord(
                    product_variant_id=variant.id, location_id=location.id, quantity=qty,
                    unit_cost=5.0, occurred_at=week_start_datetime(week) + timedelta(days=3, hours=10),
                ))
        self.session.commit()
        return weeks

    def forecast(self, variant, location, week, qty, method='MOVING_AVERAGE'):
        return self._save(DemandForecast(
            product_variant_id=variant.id, location_id=location.id,
            week_start=week, week_end=week + timedelta(days=6),
            forecast_qty=qty, method=method,
        ))


@pytest.fixture(scope='function')
def make(app):
    return Factory(_db.session)
