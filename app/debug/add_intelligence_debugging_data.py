#!/usr/bin/env python3
"""
Intelligence Debug Data Insertion
Inserts suppliers, products, locations, stock levels and a trailing sales
history so the forecast, reorder-check and allocation jobs have data to work on.

Sales are given as weekly quantities ending with the last complete week and
are dated relative to the build time.
"""

from datetime import timedelta
from app import db
from app.buisness.core.week_calendar import trailing_weeks, utcnow, week_start_datetime
from app.data.core.major_location import Location
from app.data.core.supply.supplier import Supplier
from app.data.core.supply.product import Product, ProductVariant
from app.data.inventory.base import InventoryLevel, SaleRecord
from app.logger import get_logger

logger = get_logger("inventory_intelligence.debug.intelligence")

# Wednesday noon of each week
SALE_OFFSET = timedelta(days=2, hours=12)


def insert_intelligence_debug_data(debug_data, system_user_id, now=None):
    """
    Insert debug data for the intelligence module

    Args:
        debug_data (dict): Debug data from JSON file
        system_user_id (int): System user ID for audit fields
        now (datetime, optional): Reference time for sale dates

    Returns:
        dict: Count of inserted rows per section

    Raises:
        Exception: If insertion fails (fail-fast)
    """
    counts = {}
    try:
        counts['suppliers'] = _insert_suppliers(debug_data.get('Suppliers', []), system_user_id)
        counts['variants'] = _insert_products(debug_data.get('Products', []), system_user_id)
        counts['locations'] = _insert_locations(debug_data.get('Locations', []), system_user_id)
        counts['inventory_levels'] = _insert_inventory(debug_data.get('InventoryLevels', []), system_user_id)
        counts['sale_records'] = _insert_sales(debug_data.get('SaleSeries', []), system_user_id, now or utcnow())
        db.session.commit()
        logger.info(f"Inserted intelligence debug data: {counts}")
        return counts
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error inserting intelligence debug data: {e}")
        raise


def _insert_suppliers(suppliers, user_id):
    for supplier_data in suppliers:
        Supplier.find_or_create_from_dict(supplier_data, user_id=user_id, lookup_fields=['name'], commit=False)
    return len(suppliers)


def _insert_products(products, user_id):
    inserted = 0
    for product_data in products:
        supplier = Supplier.query.filter_by(name=product_data['supplier_name']).first()
        if supplier is None:
            raise ValueError(f"Supplier '{product_data['supplier_name']}' not found for {product_data['sku']}")
        fields = {k: v for k, v in product_data.items() if k not in ('variants', 'supplier_name')}
        fields['supplier_id'] = supplier.id
        product, _ = Product.find_or_create_from_dict(fields, user_id=user_id, lookup_fields=['sku'], commit=False)
        for variant_data in product_data.get('variants', []):
            ProductVariant.find_or_create_from_dict(
                dict(variant_data, product_id=product.id), user_id=user_id, lookup_fields=['sku'], commit=False
            )
            inserted += 1
    return inserted


def _insert_locations(locations, user_id):
    for loc_data in locations:
        Location.find_or_create_from_dict(loc_data, user_id=user_id, lookup_fields=['code'], commit=False)
    return len(locations)


def _resolve(variant_sku, location_code):
    variant = ProductVariant.query.filter_by(sku=variant_sku).first()
    location = Location.query.filter_by(code=location_code).first()
    if variant is None or location is None:
        raise ValueError(f"Unknown variant '{variant_sku}' or location '{location_code}'")
    return variant, location


def _insert_inventory(levels, user_id):
    for level_data in levels:
        variant, location = _resolve(level_data['variant_sku'], level_data['location_code'])
        InventoryLevel.find_or_create_from_dict({
            'product_variant_id': variant.id,
            'location_id': location.id,
            'quantity_on_hand': level_data.get('quantity_on_hand', 0),
            'quantity_reserved': level_data.get('quantity_reserved', 0),
        }, user_id=user_id, lookup_fields=['product_variant_id', 'location_id'], commit=False)
    return len(levels)


def _insert_sales(series_list, user_id, now):
    inserted = 0
    for series in series_list:
        variant, location = _resolve(series['variant_sku'], series['location_code'])
        quantities = series['weekly_quantities']
        unit_cost = series.get('unit_cost', variant.product.unit_cost)
        for week, quantity in zip(trailing_weeks(now, len(quantities)), quantities):
            if not quantity:
                continue
            db.session.add(SaleRecord(
                product_variant_id=variant.id,
                location_id=location.id,
                quantity=quantity,
                unit_cost=unit_cost,
                occurred_at=week_start_datetime(week) + SALE_OFFSET,
                created_by_id=user_id,
                updated_by_id=user_id,
            ))
            inserted += 1
    db.session.flush()
    return inserted
