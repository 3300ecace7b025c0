"""
Tests for the intelligence JSON endpoints
"""

from datetime import date

from app import create_app, db as _db
from app.buisness.core.week_calendar import utcnow
from app.data.inventory.base import Alert
from conftest import FIXED_NOW

NEXT_WEEK = date(2024, 3, 18)


def test_index_reports_status(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_trigger_forecast(app, client, make):
    app.extensions['intelligence_jobs'].clock = lambda: FIXED_NOW
    variant = make.variant()
    store = make.location('ST-A')
    make.stock(variant, store, on_hand=5)
    make.weekly_sales(variant, store, [4, 6])

    response = client.post('/intelligence/jobs/trigger?job=forecast&method=naive')

    assert response.status_code == 200
    assert response.get_json() == {'job': 'forecast', 'upserted': 1, 'skipped_manual': 0,
                                   'method': 'naive', 'errors': []}


def test_trigger_queued_reorder_check(app, client):
    response = client.post('/intelligence/jobs/trigger?job=reorder-check&queue=true')
    app.extensions['intelligence_jobs'].shutdown(wait=True)

    assert response.status_code == 202
    assert response.get_json() == {'job': 'reorder-check', 'queued': True}


def test_trigger_rejects_unknown_job_and_method(client):
    assert client.post('/intelligence/jobs/trigger?job=rebuild').status_code == 400
    response = client.post('/intelligence/jobs/trigger?job=forecast&method=arima')
    assert response.status_code == 400
    assert 'arima' in response.get_json()['error']


def test_trigger_is_post_only(client):
    assert client.get('/intelligence/jobs/trigger?job=forecast').status_code == 405


def test_propose_allocation(client, make):
    variant = make.variant()
    warehouse = make.warehouse()
    store = make.location('ST-A', tier='A')
    make.stock(variant, warehouse, on_hand=100)
    make.forecast(variant, store, NEXT_WEEK, 35.0)

    response = client.get(f'/intelligence/allocation/propose?variant_id={variant.id}')

    assert response.status_code == 200
    body = response.get_json()
    assert body['product_variant_id'] == variant.id
    assert body['warehouse_id'] == warehouse.id
    assert body['lines'][0]['location_id'] == store.id
    assert body['lines'][0]['suggested_qty'] == 70


def test_propose_errors(client):
    assert client.get('/intelligence/allocation/propose').status_code == 400
    assert client.get('/intelligence/allocation/propose?variant_id=abc').status_code == 400
    assert client.get('/intelligence/allocation/propose?variant_id=9999').status_code == 404


def test_allocation_candidates(client, make):
    variant = make.variant()
    warehouse = make.warehouse()
    store = make.location('ST-A')
    make.stock(variant, warehouse, on_hand=10)
    make.forecast(variant, store, NEXT_WEEK, 7.0)

    response = client.get('/intelligence/allocation/candidates')

    assert response.status_code == 200
    assert [v['product_variant_id'] for v in response.get_json()['variants']] == [variant.id]


def test_forecast_history(client, make):
    variant = make.variant()
    store = make.location('ST-A')
    make.weekly_sales(variant, store, [3, 0, 5], now=utcnow())
    make.forecast(variant, store, NEXT_WEEK, 4.5)

    response = client.get(f'/intelligence/forecasts/history?variant_id={variant.id}&location_id={store.id}&weeks=8')

    assert response.status_code == 200
    body = response.get_json()
    assert [w['quantity'] for w in body['weeks']] == [0, 0, 0, 0, 0, 3, 0, 5]
    assert body['history_weeks'] == 3
    assert body['latest_forecast']['forecast_qty'] == 4.5
    assert client.get(f'/intelligence/forecasts/history?variant_id={variant.id}&location_id=9999').status_code == 404


def test_forecast_history_rejects_non_positive_weeks(client, make):
    variant = make.variant()
    store = make.location('ST-A')
    make.weekly_sales(variant, store, [3, 0, 5], now=utcnow())

    for weeks in (-2, 0):
        response = client.get(
            f'/intelligence/forecasts/history?variant_id={variant.id}&location_id={store.id}&weeks={weeks}'
        )
        assert response.status_code == 400
        assert 'weeks' in response.get_json()['error']


def test_open_alerts(client, make, db):
    variant = make.variant()
    store = make.location('ST-A')
    db.session.add(Alert(type='LOW_STOCK', severity='WARNING', location_id=store.id,
                         product_variant_id=variant.id, message='low'))
    db.session.add(Alert(type='LOW_STOCK', severity='WARNING', location_id=store.id,
                         product_variant_id=variant.id, message='old', is_resolved=True))
    db.session.commit()

    alerts = client.get(f'/intelligence/alerts?location_id={store.id}').get_json()['alerts']

    assert [a['message'] for a in alerts] == ['low']


def test_trigger_is_rate_limited(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'limited.db'}",
        'RATELIMIT_ENABLED': True,
        'JOB_TRIGGER_RATE_LIMIT': '1 per minute',
    })
    with app.app_context():
        _db.create_all()
        client = app.test_client()
        assert client.post('/intelligence/jobs/trigger?job=reorder-check').status_code == 200
        assert client.post('/intelligence/jobs/trigger?job=reorder-check').status_code == 429
        _db.session.remove()
        _db.drop_all()
