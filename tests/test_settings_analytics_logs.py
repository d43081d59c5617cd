from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from models import db
from models.analytics import AnalyticsEvent
from models.settings import StoreSettings
from models.system_log import SystemLog
from services import analytics, system_log
from services.errors import ValidationError
from services.settings import update_settings


# ---------------------------------------------------------------- settings

def test_default_settings(app_ctx):
    settings = StoreSettings.get_current()
    assert settings.delivery_fee == Decimal('1.500')
    assert settings.free_delivery_minimum == Decimal('20.000')
    assert settings.delivery_area_muharraq_name_en == 'Muharraq, Askar, Jao'
    assert StoreSettings.query.count() == 1


def test_update_settings_bumps_version(app_ctx):
    version = StoreSettings.get_current().version
    settings = update_settings({'freeDeliveryMinimum': '15', 'storeNameAr': 'متجر الأزهر'})
    assert settings.free_delivery_minimum == Decimal('15.000')
    assert settings.store_name_ar == 'متجر الأزهر'
    assert settings.version == version + 1


def test_negative_fee_is_rejected(app_ctx):
    with pytest.raises(ValidationError):
        update_settings({'delivery_fee': '-1'})
    assert update_settings({}).version == 1


def test_settings_over_http(client, admin_client):
    data = client.get('/api/settings').get_json()
    assert data['delivery_area_sitra'] == 1.0
    assert client.put('/api/settings', json={'deliveryFee': 2}).status_code == 401
    assert admin_client.put('/api/settings', json={'deliveryFee': -2}).status_code == 400
    response = admin_client.put('/api/settings', json={'deliveryFee': 2})
    assert response.get_json()['delivery_fee'] == 2.0


# ---------------------------------------------------------------- analytics

def test_track_and_dashboard(app_ctx):
    analytics.track_event({'type': 'page_view', 'page': '/'})
    analytics.track_event({'type': 'page_view', 'page': '/'})
    analytics.track_event({'type': 'page_view', 'page': '/product/1'})
    analytics.track_event({'type': 'product_viewed', 'productId': '1'})
    analytics.track_event({'type': 'order_placed', 'orderId': 1, 'revenue': '12.500'})
    analytics.track_event({'type': 'error', 'error': 'Image failed to load', 'page': '/'})

    data = analytics.dashboard('7days')
    assert data['summary']['page_views'] == 3
    assert data['summary']['orders'] == 1
    assert data['summary']['revenue'] == 12.5
    assert data['summary']['product_views'] == 1
    assert data['summary']['errors'] == 1
    assert data['top_pages'][0] == {'page': '/', 'views': 2}
    assert len(data['daily_data']) == 7
    assert data['daily_data'][-1]['orders'] == 1
    assert data['errors'][0]['error'] == 'Image failed to load'


def test_dashboard_ignores_old_events(app_ctx):
    db.session.add(AnalyticsEvent(type='page_view', page='/', timestamp=datetime.utcnow() - timedelta(days=40)))
    db.session.commit()
    assert analytics.dashboard('30days')['summary']['page_views'] == 0
    assert analytics.dashboard('90days')['summary']['page_views'] == 1


def test_empty_dashboard(app_ctx):
    data = analytics.dashboard('7days')
    assert data['summary']['page_views'] == 0
    assert data['top_pages'] == []


def test_unknown_event_type_is_rejected(app_ctx):
    with pytest.raises(ValidationError):
        analytics.track_event({'type': 'click'})
    with pytest.raises(ValidationError):
        analytics.track_event({})


def test_event_ids_beyond_column_range_are_rejected(app_ctx):
    with pytest.raises(ValidationError):
        analytics.track_event({'type': 'product_viewed', 'productId': 10 ** 20})
    assert AnalyticsEvent.query.count() == 0


def test_realtime(app_ctx):
    analytics.track_event({'type': 'page_view', 'page': '/'})
    data = analytics.realtime()
    assert data['last_hour_page_views'] == 1
    assert data['last_hour_orders'] == 0


def test_analytics_over_http(client, admin_client):
    response = client.post('/api/analytics/track', json={'type': 'page_view', 'page': '/'},
                           headers={'User-Agent': 'Mozilla/5.0 (iPhone)'})
    assert response.status_code == 201
    assert client.get('/api/analytics').status_code == 401
    data = admin_client.get('/api/analytics?timeRange=30days').get_json()
    assert data['time_range'] == '30days'
    assert data['device_breakdown']['mobile'] == 1
    assert admin_client.get('/api/analytics/realtime').status_code == 200


def test_non_object_bodies_are_rejected(client, admin_client):
    assert client.post('/api/analytics/track', json=['page_view']).status_code == 400
    assert admin_client.put('/api/settings', json='free').status_code == 400
    assert admin_client.post('/api/admin/change-password', json=[1]).status_code == 400


# ---------------------------------------------------------------- system logs

def test_record_and_filter(app_ctx):
    system_log.record('error', 'order', 'Payment step failed', {'order_id': 3})
    system_log.record('info', 'product', 'Product updated')
    errors = system_log.query_logs(level='error').all()
    assert [log.message for log in errors] == ['Payment step failed']
    assert errors[0].details == {'order_id': 3}
    assert system_log.query_logs(category='product').count() == 1


def test_unknown_level_and_category_fall_back(app_ctx):
    entry = system_log.record('fatal', 'billing', 'Something happened')
    assert (entry.level, entry.category) == ('info', 'system')


def test_logs_are_capped(app_ctx):
    app_ctx.config['MAX_SYSTEM_LOGS'] = 3
    for i in range(5):
        system_log.record('info', 'system', f'entry {i}')
    messages = [log.message for log in system_log.query_logs().all()]
    assert len(messages) == 3
    assert 'entry 4' in messages
    assert 'entry 0' not in messages


@pytest.mark.parametrize('errors, status', [(0, 'healthy'), (6, 'warning'), (11, 'critical')])
def test_health(app_ctx, errors, status):
    SystemLog.query.delete()
    db.session.commit()
    for i in range(errors):
        system_log.record('error', 'system', f'failure {i}')
    health = system_log.system_health()
    assert health['status'] == status
    assert health['last_24_hours']['errors'] == errors


def test_clear_logs_leaves_a_trace(app_ctx):
    system_log.record('warning', 'security', 'Failed admin login attempt')
    system_log.clear_logs()
    assert [log.message for log in SystemLog.query.all()] == ['System logs cleared by administrator']


def test_logs_over_http(client, admin_client):
    assert client.get('/api/logs').status_code == 401
    response = admin_client.post('/api/logs', json={'level': 'warning', 'category': 'user', 'message': 'Manual note'})
    assert response.status_code == 201

    data = admin_client.get('/api/logs?level=warning&category=user').get_json()
    assert data['total'] == 1
    assert data['logs'][0]['message'] == 'Manual note'
    assert admin_client.post('/api/logs', json={'message': ''}).status_code == 400
    assert admin_client.get('/api/logs?start_date=yesterday').status_code == 400

    export = admin_client.get('/api/logs/export')
    assert export.mimetype == 'text/csv'
    assert export.data.decode('utf-8').splitlines()[0] == 'timestamp,level,category,message,details,user_id,ip'

    assert admin_client.get('/api/logs/health').get_json()['status'] == 'healthy'
    assert admin_client.delete('/api/logs').status_code == 200


def test_ping(client):
    assert client.get('/api/ping').get_json()['status'] == 'ok'


def test_unknown_route_is_json_404(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert 'error' in response.get_json()
