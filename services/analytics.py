import re
from datetime import datetime, timedelta

import pandas as pd
from flask import current_app, has_request_context, request
from flask_babel import gettext as _

from sqlalchemy import distinct, func, select

from models import db
from models.analytics import AnalyticsEvent, EVENT_TYPES
from services import MAX_ID, commit
from services.errors import ValidationError
from services.pricing import to_int, to_money

TIME_RANGES = {'7days': 7, '30days': 30, '90days': 90}
MOBILE_AGENT = re.compile(r'Mobile|Android|iPhone', re.IGNORECASE)


def build_event(event_type, **fields):
    """Return an unsaved event stamped with the current request's ip and agent."""
    if event_type not in EVENT_TYPES:
        raise ValidationError(_('Invalid event type'))
    event = AnalyticsEvent(type=event_type, **fields)
    if has_request_context():
        event.ip = request.remote_addr
        event.user_agent = (request.headers.get('User-Agent') or '')[:255]
    return event


def track_event(data):
    event_type = data.get('type')
    if not event_type:
        raise ValidationError(_('Event type is required'))
    fields = {}
    for key in ('order_id', 'customer_id', 'product_id'):
        camel = ''.join(part.capitalize() if i else part for i, part in enumerate(key.split('_')))
        value = data.get(key, data.get(camel))
        if value not in (None, ''):
            fields[key] = to_int(value, key)
            if not 0 < fields[key] <= MAX_ID:
                raise ValidationError(_('%(field)s is out of range', field=key))
    if data.get('page'):
        fields['page'] = str(data['page'])[:255]
    if data.get('error'):
        fields['error'] = str(data['error'])[:500]
    if data.get('revenue') not in (None, ''):
        fields['revenue'] = to_money(data['revenue'], 'revenue')

    event = build_event(event_type, **fields)
    db.session.add(event)
    commit()
    _trim()
    return event


def _trim():
    limit = current_app.config['MAX_ANALYTICS_EVENTS']
    if AnalyticsEvent.query.count() <= limit:
        return
    newest = select(AnalyticsEvent.id).order_by(AnalyticsEvent.id.desc()).limit(limit).subquery()
    AnalyticsEvent.query.filter(AnalyticsEvent.id.not_in(select(newest.c.id))).delete(synchronize_session=False)
    commit()


def _events_frame(since):
    rows = db.session.query(
        AnalyticsEvent.type, AnalyticsEvent.page, AnalyticsEvent.ip, AnalyticsEvent.user_agent,
        AnalyticsEvent.error, AnalyticsEvent.revenue, AnalyticsEvent.timestamp,
    ).filter(AnalyticsEvent.timestamp >= since).order_by(AnalyticsEvent.timestamp).all()
    frame = pd.DataFrame([tuple(row) for row in rows], columns=['type', 'page', 'ip', 'user_agent', 'error', 'revenue', 'timestamp'])
    frame['revenue'] = frame['revenue'].map(lambda value: float(value) if pd.notna(value) else 0.0)
    return frame


def dashboard(time_range='7days'):
    """لوحة التحليلات: ملخص، تفصيل يومي، أكثر الصفحات زيارة، نوع الجهاز"""
    days = TIME_RANGES.get(time_range, 90)
    now = datetime.utcnow()
    frame = _events_frame(now - timedelta(days=days))

    orders = frame[frame['type'] == 'order_placed']
    errors = frame[frame['type'] == 'error']
    page_views = frame[frame['type'] == 'page_view']

    # تجميع الأحداث حسب اليوم
    start_day = (now - timedelta(days=days - 1)).date()
    daily = []
    days_of_events = frame['timestamp'].map(lambda ts: ts.date())
    for i in range(days):
        day = start_day + timedelta(days=i)
        day_events = frame[days_of_events == day]
        day_orders = day_events[day_events['type'] == 'order_placed']
        daily.append({
            'date': day.strftime('%Y-%m-%d'),
            'page_views': int((day_events['type'] == 'page_view').sum()),
            'orders': len(day_orders),
            'revenue': round(float(day_orders['revenue'].sum()), 3),
            'visitors': int(day_events['ip'].nunique()),
        })

    top_pages = page_views[page_views['page'].notna()]['page'].value_counts().head(10)
    agents = frame['user_agent'].fillna('')
    agents = agents[agents != '']
    mobile = int(agents.map(lambda ua: bool(MOBILE_AGENT.search(ua))).sum())

    return {
        'time_range': time_range,
        'summary': {
            'page_views': len(page_views),
            'orders': len(orders),
            'revenue': round(float(orders['revenue'].sum()), 3),
            'unique_visitors': int(frame['ip'].nunique()),
            'active_sessions': _active_sessions(now),
            'errors': len(errors),
            'product_views': int((frame['type'] == 'product_viewed').sum()),
        },
        'daily_data': daily,
        'top_pages': [{'page': page, 'views': int(views)} for page, views in top_pages.items()],
        'device_breakdown': {'mobile': mobile, 'desktop': len(agents) - mobile},
        'errors': [
            {'timestamp': row.timestamp.isoformat(), 'error': row.error, 'page': row.page}
            for row in errors.tail(20).itertuples()
        ],
        'last_updated': now.isoformat(),
    }


def _active_sessions(now):
    since = now - timedelta(minutes=5)
    return db.session.query(func.count(distinct(AnalyticsEvent.ip))) \
        .filter(AnalyticsEvent.timestamp >= since).scalar() or 0


def realtime():
    now = datetime.utcnow()
    hour_ago = now - timedelta(hours=1)
    counts = dict(db.session.query(AnalyticsEvent.type, func.count(AnalyticsEvent.id))
                  .filter(AnalyticsEvent.timestamp >= hour_ago)
                  .group_by(AnalyticsEvent.type).all())
    return {
        'active_sessions': _active_sessions(now),
        'last_hour_page_views': counts.get('page_view', 0),
        'last_hour_orders': counts.get('order_placed', 0),
        'last_hour_errors': counts.get('error', 0),
        'timestamp': now.isoformat(),
    }
