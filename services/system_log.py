from datetime import datetime, timedelta

from flask import current_app, has_request_context, request

from sqlalchemy import func, select

from models import db
from models.system_log import SystemLog, LOG_LEVELS, LOG_CATEGORIES


def _request_meta():
    if not has_request_context():
        return None, None
    return request.remote_addr, (request.headers.get('User-Agent') or '')[:255]


def record(level, category, message, details=None, user_id=None):
    """Write to the application logger and persist the entry.

    Commits its own row, so callers must not have pending work of their own
    in the session.
    """
    if level not in LOG_LEVELS:
        level = 'info'
    if category not in LOG_CATEGORIES:
        category = 'system'
    log_method = getattr(current_app.logger, level)
    if details:
        log_method('[%s] %s %s', category, message, details)
    else:
        log_method('[%s] %s', category, message)

    ip, user_agent = _request_meta()
    entry = SystemLog(level=level, category=category, message=message[:500], details=details,
                      user_id=user_id, ip=ip, user_agent=user_agent)
    db.session.add(entry)
    db.session.commit()
    _trim()
    return entry


def _trim():
    limit = current_app.config['MAX_SYSTEM_LOGS']
    if SystemLog.query.count() <= limit:
        return
    newest = select(SystemLog.id).order_by(SystemLog.id.desc()).limit(limit).subquery()
    SystemLog.query.filter(SystemLog.id.not_in(select(newest.c.id))).delete(synchronize_session=False)
    db.session.commit()


def query_logs(level=None, category=None, start=None, end=None):
    query = SystemLog.query
    if level:
        query = query.filter(SystemLog.level == level)
    if category:
        query = query.filter(SystemLog.category == category)
    if start:
        query = query.filter(SystemLog.created_at >= start)
    if end:
        query = query.filter(SystemLog.created_at <= end)
    return query.order_by(SystemLog.created_at.desc(), SystemLog.id.desc())


def clear_logs():
    SystemLog.query.delete()
    db.session.commit()
    record('info', 'system', 'System logs cleared by administrator')


def system_health():
    since = datetime.utcnow() - timedelta(hours=24)
    recent = db.session.query(SystemLog.level, func.count(SystemLog.id)) \
        .filter(SystemLog.created_at >= since) \
        .group_by(SystemLog.level).all()
    counts = {level: count for level, count in recent}
    errors = counts.get('error', 0)
    if errors > 10:
        status = 'critical'
    elif errors > 5:
        status = 'warning'
    else:
        status = 'healthy'

    oldest = SystemLog.query.order_by(SystemLog.id).first()
    newest = SystemLog.query.order_by(SystemLog.id.desc()).first()
    return {
        'status': status,
        'last_24_hours': {
            'errors': errors,
            'warnings': counts.get('warning', 0),
            'info': counts.get('info', 0),
            'total': sum(counts.values()),
        },
        'total_logs': SystemLog.query.count(),
        'oldest_log': oldest.created_at.isoformat() if oldest else None,
        'newest_log': newest.created_at.isoformat() if newest else None,
    }
