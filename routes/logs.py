from datetime import datetime

import pandas as pd
from flask import Blueprint, request, jsonify, Response
from flask_babel import gettext as _
from flask_login import login_required, current_user

from forms.log_forms import SystemLogForm
from routes import json_body
from services import system_log
from services.errors import ValidationError

logs_bp = Blueprint('logs', __name__, url_prefix='/api/logs')

CSV_COLUMNS = ['timestamp', 'level', 'category', 'message', 'details', 'user_id', 'ip']


def _date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(_('Invalid date: %(value)s', value=value))


def _filtered_logs():
    return system_log.query_logs(
        level=request.args.get('level') or None,
        category=request.args.get('category') or None,
        start=_date_arg('start_date'),
        end=_date_arg('end_date'),
    )


@logs_bp.route('', methods=['GET'])
@login_required
def list_logs():
    limit = request.args.get('limit', 100, type=int)
    query = _filtered_logs()
    total = query.count()
    logs = query.limit(max(1, min(limit, 1000))).all()
    return jsonify({'logs': [log.to_dict() for log in logs], 'total': total})


@logs_bp.route('', methods=['POST'])
@login_required
def add_log():
    data = json_body()
    form = SystemLogForm.from_json(data).validate_or_raise()
    entry = system_log.record(form.level.data or 'info', form.category.data or 'system', form.message.data,
                              details=data.get('details') if isinstance(data.get('details'), dict) else None,
                              user_id=str(current_user.id))
    return jsonify(entry.to_dict()), 201


@logs_bp.route('', methods=['DELETE'])
@login_required
def clear_logs():
    system_log.clear_logs()
    return jsonify({'success': True})


@logs_bp.route('/export', methods=['GET'])
@login_required
def export_logs():
    rows = [log.to_dict() for log in _filtered_logs().all()]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    filename = 'system-logs-%s.csv' % datetime.utcnow().strftime('%Y-%m-%d')
    return Response(
        df.to_csv(index=False),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=%s' % filename},
    )


@logs_bp.route('/health', methods=['GET'])
@login_required
def health():
    return jsonify(system_log.system_health())
