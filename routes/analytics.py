from flask import Blueprint, request, jsonify
from flask_login import login_required

from routes import json_body
from services import analytics

analytics_bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


@analytics_bp.route('/track', methods=['POST'])
def track():
    event = analytics.track_event(json_body())
    return jsonify({'success': True, 'id': event.id}), 201


@analytics_bp.route('', methods=['GET'])
@login_required
def dashboard():
    return jsonify(analytics.dashboard(request.args.get('timeRange', request.args.get('range', '7days'))))


@analytics_bp.route('/realtime', methods=['GET'])
@login_required
def realtime():
    return jsonify(analytics.realtime())
