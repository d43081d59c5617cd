from flask import Blueprint, jsonify
from flask_login import login_required

from forms.settings_forms import SettingsForm
from models.settings import StoreSettings
from routes import json_body
from services.settings import update_settings

settings_bp = Blueprint('settings', __name__, url_prefix='/api/settings')


@settings_bp.route('', methods=['GET'])
def get_settings():
    return jsonify(StoreSettings.get_current().to_dict())


@settings_bp.route('', methods=['PUT'])
@login_required
def put_settings():
    data = json_body()
    SettingsForm.from_json(data).validate_or_raise()
    return jsonify(update_settings(data).to_dict())
