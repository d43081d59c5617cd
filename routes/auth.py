from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required

from forms.auth_forms import LoginForm, ChangePasswordForm, EmailForm
from routes import json_body
from services import auth, system_log

auth_bp = Blueprint('auth', __name__, url_prefix='/api/admin')


@auth_bp.route('/login', methods=['POST'])
def login():
    form = LoginForm.from_json(json_body()).validate_or_raise()
    admin = auth.authenticate(form.password.data)
    login_user(admin)
    system_log.record('info', 'security', 'Admin logged in', user_id=str(admin.id))
    return jsonify({'success': True, 'admin': admin.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@auth_bp.route('/change-password', methods=['POST'])
@login_required
def change_password():
    form = ChangePasswordForm.from_json(json_body()).validate_or_raise()
    auth.change_password(form.current_password.data, form.new_password.data)
    return jsonify({'success': True})


@auth_bp.route('/email', methods=['PUT'])
@login_required
def update_email():
    form = EmailForm.from_json(json_body()).validate_or_raise()
    admin = auth.update_email(form.email.data)
    return jsonify({'success': True, 'admin': admin.to_dict()})


@auth_bp.route('/info', methods=['GET'])
@login_required
def admin_info():
    return jsonify(auth.get_admin_info())
