from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from services import uploads

uploads_bp = Blueprint('uploads', __name__, url_prefix='/api/upload')


@uploads_bp.route('', methods=['POST'])
@login_required
def upload_image():
    saved = uploads.save_image(request.files.get('image'), user_id=str(current_user.id))
    return jsonify(dict(saved, success=True)), 201


@uploads_bp.route('/multiple', methods=['POST'])
@login_required
def upload_images():
    saved = uploads.save_images(request.files.getlist('images'), user_id=str(current_user.id))
    return jsonify({'success': True, 'files': saved, 'urls': [item['url'] for item in saved]}), 201


@uploads_bp.route('/<filename>', methods=['DELETE'])
@login_required
def delete_image(filename):
    uploads.delete_image(filename, user_id=str(current_user.id))
    return jsonify({'success': True})


@uploads_bp.route('/info', methods=['GET'])
@login_required
def storage_info():
    return jsonify(uploads.storage_info())
