from flask import Blueprint, jsonify
from flask_login import login_required

from forms.category_forms import CategoryForm, CategoryUpdateForm
from routes import json_body
from services import catalog

categories_bp = Blueprint('categories', __name__, url_prefix='/api/categories')


@categories_bp.route('', methods=['GET'])
def list_categories():
    return jsonify([c.to_dict() for c in catalog.list_categories()])


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id):
    return jsonify(catalog.get_category(category_id).to_dict())


@categories_bp.route('', methods=['POST'])
@login_required
def create_category():
    form = CategoryForm.from_json(json_body()).validate_or_raise()
    category = catalog.create_category({'name': form.name.data, 'name_ar': form.name_ar.data})
    return jsonify(category.to_dict()), 201


@categories_bp.route('/<int:category_id>', methods=['PUT'])
@login_required
def update_category(category_id):
    data = json_body()
    CategoryUpdateForm.from_json(data).validate_or_raise()
    data = {CategoryForm.aliases.get(key, key): value for key, value in data.items()}
    return jsonify(catalog.update_category(category_id, data).to_dict())


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@login_required
def delete_category(category_id):
    catalog.delete_category(category_id)
    return jsonify({'success': True})
