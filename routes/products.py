from flask import Blueprint, request, jsonify
from flask_login import login_required

from forms.product_forms import ProductForm, ProductUpdateForm
from routes import json_body
from services import catalog

products_bp = Blueprint('products', __name__, url_prefix='/api/products')


@products_bp.route('', methods=['GET'])
def list_products():
    category_id = request.args.get('category_id', type=int)
    products = catalog.list_products(category_id=category_id)
    return jsonify([p.to_dict() for p in products])


@products_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    return jsonify(catalog.get_product(product_id).to_dict())


@products_bp.route('', methods=['POST'])
@login_required
def create_product():
    data = json_body()
    ProductForm.from_json(data).validate_or_raise()
    product = catalog.create_product(_snake_case(data))
    return jsonify(product.to_dict()), 201


@products_bp.route('/<int:product_id>', methods=['PUT'])
@login_required
def update_product(product_id):
    data = json_body()
    ProductUpdateForm.from_json(data).validate_or_raise()
    product = catalog.update_product(product_id, _snake_case(data))
    return jsonify(product.to_dict())


@products_bp.route('/<int:product_id>/stock', methods=['PATCH'])
@login_required
def update_stock(product_id):
    data = json_body()
    product = catalog.update_product_stock(
        product_id,
        variants=data.get('variants'),
        total_stock=data.get('total_stock', data.get('totalStock', data.get('stock'))),
    )
    return jsonify(product.to_dict())


@products_bp.route('/<int:product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    catalog.delete_product(product_id)
    return jsonify({'success': True})


def _snake_case(data):
    # الواجهة ترسل الحقول بصيغة camelCase
    return {ProductForm.aliases.get(key, key): value for key, value in data.items()}
