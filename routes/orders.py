from flask import Blueprint, request, jsonify
from flask_login import login_required

from forms.customer_forms import CustomerForm
from forms.order_forms import CheckoutForm, OrderUpdateForm
from routes import json_body
from services import orders as order_store
from services.checkout import place_order

orders_bp = Blueprint('orders', __name__, url_prefix='/api/orders')


@orders_bp.route('', methods=['GET'])
@login_required
def list_orders():
    orders = order_store.list_orders(status=request.args.get('status') or None)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.route('/stats', methods=['GET'])
@login_required
def order_stats():
    return jsonify(order_store.order_stats())


@orders_bp.route('/<int:order_id>', methods=['GET'])
@login_required
def get_order(order_id):
    return jsonify(order_store.get_order(order_id).to_dict())


@orders_bp.route('', methods=['POST'])
def create_order():
    """إتمام الطلب من المتجر (لا يتطلب تسجيل دخول)"""
    data = json_body()
    CheckoutForm.from_json(data).validate_or_raise()
    customer = data.get('customer')
    CustomerForm.from_json(customer if isinstance(customer, dict) else {}).validate_or_raise()
    order = place_order(data)
    # الرد العام لا يعيد بيانات العميل
    return jsonify(order.to_dict(include_customer=False)), 201


@orders_bp.route('/<int:order_id>', methods=['PUT'])
@login_required
def update_order(order_id):
    data = json_body()
    OrderUpdateForm.from_json(data).validate_or_raise()
    return jsonify(order_store.update_order(order_id, data).to_dict())


@orders_bp.route('/<int:order_id>', methods=['DELETE'])
@login_required
def delete_order(order_id):
    order_store.delete_order(order_id)
    return jsonify({'success': True})
