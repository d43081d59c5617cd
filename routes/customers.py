from io import BytesIO

import pandas as pd
from flask import Blueprint, request, jsonify, send_file
from flask_login import login_required

from forms.customer_forms import CustomerForm, CustomerUpdateForm
from routes import json_body
from services import customers as customer_store

customers_bp = Blueprint('customers', __name__, url_prefix='/api/customers')


@customers_bp.route('', methods=['GET'])
@login_required
def list_customers():
    q = request.args.get('q', '').strip()
    sort = request.args.get('sort', 'created_at')
    customers = customer_store.list_customers(q=q, sort=sort)
    return jsonify([c.to_dict() for c in customers])


@customers_bp.route('/export')
@login_required
def export_customers():
    customers = customer_store.list_customers()
    data = [{
        'الاسم': c.name,
        'رقم الهاتف': c.phone,
        'العنوان': c.address,
        'عدد الطلبات': len(c.orders),
        'تاريخ الإضافة': c.created_at.strftime('%Y-%m-%d %H:%M'),
    } for c in customers]
    df = pd.DataFrame(data, columns=['الاسم', 'رقم الهاتف', 'العنوان', 'عدد الطلبات', 'تاريخ الإضافة'])
    output = BytesIO()
    df.to_excel(output, index=False)
    output.seek(0)
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='customers_export.xlsx',
    )


@customers_bp.route('/<int:customer_id>', methods=['GET'])
@login_required
def get_customer(customer_id):
    return jsonify(customer_store.get_customer(customer_id).to_dict())


@customers_bp.route('', methods=['POST'])
@login_required
def create_customer():
    data = json_body()
    CustomerForm.from_json(data).validate_or_raise()
    customer = customer_store.create_customer(data)
    return jsonify(customer.to_dict()), 201


@customers_bp.route('/<int:customer_id>', methods=['PUT'])
@login_required
def update_customer(customer_id):
    data = json_body()
    CustomerUpdateForm.from_json(data).validate_or_raise()
    return jsonify(customer_store.update_customer(customer_id, data).to_dict())


@customers_bp.route('/<int:customer_id>', methods=['DELETE'])
@login_required
def delete_customer(customer_id):
    customer_store.delete_customer(customer_id)
    return jsonify({'success': True})
