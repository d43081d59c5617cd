from wtforms import StringField
from wtforms.validators import AnyOf, Optional

from forms import ApiForm
from models.order import ORDER_STATUSES, DELIVERY_TYPES, DELIVERY_AREAS


class CheckoutForm(ApiForm):
    aliases = {'deliveryType': 'delivery_type', 'deliveryArea': 'delivery_area'}

    delivery_type = StringField('طريقة الاستلام', validators=[Optional(), AnyOf(DELIVERY_TYPES)])
    delivery_area = StringField('منطقة التوصيل', validators=[Optional(), AnyOf(DELIVERY_AREAS)])
    notes = StringField('ملاحظات', validators=[Optional()])


class OrderUpdateForm(CheckoutForm):
    status = StringField('الحالة', validators=[Optional(), AnyOf(ORDER_STATUSES)])
