from wtforms import DecimalField, StringField
from wtforms.validators import NumberRange, Length, Optional

from forms import ApiForm
from services.settings import CLIENT_KEYS


class SettingsForm(ApiForm):
    aliases = CLIENT_KEYS

    store_name = StringField('اسم المتجر', validators=[Optional(), Length(max=128)])
    store_name_ar = StringField('اسم المتجر بالعربية', validators=[Optional(), Length(max=128)])
    delivery_fee = DecimalField('رسوم التوصيل', places=3, validators=[Optional(), NumberRange(min=0)])
    free_delivery_minimum = DecimalField('الحد الأدنى للتوصيل المجاني', places=3,
                                         validators=[Optional(), NumberRange(min=0)])
    delivery_area_sitra = DecimalField('سترة', places=3, validators=[Optional(), NumberRange(min=0)])
    delivery_area_muharraq = DecimalField('المحرق', places=3, validators=[Optional(), NumberRange(min=0)])
    delivery_area_other = DecimalField('مدن أخرى', places=3, validators=[Optional(), NumberRange(min=0)])
