from wtforms import StringField, DecimalField, IntegerField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Length, Optional

from forms import ApiForm


class ProductForm(ApiForm):
    aliases = {
        'nameAr': 'name_ar',
        'descriptionAr': 'description_ar',
        'categoryId': 'category_id',
        'totalStock': 'total_stock',
    }

    name = StringField('اسم المنتج', validators=[DataRequired(), Length(max=200)])
    name_ar = StringField('اسم المنتج بالعربية', validators=[Optional(), Length(max=200)])
    description = StringField('الوصف', validators=[Optional()])
    description_ar = StringField('الوصف بالعربية', validators=[Optional()])
    price = DecimalField('السعر', places=3, validators=[InputRequired(), NumberRange(min=0)])
    category_id = StringField('الصنف', validators=[Optional()])
    total_stock = IntegerField('الكمية', validators=[Optional(), NumberRange(min=0)])
    stock = IntegerField('الكمية', validators=[Optional(), NumberRange(min=0)])


class ProductUpdateForm(ProductForm):
    name = StringField('اسم المنتج', validators=[Optional(), Length(max=200)])
    price = DecimalField('السعر', places=3, validators=[Optional(), NumberRange(min=0)])
