from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional

from forms import ApiForm


class CategoryForm(ApiForm):
    aliases = {'nameAr': 'name_ar'}

    name = StringField('اسم الصنف', validators=[DataRequired(), Length(max=128)])
    name_ar = StringField('اسم الصنف بالعربية', validators=[Optional(), Length(max=128)])


class CategoryUpdateForm(CategoryForm):
    name = StringField('اسم الصنف', validators=[Optional(), Length(max=128)])
