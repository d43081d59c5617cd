from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional

from forms import ApiForm


class CustomerForm(ApiForm):
    name = StringField('الاسم', validators=[DataRequired(), Length(max=128)])
    phone = StringField('الهاتف', validators=[DataRequired(), Length(max=32)])
    # العنوان يمكن تركيبه من المنزل والطريق والمجمع والمدينة
    address = StringField('العنوان', validators=[Optional()])
    home = StringField('المنزل', validators=[Optional(), Length(max=64)])
    road = StringField('الطريق', validators=[Optional(), Length(max=64)])
    block = StringField('المجمع', validators=[Optional(), Length(max=64)])
    town = StringField('المدينة', validators=[Optional(), Length(max=128)])


class CustomerUpdateForm(CustomerForm):
    name = StringField('الاسم', validators=[Optional(), Length(max=128)])
    phone = StringField('الهاتف', validators=[Optional(), Length(max=32)])
