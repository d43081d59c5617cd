from wtforms import StringField
from wtforms.validators import DataRequired, AnyOf, Length, Optional

from forms import ApiForm
from models.system_log import LOG_LEVELS, LOG_CATEGORIES


class SystemLogForm(ApiForm):
    level = StringField('المستوى', validators=[Optional(), AnyOf(LOG_LEVELS)])
    category = StringField('التصنيف', validators=[Optional(), AnyOf(LOG_CATEGORIES)])
    message = StringField('الرسالة', validators=[DataRequired(), Length(max=500)])
