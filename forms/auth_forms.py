from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length

from forms import ApiForm


class LoginForm(ApiForm):
    password = PasswordField('كلمة المرور', validators=[DataRequired()])


class ChangePasswordForm(ApiForm):
    aliases = {'currentPassword': 'current_password', 'newPassword': 'new_password'}

    current_password = PasswordField('كلمة المرور الحالية', validators=[DataRequired()])
    new_password = PasswordField('كلمة المرور الجديدة', validators=[DataRequired(), Length(min=6)])


class EmailForm(ApiForm):
    email = StringField('البريد الإلكتروني', validators=[DataRequired(), Email(), Length(max=255)])
