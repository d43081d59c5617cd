from flask_babel import gettext as _
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from services.errors import ValidationError


class ApiForm(FlaskForm):
    """FlaskForm fed from a JSON body instead of submitted form data.

    Only scalar values are handed to the fields; nested lists (variants,
    cart items) are left to the service layer.
    """

    # أسماء الحقول القادمة من الواجهة بصيغة camelCase
    aliases = {}

    class Meta:
        csrf = False

    @classmethod
    def from_json(cls, payload):
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError(_('Invalid request data'))
        formdata = MultiDict()
        for key, value in payload.items():
            if value is None or isinstance(value, (list, dict)):
                continue
            formdata[cls.aliases.get(key, key)] = str(value)
        return cls(formdata=formdata)

    def validate_or_raise(self):
        if self.validate():
            return self
        for errors in self.errors.values():
            if errors:
                raise ValidationError(str(errors[0]))
        raise ValidationError(_('Invalid request data'))
