from flask import request
from flask_babel import gettext as _

from services.errors import ValidationError


def json_body():
    """Request body as a dict; an empty or non-JSON body counts as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(_('Invalid request data'))
    return data
