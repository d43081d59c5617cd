from email_validator import validate_email, EmailNotValidError
from flask import current_app
from flask_babel import gettext as _

from models import db
from models.user import AdminUser
from services import commit, system_log
from services.errors import ValidationError, Unauthorized, NotFound

MIN_PASSWORD_LENGTH = 6


def get_admin():
    return AdminUser.query.order_by(AdminUser.id).first()


def ensure_default_admin():
    """Create the single admin account if none exists yet."""
    admin = get_admin()
    if admin is not None:
        return admin
    admin = AdminUser(email=current_app.config['DEFAULT_ADMIN_EMAIL'])
    admin.set_password(current_app.config['DEFAULT_ADMIN_PASSWORD'])
    db.session.add(admin)
    commit()
    current_app.logger.info('Default admin account created for %s', admin.email)
    return admin


def authenticate(password):
    admin = get_admin()
    if admin is None or not password or not admin.check_password(password):
        system_log.record('warning', 'security', 'Failed admin login attempt')
        raise Unauthorized(_('Invalid password'))
    return admin


def change_password(current_password, new_password):
    if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(_('New password must be at least %(num)s characters', num=MIN_PASSWORD_LENGTH))
    admin = get_admin()
    if admin is None or not current_password or not admin.check_password(current_password):
        system_log.record('warning', 'security', 'Password change rejected: wrong current password')
        raise Unauthorized(_('Current password is incorrect'))
    admin.set_password(new_password)
    commit()
    system_log.record('info', 'security', 'Admin password changed')
    return admin


def update_email(email):
    try:
        email = validate_email(email or '', check_deliverability=False).normalized
    except EmailNotValidError:
        raise ValidationError(_('Valid email is required'))
    admin = get_admin()
    if admin is None:
        raise NotFound(_('Admin user not found'))
    admin.email = email
    commit()
    system_log.record('info', 'security', 'Admin email updated', {'email': email})
    return admin


def get_admin_info():
    admin = get_admin()
    if admin is None:
        raise NotFound(_('Admin user not found'))
    return admin.to_dict()
