from flask_babel import gettext as _

from models.settings import StoreSettings, MONEY_SETTINGS, TEXT_SETTINGS
from services import commit, system_log
from services.errors import ValidationError
from services.pricing import to_money

# مفاتيح واجهة الإعدادات القديمة (camelCase)
CLIENT_KEYS = {
    'deliveryFee': 'delivery_fee',
    'freeDeliveryMinimum': 'free_delivery_minimum',
    'deliveryAreaSitra': 'delivery_area_sitra',
    'deliveryAreaMuharraq': 'delivery_area_muharraq',
    'deliveryAreaOther': 'delivery_area_other',
    'storeName': 'store_name',
    'storeNameAr': 'store_name_ar',
}


def update_settings(data):
    """Apply a settings patch; each change bumps the pricing version."""
    settings = StoreSettings.get_current()
    data = {CLIENT_KEYS.get(key, key): value for key, value in data.items()}
    changed = {}
    for key in MONEY_SETTINGS:
        if key in data:
            amount = to_money(data[key], key)
            if amount < 0:
                raise ValidationError(_('%(field)s cannot be negative', field=key))
            setattr(settings, key, amount)
            changed[key] = str(amount)
    for key in TEXT_SETTINGS:
        if key in data:
            value = str(data[key] or '').strip()
            if key in ('store_name', 'currency') and not value:
                raise ValidationError(_('%(field)s is required', field=key))
            setattr(settings, key, value or None)
            changed[key] = value
    if changed:
        settings.version = (settings.version or 1) + 1
        commit()
        system_log.record('info', 'system', 'Store settings updated', changed)
    return settings
