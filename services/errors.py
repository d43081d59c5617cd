from flask_babel import gettext as _


class StoreError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code = 400

    def __init__(self, message, **payload):
        super().__init__(message)
        self.message = message
        self.payload = payload

    def to_dict(self):
        data = dict(self.payload)
        data['error'] = self.message
        return data


class ValidationError(StoreError):
    status_code = 400


class InvalidReference(StoreError):
    status_code = 400


class NotFound(StoreError):
    status_code = 404


class Unauthorized(StoreError):
    status_code = 401


class InsufficientStock(StoreError):
    status_code = 400

    def __init__(self, product, variant, available, requested):
        if variant is not None:
            message = _('Insufficient stock for %(product)s (%(variant)s). Available: %(available)s, Requested: %(requested)s',
                        product=product.name, variant=variant.name, available=available, requested=requested)
        else:
            message = _('Insufficient stock for %(product)s. Available: %(available)s, Requested: %(requested)s',
                        product=product.name, available=available, requested=requested)
        super().__init__(
            message,
            product_id=product.id,
            variant_id=variant.id if variant is not None else None,
            available=available,
            requested=requested,
        )


class StorageError(StoreError):
    """The database rejected a write or could not be reached.

    The message shown to the client is always generic; the underlying
    exception is kept on ``cause`` for logging.
    """

    status_code = 500

    def __init__(self, message=None, cause=None):
        super().__init__(message or _('A storage error occurred, please try again later'))
        self.cause = cause
