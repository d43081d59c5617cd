from sqlalchemy.exc import SQLAlchemyError

from models import db
from services.errors import StorageError

# أكبر معرّف يتسع له عمود BIGINT
MAX_ID = 2 ** 63 - 1


def commit():
    """Commit the session, turning database failures into StorageError."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(cause=e)


def get_row(model, ident):
    """``db.session.get`` that treats ids no column can hold as missing."""
    if ident is None or not 0 < ident <= MAX_ID:
        return None
    return db.session.get(model, ident)
