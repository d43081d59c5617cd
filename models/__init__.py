import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


# SQLite لا يطبّق المفاتيح الأجنبية (CASCADE / SET NULL) إلا بتفعيلها لكل اتصال
@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


from .user import AdminUser
from .category import Category
from .product import Product, ProductVariant
from .customer import Customer
from .order import Order
from .settings import StoreSettings
from .system_log import SystemLog
from .analytics import AnalyticsEvent
