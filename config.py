import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your_secret_key_here'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///azhar_store.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True, 'pool_timeout': 10}
    # مهلة كل استعلام على PostgreSQL بالمللي ثانية
    DB_STATEMENT_TIMEOUT_MS = int(os.environ.get('DB_STATEMENT_TIMEOUT_MS', 5000))

    BABEL_DEFAULT_LOCALE = 'ar'
    LANGUAGES = ['ar', 'en']

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    MAX_SYSTEM_LOGS = 1000
    MAX_ANALYTICS_EVENTS = 10000

    # صور المنتجات المرفوعة من لوحة التحكم
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    MAX_UPLOAD_FILES = 10
    MAX_CONTENT_LENGTH = MAX_IMAGE_SIZE * MAX_UPLOAD_FILES

    # حساب المدير الافتراضي (يُنشأ مرة واحدة فقط)
    DEFAULT_ADMIN_EMAIL = os.environ.get('DEFAULT_ADMIN_EMAIL') or 'admin@azharstore.com'
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD') or 'azhar2311'

    # قيم التوصيل الافتراضية قبل حفظ الإعدادات من لوحة التحكم
    DEFAULT_STORE_SETTINGS = {
        'store_name': 'Azhar Store',
        'store_name_ar': 'متجر أزهر',
        'currency': 'BHD',
        'delivery_fee': '1.500',
        'free_delivery_minimum': '20.000',
        'delivery_area_sitra': '1.000',
        'delivery_area_muharraq': '1.500',
        'delivery_area_other': '2.000',
        'delivery_area_sitra_name_ar': 'سترة',
        'delivery_area_sitra_name_en': 'Sitra',
        'delivery_area_muharraq_name_ar': 'المحرق، عسكر، جو',
        'delivery_area_muharraq_name_en': 'Muharraq, Askar, Jao',
        'delivery_area_other_name_ar': 'مدن أخرى',
        'delivery_area_other_name_en': 'Other Cities',
    }


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    DEFAULT_ADMIN_PASSWORD = 'azhar2311'
