import logging

from flask import Flask, current_app, has_request_context, jsonify, request, send_from_directory
from flask_babel import Babel, gettext as _
from flask_login import LoginManager
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from models.settings import StoreSettings
from models.user import AdminUser
from services import system_log
from services.auth import ensure_default_admin
from services.errors import StoreError, StorageError

# Initialize extensions
login_manager = LoginManager()
babel = Babel()


def get_locale():
    # ?lang=en أو لغة المتصفح، والعربية افتراضياً
    default = current_app.config['BABEL_DEFAULT_LOCALE']
    if not has_request_context():
        return default
    languages = current_app.config['LANGUAGES']
    lang = request.args.get('lang')
    if lang in languages:
        return lang
    return request.accept_languages.best_match(languages) or default


def _engine_options(app):
    options = dict(app.config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgresql'):
        connect_args = dict(options.get('connect_args') or {})
        connect_args['options'] = '-c statement_timeout=%d' % app.config['DB_STATEMENT_TIMEOUT_MS']
        options['connect_args'] = connect_args
    return options


def register_error_handlers(app):
    @app.errorhandler(StoreError)
    def handle_store_error(e):
        db.session.rollback()
        if isinstance(e, StorageError):
            app.logger.error('Storage error: %s', e.cause)
            try:
                system_log.record('error', 'system', 'Storage error', {'cause': str(e.cause)})
            except SQLAlchemyError:
                db.session.rollback()
                app.logger.exception('Could not persist storage error to system log')
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        app.logger.exception('Unhandled error on %s %s', request.method, request.path)
        return jsonify({'error': _('Internal server error')}), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = _engine_options(app)
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    db.init_app(app)
    login_manager.init_app(app)
    babel.init_app(app, locale_selector=get_locale)

    # Flask-Login user loader
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(AdminUser, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': _('Authentication required')}), 401

    # Register Blueprints
    from routes.auth import auth_bp
    app.register_blueprint(auth_bp)
    from routes.products import products_bp
    app.register_blueprint(products_bp)
    from routes.categories import categories_bp
    app.register_blueprint(categories_bp)
    from routes.customers import customers_bp
    app.register_blueprint(customers_bp)
    from routes.orders import orders_bp
    app.register_blueprint(orders_bp)
    from routes.settings import settings_bp
    app.register_blueprint(settings_bp)
    from routes.analytics import analytics_bp
    app.register_blueprint(analytics_bp)
    from routes.logs import logs_bp
    app.register_blueprint(logs_bp)
    from routes.uploads import uploads_bp
    app.register_blueprint(uploads_bp)

    register_error_handlers(app)

    @app.route('/api/ping')
    def ping():
        return jsonify({'status': 'ok', 'message': 'pong'})

    # الصور المرفوعة متاحة للمتجر بدون تسجيل دخول
    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    with app.app_context():
        db.create_all()
        ensure_default_admin()
        StoreSettings.get_current()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
