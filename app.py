"""
Ezekiel Ezaiah Event & Catering - Reservation Booking Service
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf, booking_runtime

# Import database functions
from database import close_db, init_db


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    if config_name == 'production':
        config[config_name].validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)
    # Reservation feed, availability index and booking sessions
    booking_runtime.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.booking import booking_bp

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(booking_bp, url_prefix='/api')

    @app.route('/')
    def index():
        """Service banner."""
        from utils.api_response import api_success

        return api_success(data={
            'name': app.config.get('APP_NAME'),
            'version': app.config.get('APP_VERSION'),
        })


def register_error_handlers(app):
    """Register error handlers."""
    from flask_wtf.csrf import CSRFError
    from utils.api_response import api_error
    from utils.messages import MESSAGES

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(MESSAGES['not_found'], status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return api_error(MESSAGES['invalid_request'], status=405)

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return api_error(error.description, status=400)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        app.logger.error(f'Unhandled error: {error}')
        return api_error(MESSAGES['server_error'], status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('email')
    @click.option('--name', 'full_name', default=None, help='Full name')
    @click.option('--verified/--unverified', default=True, help='Mark the email as verified')
    @click.password_option()
    def create_user_command(email, full_name, verified, password):
        """Create a new customer account."""
        from models.user import create_user
        from utils.validators import validate_email

        email = email.strip().lower()
        if not validate_email(email):
            click.echo(f'Error creating user: invalid email {email}', err=True)
            return

        with app.app_context():
            try:
                uid = create_user(
                    email=email,
                    password=password,
                    full_name=full_name,
                    email_verified=verified
                )
                click.echo(f'User created successfully! uid: {uid}')
            except Exception as e:
                click.echo(f'Error creating user: {str(e)}', err=True)

    @app.cli.command('import-reservations')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_reservations_command(path):
        """Import exported reservation documents from a JSON file."""
        from models.reservation_import import import_reservations, load_documents
        from utils.messages import get_message

        with app.app_context():
            documents = load_documents(path)
            imported, skipped = import_reservations(documents, app.config['DOWNPAYMENT_RATIO'])
        click.echo(get_message('import_success', imported=imported, skipped=skipped))


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/catering.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Catering reservations startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
