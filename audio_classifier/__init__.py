from flask import Flask
from flask_restful import Api
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from .config.settings import Config
from .utils.logger import setup_logger
from .utils.exceptions import handle_api_error

db = SQLAlchemy()
jwt = JWTManager()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize CORS
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    api = Api(app)

    # Setup logger
    logger = setup_logger()
    logger.info("Initializing backend application")

    # Register error handler
    app.errorhandler(Exception)(handle_api_error)

    # Register API resources
    from .api.resources.health import HealthCheck
    from .api.resources.auth import Register, Login, CurrentUser
    from .api.resources.users import UserList
    from .api.resources.metrics import ModelMetrics, ModelConfusionMatrix, ModelEvaluation

    api.add_resource(HealthCheck, '/')
    api.add_resource(Register, '/api/auth/register')
    api.add_resource(Login, '/api/auth/login')
    api.add_resource(CurrentUser, '/api/auth/me')
    api.add_resource(UserList, '/api/users')
    api.add_resource(ModelMetrics, '/api/models/<int:model_id>/metrics')
    api.add_resource(ModelConfusionMatrix, '/api/models/<int:model_id>/confusion-matrix')
    api.add_resource(ModelEvaluation, '/api/models/<int:model_id>/evaluation')

    from .cli import register_commands
    register_commands(app)

    # Initialize database
    from .core import database  # noqa: F401  registers the models
    with app.app_context():
        db.create_all()

    return app
