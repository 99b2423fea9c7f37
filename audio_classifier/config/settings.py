# audio_classifier/config/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    LOGS_PATH = os.getenv('LOGS_PATH', os.path.join(BASE_DIR, '../../logs'))

    # MySQL configuration from .env, DATABASE_URL wins when set
    MYSQL_HOST = os.getenv('MYSQL_HOST', 'localhost')
    MYSQL_PORT = os.getenv('MYSQL_PORT', '3306')
    MYSQL_USER = os.getenv('MYSQL_USER', 'root')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD', '')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'audio_classifier_db')

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        f"mysql+pymysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DATABASE}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Keep 404 bodies to the APIError shape
    ERROR_404_HELP = False

    SECRET_KEY = os.getenv('SECRET_KEY', 'change-this-secret-key-in-production')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-this-jwt-secret-key-in-production')
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_TYPE = 'Bearer'
    DEBUG = os.getenv('FLASK_DEBUG', 'False') == 'True'

    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',') if o.strip()]

    # Account lockout and session policy
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 10))
    LOCKOUT_THRESHOLD = int(os.getenv('LOCKOUT_THRESHOLD', 3))
    LOCKOUT_MINUTES = int(os.getenv('LOCKOUT_MINUTES', 30))
    TOKEN_LIFETIME_HOURS = int(os.getenv('TOKEN_LIFETIME_HOURS', 24))


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = 'testing-jwt-secret-key-with-enough-length-for-hs256'
    BCRYPT_ROUNDS = 4
