# audio_classifier/api/middleware.py
from functools import wraps
from flask import current_app, g
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from .. import db
from ..repositories.evaluation_repository import EvaluationRepository
from ..services.auth_service import AuthGuard
from ..services.metrics_service import MetricsEngine
from ..core.results import ErrorKind
from ..utils.exceptions import raise_for_kind

def get_auth_guard():
    return AuthGuard.from_config(db.session, current_app.config)

def get_metrics_engine():
    return MetricsEngine(EvaluationRepository(db.session))

def auth_required(role=None):
    """Require a valid bearer token, and the given role when one is named.

    Flask-JWT-Extended reads and verifies the ``Authorization`` header; the
    claims are then checked by ``AuthGuard`` and exposed as
    ``g.current_account``. Every failure is reported as an invalid token.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth_guard = get_auth_guard()
            try:
                verify_jwt_in_request()
            except (JWTExtendedException, PyJWTError) as e:
                auth_guard.logger.warning(f"Authorization failed: {type(e).__name__}: {str(e)}")
                raise_for_kind(ErrorKind.INVALID_TOKEN)

            result = auth_guard.authorize_claims(get_jwt(), role)
            if not result.ok:
                raise_for_kind(result.error)
            g.current_account = result.value
            return fn(*args, **kwargs)
        return wrapper
    return decorator
