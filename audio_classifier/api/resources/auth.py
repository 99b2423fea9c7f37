# audio_classifier/api/resources/auth.py
import re
from flask import g
from flask_restful import Resource, reqparse
from ..middleware import auth_required, get_auth_guard
from ...core.database import ROLE_ADMINISTRATOR, ROLE_USER
from ...utils.exceptions import APIError, raise_for_kind

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

def validate_password(password):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise APIError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", status_code=400)
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise APIError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long", status_code=400)

def require_credentials(args):
    # Empty values never reach the lockout counter
    if not args['email'] or not args['password']:
        raise APIError("Email and password are required", status_code=400)

def public_account(account):
    return {"id": account.id, "email": account.email, "role": account.role}

class Register(Resource):
    def post(self):
        """Controller: Register a new account and return a session token"""
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, required=True, nullable=False, location='json', help="Email is required")
        parser.add_argument('password', type=str, required=True, nullable=False, location='json', help="Password is required")
        parser.add_argument('role', type=str, required=False, location='json', default=ROLE_USER)
        args = parser.parse_args(strict=True)

        require_credentials(args)
        if not EMAIL_PATTERN.match(args['email']):
            raise APIError("Invalid email format", status_code=400)
        validate_password(args['password'])

        # Administrators are only created by other administrators or the CLI
        role = ROLE_USER if args['role'] in (None, ROLE_ADMINISTRATOR) else args['role']

        auth_guard = get_auth_guard()
        try:
            result = auth_guard.create_account(args['email'], args['password'], role)
        except ValueError as e:
            raise APIError(str(e), status_code=400)
        if not result.ok:
            raise_for_kind(result.error)

        account = result.value
        auth_guard.log_activity(account.id, 'REGISTRATION')
        token = auth_guard.issue_token(account)
        return {
            "message": "User registered successfully",
            "access_token": token,
            "user": public_account(account)
        }, 201

class Login(Resource):
    def post(self):
        """Controller: Login and return a session token"""
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, required=True, nullable=False, location='json', help="Email is required")
        parser.add_argument('password', type=str, required=True, nullable=False, location='json', help="Password is required")
        args = parser.parse_args(strict=True)

        require_credentials(args)
        result = get_auth_guard().authenticate(args['email'], args['password'])
        if not result.ok:
            raise_for_kind(result.error)
        return {
            "access_token": result.value["token"],
            "user": public_account(result.value["account"])
        }, 200

class CurrentUser(Resource):
    @auth_required()
    def get(self):
        """Controller: Get current account info"""
        result = get_auth_guard().get_account(g.current_account.account_id)
        if not result.ok:
            raise_for_kind(result.error)
        return public_account(result.value), 200
