# audio_classifier/api/resources/users.py
from flask import g
from flask_restful import Resource, reqparse
from ..middleware import auth_required, get_auth_guard
from ...core.database import ROLE_ADMINISTRATOR
from ...utils.exceptions import APIError, raise_for_kind

class UserList(Resource):
    @auth_required(ROLE_ADMINISTRATOR)
    def get(self):
        """Controller: List all accounts with their lockout state"""
        accounts = get_auth_guard().list_accounts()
        return [account.to_dict() for account in accounts], 200

    @auth_required(ROLE_ADMINISTRATOR)
    def patch(self):
        """Controller: Change the role of an account"""
        parser = reqparse.RequestParser()
        parser.add_argument('userId', type=int, required=True, nullable=False, location='json', help="userId is required")
        parser.add_argument('role', type=str, required=True, nullable=False, location='json', help="role is required")
        args = parser.parse_args(strict=True)

        try:
            result = get_auth_guard().change_role(g.current_account.account_id, args['userId'], args['role'])
        except ValueError as e:
            raise APIError(str(e), status_code=400)
        if not result.ok:
            raise_for_kind(result.error, "User not found")

        account = result.value
        return {
            "message": "User role updated successfully",
            "user": {"id": account.id, "email": account.email, "role": account.role}
        }, 200
