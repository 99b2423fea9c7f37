# audio_classifier/services/auth_service.py
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import IntegrityError
from ..core.database import ROLE_ADMINISTRATOR, ROLE_USER, ROLES, utcnow
from ..core.results import ErrorKind, Result
from ..repositories.account_repository import AccountRepository
from ..repositories.activity_repository import ActivityRepository
from ..utils.logger import setup_logger
import bcrypt


@lru_cache(maxsize=None)
def _dummy_hash(rounds):
    # Compared against when the email is unknown, so every login costs one bcrypt check
    return bcrypt.hashpw(b'no-such-account', bcrypt.gensalt(rounds=rounds)).decode('utf-8')


@dataclass(frozen=True)
class Claims:
    """Identity carried by a session token."""
    account_id: int
    email: str
    role: str

    def to_dict(self):
        return {"id": self.account_id, "email": self.email, "role": self.role}


class AuthGuard:
    """Password login with progressive lockout, and bearer-token authorization.

    Every expected failure comes back as a ``Result`` carrying an
    ``ErrorKind``; only infrastructure errors are raised. Account state lives
    in the database, so one guard can be built per request.
    """

    def __init__(self, accounts, activity, lockout_threshold=3,
                 lockout_duration=timedelta(minutes=30),
                 token_lifetime=timedelta(hours=24),
                 bcrypt_rounds=10, clock=utcnow):
        self.accounts = accounts
        self.activity = activity
        self.lockout_threshold = lockout_threshold
        self.lockout_duration = lockout_duration
        self.token_lifetime = token_lifetime
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock
        self.logger = setup_logger()

    @classmethod
    def from_config(cls, session, config, clock=utcnow):
        return cls(
            AccountRepository(session),
            ActivityRepository(session),
            lockout_threshold=config['LOCKOUT_THRESHOLD'],
            lockout_duration=timedelta(minutes=config['LOCKOUT_MINUTES']),
            token_lifetime=timedelta(hours=config['TOKEN_LIFETIME_HOURS']),
            bcrypt_rounds=config['BCRYPT_ROUNDS'],
            clock=clock
        )

    def hash_password(self, password):
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode('utf-8')

    @staticmethod
    def verify_password(password, password_hash):
        try:
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        except ValueError:
            # Malformed stored hash or an over-long password never matches
            return False

    def authenticate(self, email, password):
        """Service: Check credentials, apply lockout policy and issue a session token"""
        account = self.accounts.get_by_email(email)
        if account is None:
            self.verify_password(password, _dummy_hash(self.bcrypt_rounds))
            self.logger.warning(f"Login failed: unknown email {email}")
            return Result.failure(ErrorKind.INVALID_CREDENTIALS)

        now = self.clock()
        if account.is_locked(now):
            # No password check while the lock is active
            self.logger.warning(f"Login refused: account {email} locked until {account.locked_until.isoformat()}")
            return Result.failure(ErrorKind.ACCOUNT_LOCKED)

        if not self.verify_password(password, account.password_hash):
            failed_count, locked_until = self.accounts.record_failed_login(
                account.id, now, self.lockout_threshold, self.lockout_duration
            )
            if locked_until is not None:
                self.logger.warning(f"Account {email} locked after {failed_count} failed logins")
                return Result.failure(ErrorKind.ACCOUNT_LOCKED)
            self.logger.warning(f"Login failed: wrong password for {email} ({failed_count}/{self.lockout_threshold})")
            return Result.failure(ErrorKind.INVALID_CREDENTIALS)

        self.accounts.clear_lockout(account.id, commit=False)
        self.activity.append(account.id, 'LOGIN')
        token = self.issue_token(account)
        self.logger.info(f"User logged in: {email}")
        return Result.success({"token": token, "account": account})

    def issue_token(self, account):
        """Service: Sign a session token for an account"""
        return create_access_token(
            identity=str(account.id),
            additional_claims={"email": account.email, "role": account.role},
            expires_delta=self.token_lifetime
        )

    def authorize(self, token, required_role=None):
        """Service: Validate a session token and, optionally, the role it carries.

        Bad signature, expiry, malformed payload and insufficient role all
        fail with ``ErrorKind.INVALID_TOKEN``; the precise reason is only
        logged.
        """
        try:
            decoded = decode_token(token)
        except (PyJWTError, JWTExtendedException, TypeError, ValueError) as e:
            self.logger.warning(f"Authorization failed: {type(e).__name__}: {str(e)}")
            return Result.failure(ErrorKind.INVALID_TOKEN)
        return self.authorize_claims(decoded, required_role)

    def authorize_claims(self, decoded, required_role=None):
        """Service: Check an already verified token payload against a role"""
        try:
            if decoded.get('type') != 'access':
                raise ValueError(f"unexpected token type {decoded.get('type')!r}")
            claims = Claims(
                account_id=int(decoded['sub']),
                email=decoded['email'],
                role=decoded['role']
            )
        except (KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Authorization failed: {type(e).__name__}: {str(e)}")
            return Result.failure(ErrorKind.INVALID_TOKEN)

        permission = self.check_role(claims, required_role)
        if not permission.ok:
            self.logger.warning(
                f"Authorization failed: {claims.email} has role {claims.role}, {required_role} required"
            )
            return Result.failure(ErrorKind.INVALID_TOKEN)
        return Result.success(claims)

    @staticmethod
    def check_role(claims, required_role):
        # Administrator satisfies every role requirement
        if required_role and claims.role not in (required_role, ROLE_ADMINISTRATOR):
            return Result.failure(ErrorKind.INSUFFICIENT_PERMISSIONS)
        return Result.success(claims)

    def create_account(self, email, password, role=ROLE_USER):
        """Service: Register an account; does not log it in"""
        if role not in ROLES:
            raise ValueError(f'Invalid role. Must be "{ROLE_USER}" or "{ROLE_ADMINISTRATOR}"')
        if self.accounts.get_by_email(email):
            self.logger.warning(f"Registration refused: {email} already exists")
            return Result.failure(ErrorKind.EMAIL_TAKEN)

        try:
            account = self.accounts.create_account(email, self.hash_password(password), role)
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            return Result.failure(ErrorKind.EMAIL_TAKEN)
        self.logger.info(f"User registered: {email} ({role})")
        return Result.success(account)

    def log_activity(self, account_id, action):
        """Service: Append an audit entry; account_id None marks a system action"""
        return self.activity.append(account_id, action)

    def get_account(self, account_id):
        account = self.accounts.get_by_id(account_id)
        if account is None:
            return Result.failure(ErrorKind.NOT_FOUND)
        return Result.success(account)

    def list_accounts(self):
        return self.accounts.list_accounts()

    def change_role(self, acting_account_id, account_id, role):
        """Service: Change the role of an account on behalf of an administrator"""
        if role not in ROLES:
            raise ValueError(f'Invalid role. Must be "{ROLE_USER}" or "{ROLE_ADMINISTRATOR}"')
        if account_id == acting_account_id and role != ROLE_ADMINISTRATOR:
            raise ValueError("Cannot remove your own administrator role")

        account = self.accounts.get_by_id(account_id)
        if account is None:
            return Result.failure(ErrorKind.NOT_FOUND)

        self.accounts.update_role(account.id, role)
        self.log_activity(acting_account_id, f"ROLE_CHANGE:{account.id}:{role}")
        return Result.success(account)

    def reset_password(self, email, password):
        """Service: Replace a password and lift any lockout"""
        account = self.accounts.get_by_email(email)
        if account is None:
            return Result.failure(ErrorKind.NOT_FOUND)

        self.accounts.update_password(account.id, self.hash_password(password))
        self.log_activity(None, f"PASSWORD_RESET:{account.id}")
        self.logger.info(f"Password reset for {email}")
        return Result.success(account)
