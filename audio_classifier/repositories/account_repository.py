# audio_classifier/repositories/account_repository.py
from sqlalchemy import select, update
from ..core.database import Account
from ..utils.logger import setup_logger

class AccountRepository:
    def __init__(self, session):
        self.session = session
        self.logger = setup_logger()

    def create_account(self, email, password_hash, role):
        """Repository: Create a new account with a clean lockout state"""
        try:
            account = Account(
                email=email,
                password_hash=password_hash,
                role=role,
                failed_login_count=0,
                locked_until=None
            )
            self.session.add(account)
            self.session.commit()
            self.logger.info(f"Repository: Created account {email}")
            return account
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to create account {email}: {str(e)}")
            raise

    def get_by_email(self, email):
        """Repository: Get account by email"""
        try:
            return self.session.execute(
                select(Account).where(Account.email == email)
            ).scalar_one_or_none()
        except Exception as e:
            self.logger.error(f"Repository: Failed to get account {email}: {str(e)}")
            raise

    def get_by_id(self, account_id):
        """Repository: Get account by ID"""
        try:
            return self.session.get(Account, account_id)
        except Exception as e:
            self.logger.error(f"Repository: Failed to get account ID {account_id}: {str(e)}")
            raise

    def list_accounts(self):
        """Repository: List all accounts, newest first"""
        try:
            return self.session.execute(
                select(Account).order_by(Account.created_at.desc(), Account.id.desc())
            ).scalars().all()
        except Exception as e:
            self.logger.error(f"Repository: Failed to list accounts: {str(e)}")
            raise

    def record_failed_login(self, account_id, now, threshold, lock_duration):
        """Repository: Count a failed login and lock the account once the threshold is reached.

        The counter is incremented in the database rather than in Python, so
        the row stays write-locked until commit and concurrent failures are
        never lost. Returns ``(failed_login_count, locked_until)``.
        """
        try:
            self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(failed_login_count=Account.failed_login_count + 1)
            )
            failed_count = self.session.execute(
                select(Account.failed_login_count).where(Account.id == account_id)
            ).scalar_one()
            locked_until = now + lock_duration if failed_count >= threshold else None
            self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(locked_until=locked_until)
            )
            self.session.commit()
            self.logger.info(f"Repository: Failed login {failed_count} recorded for account ID {account_id}")
            return failed_count, locked_until
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to record failed login for account ID {account_id}: {str(e)}")
            raise

    def clear_lockout(self, account_id, commit=True):
        """Repository: Reset failed login count and lock"""
        try:
            self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(failed_login_count=0, locked_until=None)
            )
            if commit:
                self.session.commit()
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to clear lockout for account ID {account_id}: {str(e)}")
            raise

    def update_password(self, account_id, password_hash):
        """Repository: Replace password hash and clear lockout state"""
        try:
            self.session.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(password_hash=password_hash, failed_login_count=0, locked_until=None)
            )
            self.session.commit()
            self.logger.info(f"Repository: Updated password for account ID {account_id}")
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to update password for account ID {account_id}: {str(e)}")
            raise

    def update_role(self, account_id, role):
        """Repository: Change account role"""
        try:
            self.session.execute(
                update(Account).where(Account.id == account_id).values(role=role)
            )
            self.session.commit()
            self.logger.info(f"Repository: Set role {role} for account ID {account_id}")
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to update role for account ID {account_id}: {str(e)}")
            raise
