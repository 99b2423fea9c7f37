# audio_classifier/repositories/activity_repository.py
from sqlalchemy import select
from ..core.database import ActivityLog
from ..utils.logger import setup_logger

class ActivityRepository:
    def __init__(self, session):
        self.session = session
        self.logger = setup_logger()

    def append(self, account_id, action):
        """Repository: Append an audit entry (account_id None for system actions)"""
        try:
            entry = ActivityLog(account_id=account_id, action=action)
            self.session.add(entry)
            self.session.commit()
            self.logger.info(f"Repository: Logged {action} for account {account_id if account_id is not None else 'SYSTEM'}")
            return entry
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to log {action}: {str(e)}")
            raise

    def list_for_account(self, account_id):
        """Repository: Audit entries of one account, oldest first"""
        return self.session.execute(
            select(ActivityLog)
            .where(ActivityLog.account_id == account_id)
            .order_by(ActivityLog.id)
        ).scalars().all()
