# audio_classifier/core/database.py
from .. import db
from datetime import datetime, timezone

ROLE_USER = 'User'
ROLE_ADMINISTRATOR = 'Administrator'
ROLES = (ROLE_USER, ROLE_ADMINISTRATOR)

def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

class Account(db.Model):
    __tablename__ = 'accounts'

    id = db.Column(db.Integer, primary_key=True)
    # Binary collation keeps email equality case-sensitive on MySQL
    email = db.Column(
        db.String(255).with_variant(db.String(255, collation='utf8mb4_bin'), 'mysql', 'mariadb'),
        unique=True,
        nullable=False
    )
    password_hash = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)
    failed_login_count = db.Column(db.Integer, nullable=False, default=0)
    locked_until = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def is_locked(self, now):
        return self.locked_until is not None and self.locked_until > now

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "failed_login_count": self.failed_login_count,
            "locked_until": self.locked_until.isoformat() if self.locked_until else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class ActivityLog(db.Model):
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    # NULL marks a system-initiated action
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id', ondelete='SET NULL'), nullable=True)
    action = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

class EvaluationResult(db.Model):
    __tablename__ = 'evaluation_results'

    id = db.Column(db.Integer, primary_key=True)
    model_id = db.Column(db.Integer, unique=True, nullable=False)
    # NaN metrics are stored as NULL
    accuracy = db.Column(db.Float(precision=53), nullable=True)
    precision = db.Column(db.Float(precision=53), nullable=True)
    recall = db.Column(db.Float(precision=53), nullable=True)
    f1_score = db.Column(db.Float(precision=53), nullable=True)
    class_labels = db.Column(db.Text, nullable=False)
    confusion_matrix = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
