# audio_classifier/repositories/evaluation_repository.py
import json
import math
from sqlalchemy import select
from ..core.database import EvaluationResult
from ..utils.logger import setup_logger

METRIC_FIELDS = ('accuracy', 'precision', 'recall', 'f1_score')

def _to_column(value):
    # Databases have no portable NaN, so it is stored as NULL
    if value is None or math.isnan(value):
        return None
    return float(value)

def _from_column(value):
    return math.nan if value is None else value

class EvaluationRepository:
    def __init__(self, session):
        self.session = session
        self.logger = setup_logger()

    def get_by_model_id(self, model_id):
        """Repository: Load the stored evaluation of a model as plain data, or None"""
        try:
            record = self.session.execute(
                select(EvaluationResult).where(EvaluationResult.model_id == model_id)
            ).scalar_one_or_none()
        except Exception as e:
            self.logger.error(f"Repository: Failed to get evaluation for model {model_id}: {str(e)}")
            raise

        if record is None:
            return None

        data = {field: _from_column(getattr(record, field)) for field in METRIC_FIELDS}
        data["model_id"] = record.model_id
        data["classes"] = json.loads(record.class_labels)
        data["confusion_matrix"] = json.loads(record.confusion_matrix)
        return data

    def upsert(self, model_id, metrics, classes, matrix):
        """Repository: Create or overwrite the evaluation of a model"""
        try:
            record = self.session.execute(
                select(EvaluationResult).where(EvaluationResult.model_id == model_id)
            ).scalar_one_or_none()
            if record is None:
                record = EvaluationResult(model_id=model_id)
                self.session.add(record)

            for field in METRIC_FIELDS:
                setattr(record, field, _to_column(metrics[field]))
            record.class_labels = json.dumps(list(classes))
            record.confusion_matrix = json.dumps(matrix)

            self.session.commit()
            self.logger.info(f"Repository: Stored evaluation for model {model_id}")
            return record
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Repository: Failed to store evaluation for model {model_id}: {str(e)}")
            raise
