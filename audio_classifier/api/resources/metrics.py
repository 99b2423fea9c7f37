# audio_classifier/api/resources/metrics.py
import math
from flask import g
from flask_restful import Resource, reqparse
from ..middleware import auth_required, get_auth_guard, get_metrics_engine
from ...core.database import ROLE_ADMINISTRATOR
from ...utils.exceptions import APIError, raise_for_kind

def json_number(value):
    # NaN and infinities are not valid JSON
    return value if value is None or math.isfinite(value) else None

def serialize_report(report):
    data = report.to_dict()
    for key in ('accuracy', 'precision', 'recall', 'f1_score'):
        data[key] = json_number(data[key])
    return data

def prediction_pair(value):
    """reqparse type for one ``{"predicted": ..., "actual": ...}`` object"""
    if not isinstance(value, dict) or set(value) != {'predicted', 'actual'}:
        raise ValueError("each prediction must be an object with exactly 'predicted' and 'actual'")
    predicted, actual = value['predicted'], value['actual']
    if not isinstance(predicted, str) or not isinstance(actual, str) or not predicted or not actual:
        raise ValueError("'predicted' and 'actual' must be non-empty strings")
    return predicted, actual

class ModelMetrics(Resource):
    @auth_required()
    def get(self, model_id):
        """Controller: Evaluation metrics and confusion matrix of a model"""
        result = get_metrics_engine().get_evaluation(model_id)
        if not result.ok:
            raise_for_kind(result.error, "Evaluation not found for this model")
        return serialize_report(result.value), 200

class ModelConfusionMatrix(Resource):
    @auth_required()
    def get(self, model_id):
        """Controller: Confusion matrix of a model"""
        result = get_metrics_engine().generate_confusion_matrix(model_id)
        if not result.ok:
            raise_for_kind(result.error, "Evaluation not found")
        return {"model_id": model_id, "confusion_matrix": result.value}, 200

class ModelEvaluation(Resource):
    @auth_required(ROLE_ADMINISTRATOR)
    def post(self, model_id):
        """Controller: Compute and store metrics from labelled predictions"""
        parser = reqparse.RequestParser()
        parser.add_argument('predictions', type=prediction_pair, action='append', required=True,
                            location='json', help="predictions: {error_msg}")
        args = parser.parse_args(strict=True)

        if not args['predictions']:
            raise APIError("predictions must not be empty", status_code=400)

        report = get_metrics_engine().record_evaluation(model_id, args['predictions'])
        get_auth_guard().log_activity(g.current_account.account_id, f"EVALUATION:{model_id}")
        return serialize_report(report), 201
