# audio_classifier/services/metrics_service.py
import math
from dataclasses import dataclass, field
from ..core.results import ErrorKind, Result
from ..utils.logger import setup_logger


def _ratio(numerator, denominator):
    # Every caller has numerator 0 when denominator is 0: NaN instead of raising
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _pair(prediction):
    if isinstance(prediction, dict):
        return prediction['predicted'], prediction['actual']
    predicted, actual = prediction
    return predicted, actual


@dataclass
class MetricsReport:
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    classes: list = field(default_factory=list)
    # {actual: {predicted: count}}, both levels in class order
    confusion_matrix: dict = field(default_factory=dict)

    def matrix_rows(self):
        """Square list-of-lists form: rows are actual classes, columns predicted."""
        return [[self.confusion_matrix[actual][predicted] for predicted in self.classes]
                for actual in self.classes]

    def metrics(self):
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1_score": self.f1_score,
        }


def calculate_metrics(predictions):
    """Confusion matrix plus accuracy and macro-averaged precision, recall and F1.

    ``predictions`` holds ``(predicted, actual)`` pairs or mappings with
    ``predicted`` and ``actual`` keys. Classes are ordered by first
    appearance among all predicted labels, then all actual labels.

    Every class weighs the same in the averages; a class with no predicted
    (or no actual) samples contributes 0 precision (or recall). Degenerate
    inputs are not special-cased: an empty list gives NaN accuracy, and F1 is
    NaN when precision and recall are both 0.
    """
    pairs = [_pair(p) for p in predictions]

    classes = list(dict.fromkeys([predicted for predicted, _ in pairs] + [actual for _, actual in pairs]))
    matrix = {actual: {predicted: 0 for predicted in classes} for actual in classes}
    for predicted, actual in pairs:
        matrix[actual][predicted] += 1

    true_positives = {}
    false_positives = {}
    false_negatives = {}
    for cls in classes:
        tp = matrix[cls][cls]
        true_positives[cls] = tp
        false_positives[cls] = sum(row[cls] for row in matrix.values()) - tp
        false_negatives[cls] = sum(matrix[cls].values()) - tp

    accuracy = _ratio(sum(true_positives.values()), len(pairs))

    def macro(denominators):
        per_class = [
            true_positives[cls] / (true_positives[cls] + denominators[cls])
            if true_positives[cls] + denominators[cls] > 0 else 0
            for cls in classes
        ]
        return _ratio(sum(per_class), len(classes))

    precision = macro(false_positives)
    recall = macro(false_negatives)
    f1_score = _ratio(2 * precision * recall, precision + recall)

    return MetricsReport(
        accuracy=accuracy,
        precision=precision,
        recall=recall,
        f1_score=f1_score,
        classes=classes,
        confusion_matrix=matrix
    )


@dataclass
class EvaluationReport:
    model_id: int
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    classes: list
    confusion_matrix: list

    def to_dict(self):
        return {
            "model_id": self.model_id,
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1_score": self.f1_score,
            "classes": self.classes,
            "confusion_matrix": self.confusion_matrix,
        }


class MetricsEngine:
    def __init__(self, repository):
        self.repository = repository
        self.logger = setup_logger()

    def get_evaluation(self, model_id):
        """Service: Stored metrics and confusion matrix of a model"""
        data = self.repository.get_by_model_id(model_id)
        if data is None:
            self.logger.warning(f"Service: No evaluation found for model {model_id}")
            return Result.failure(ErrorKind.NOT_FOUND)
        self.logger.info(f"Service: Retrieved evaluation for model {model_id}")
        return Result.success(EvaluationReport(**data))

    def generate_confusion_matrix(self, model_id):
        """Service: Stored confusion matrix of a model"""
        result = self.get_evaluation(model_id)
        if not result.ok:
            return result
        return Result.success(result.value.confusion_matrix)

    def record_evaluation(self, model_id, predictions):
        """Service: Compute metrics for a model's predictions and store them"""
        report = calculate_metrics(predictions)
        matrix = report.matrix_rows()
        self.repository.upsert(model_id, report.metrics(), report.classes, matrix)
        self.logger.info(
            f"Service: Evaluated model {model_id} on {sum(map(sum, matrix))} predictions "
            f"(accuracy={report.accuracy:.4f}, f1={report.f1_score:.4f})"
        )
        return EvaluationReport(
            model_id=model_id,
            classes=report.classes,
            confusion_matrix=matrix,
            **report.metrics()
        )
