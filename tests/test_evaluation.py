# tests/test_evaluation.py
import math

import pytest

from audio_classifier import db
from audio_classifier.core.results import ErrorKind
from audio_classifier.repositories.evaluation_repository import EvaluationRepository
from audio_classifier.services.metrics_service import MetricsEngine

PREDICTIONS = [('Pop', 'Pop'), ('Rock', 'Rock'), ('Jazz', 'Jazz'), ('Pop', 'Rock'), ('Jazz', 'Jazz')]


@pytest.fixture
def engine(app):
    return MetricsEngine(EvaluationRepository(db.session))


def test_unknown_model_is_not_found(engine):
    assert engine.get_evaluation(42).error is ErrorKind.NOT_FOUND
    assert engine.generate_confusion_matrix(42).error is ErrorKind.NOT_FOUND


def test_recorded_evaluation_round_trips(engine):
    recorded = engine.record_evaluation(7, PREDICTIONS)
    db.session.expire_all()

    result = engine.get_evaluation(7)
    assert result.ok
    stored = result.value
    assert stored.model_id == 7
    assert stored.accuracy == recorded.accuracy
    assert stored.precision == recorded.precision
    assert stored.recall == recorded.recall
    assert stored.f1_score == recorded.f1_score
    assert stored.classes == ['Pop', 'Rock', 'Jazz']
    assert stored.confusion_matrix == [[1, 0, 0], [1, 1, 0], [0, 0, 2]]


def test_confusion_matrix_lookup(engine):
    engine.record_evaluation(3, PREDICTIONS)
    result = engine.generate_confusion_matrix(3)
    assert result.ok
    assert result.value == [[1, 0, 0], [1, 1, 0], [0, 0, 2]]


def test_recording_again_overwrites(engine):
    engine.record_evaluation(5, PREDICTIONS)
    engine.record_evaluation(5, [('Pop', 'Pop')])

    stored = engine.get_evaluation(5).value
    assert stored.accuracy == 1.0
    assert stored.classes == ['Pop']
    assert stored.confusion_matrix == [[1]]


def test_nan_metrics_survive_storage(engine):
    engine.record_evaluation(9, [('Pop', 'Rock'), ('Rock', 'Pop')])
    stored = engine.get_evaluation(9).value
    assert stored.accuracy == 0.0
    assert math.isnan(stored.f1_score)
