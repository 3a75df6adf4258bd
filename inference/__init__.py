"""Classification, decision policy and the streaming orchestrator."""

from .classifier_output import (ClassifierOutputError, FlatArray, LabelMap, NestedArray,
                                decode_classifier_output, to_probability_vector)
from .classifiers import TorchScriptClassifier
from .decision import CONFIDENCE_THRESHOLD, DecisionPolicy
from .factory import create_classifier, create_pipeline
from .feature_builder import FeatureVectorBuilder
from .periodic import PeriodicTask
from .prediction import COLLECTING, UNCLASSIFIED, PosturePrediction
from .streaming import StreamingPipeline

__all__ = ["ClassifierOutputError", "FlatArray", "NestedArray", "LabelMap",
           "decode_classifier_output", "to_probability_vector", "TorchScriptClassifier",
           "CONFIDENCE_THRESHOLD", "DecisionPolicy", "create_classifier",
           "create_pipeline", "FeatureVectorBuilder", "PeriodicTask", "COLLECTING",
           "UNCLASSIFIED", "PosturePrediction", "StreamingPipeline"]
