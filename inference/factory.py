"""Factory for creating the streaming pipeline from settings."""

from typing import Optional

from omegaconf import DictConfig

from data_ingest.params_loader import ConfigurationError, FeatureConfig, load_feature_config

from .classifiers import Classifier, TorchScriptClassifier
from .decision import DecisionPolicy
from .streaming import StreamingPipeline


def create_classifier(config: DictConfig) -> Classifier:
    """
    Create classifier from configuration.

    Args:
        config: Classifier configuration (``model_path``, ``apply_softmax``)

    Returns:
        Classifier callable
    """
    if config.model_path is None:
        raise ConfigurationError("classifier.model_path is not set")
    return TorchScriptClassifier(config.model_path, apply_softmax=config.apply_softmax)


def create_pipeline(settings: DictConfig, classifier: Optional[Classifier] = None,
                    feature_config: Optional[FeatureConfig] = None) -> StreamingPipeline:
    """
    Create the streaming pipeline.

    Args:
        settings: Merged pipeline settings
        classifier: Classifier to use instead of the configured model file
        feature_config: Feature bundle to use instead of ``settings.params_path``

    Returns:
        Streaming pipeline, not yet started
    """
    if feature_config is None:
        feature_config = load_feature_config(settings.params_path)
    if classifier is None:
        classifier = create_classifier(settings.classifier)

    pipeline_config = settings.pipeline
    policy = DecisionPolicy(
        feature_config.class_labels,
        confidence_threshold=pipeline_config.confidence_threshold
    )

    return StreamingPipeline(
        feature_config,
        classifier,
        policy=policy,
        retention_seconds=pipeline_config.buffer_retention_seconds,
        cycle_period=pipeline_config.cycle_period_seconds
    )
