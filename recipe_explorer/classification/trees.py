from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from sklearn.metrics import cohen_kappa_score, confusion_matrix, roc_auc_score, roc_curve
from sklearn.model_selection import train_test_split
from sklearn.tree import DecisionTreeClassifier

from ..artifacts.cache import ArtifactCache, dataset_fingerprint
from .config import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig
from .targets import CALORIE_CLASSES, calorie_training_frame, summer_training_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeReport:
    """A fitted tree together with everything the report shows about it."""

    name: str
    model: DecisionTreeClassifier
    classes: list[Any]
    train_size: int
    test_size: int
    accuracy: float
    kappa: float
    confusion: pd.DataFrame
    feature_importances: pd.DataFrame
    predictions: pd.Series
    probabilities: pd.DataFrame
    roc: dict[str, np.ndarray] | None = None
    auc: float | None = None
    class_balance: dict[str, dict[Any, float]] = field(default_factory=dict)


def stratified_split(
    features: pd.DataFrame,
    target: pd.Series,
    config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
) -> tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """75/25 train/test partition preserving the target's class proportions."""
    return train_test_split(
        features,
        target,
        test_size=config.test_size,
        random_state=config.random_state,
        stratify=target,
    )


def _importance_table(model: DecisionTreeClassifier, columns: list[str]) -> pd.DataFrame:
    table = pd.DataFrame({"feature": columns, "importance": model.feature_importances_})
    table = table[table["importance"] > 0]
    return table.sort_values("importance", ascending=False, kind="stable").reset_index(drop=True)


def train_tree(
    name: str,
    features: pd.DataFrame,
    target: pd.Series,
    config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
    class_order: list[Any] | None = None,
) -> TreeReport:
    """Fit one CART tree on the training part and evaluate it on the test part."""
    X_train, X_test, y_train, y_test = stratified_split(features, target, config)

    model = DecisionTreeClassifier(
        criterion=config.criterion,
        max_depth=config.max_depth,
        min_samples_leaf=config.min_samples_leaf,
        random_state=config.random_state,
    )
    model.fit(X_train, y_train)

    predicted = model.predict(X_test)
    probabilities = pd.DataFrame(
        model.predict_proba(X_test), index=X_test.index, columns=list(model.classes_)
    )

    labels = class_order or list(model.classes_)
    cm = confusion_matrix(y_test, predicted, labels=labels)
    accuracy = float(np.trace(cm) / cm.sum()) if cm.sum() else 0.0
    kappa = float(cohen_kappa_score(y_test, predicted, labels=labels))

    roc = None
    auc = None
    if len(model.classes_) == 2:
        positive = model.classes_[1]
        scores = probabilities[positive].to_numpy()
        fpr, tpr, thresholds = roc_curve(y_test, scores, pos_label=positive)
        roc = {"fpr": fpr, "tpr": tpr, "thresholds": thresholds}
        auc = float(roc_auc_score(y_test == positive, scores))

    logger.info("%s tree: accuracy=%.3f kappa=%.3f on %d test rows", name, accuracy, kappa, len(y_test))

    return TreeReport(
        name=name,
        model=model,
        classes=labels,
        train_size=len(y_train),
        test_size=len(y_test),
        accuracy=accuracy,
        kappa=kappa,
        confusion=pd.DataFrame(cm, index=labels, columns=labels),
        feature_importances=_importance_table(model, list(features.columns)),
        predictions=pd.Series(predicted, index=X_test.index, name="predicted"),
        probabilities=probabilities,
        roc=roc,
        auc=auc,
        class_balance={
            "train": y_train.value_counts(normalize=True).to_dict(),
            "test": y_test.value_counts(normalize=True).to_dict(),
        },
    )


def _cached_tree(
    name: str,
    df: pd.DataFrame,
    build,
    config: ClassifierConfig,
    cache: ArtifactCache | None,
) -> TreeReport:
    if cache is None:
        return build()
    params = {
        "dataset": dataset_fingerprint(df),
        "test_size": config.test_size,
        "random_state": config.random_state,
        "criterion": config.criterion,
        "max_depth": config.max_depth,
        "min_samples_leaf": config.min_samples_leaf,
    }
    return cache.build_or_load(name, params, build)


def train_calorie_classifier(
    df: pd.DataFrame,
    config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
    cache: ArtifactCache | None = None,
) -> TreeReport:
    def _build() -> TreeReport:
        features, target = calorie_training_frame(df)
        present = [c for c in CALORIE_CLASSES if c in set(target)]
        return train_tree("calories", features, target, config, class_order=present)

    return _cached_tree("calorie_tree", df, _build, config, cache)


def train_summer_classifier(
    df: pd.DataFrame,
    config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
    cache: ArtifactCache | None = None,
) -> TreeReport:
    def _build() -> TreeReport:
        features, target = summer_training_frame(df)
        return train_tree("summer", features, target, config, class_order=[0, 1])

    return _cached_tree("summer_tree", df, _build, config, cache)
