from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402
from scipy.cluster.hierarchy import dendrogram  # noqa: E402

from ..classification.trees import TreeReport  # noqa: E402

sns.set_style("whitegrid")


def _save(fig: plt.Figure, path: Path, dpi: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path


def plot_rating_distribution(ratings: pd.Series, path: Path, dpi: int = 150) -> Path:
    fig, ax = plt.subplots(figsize=(8, 5))
    sns.histplot(ratings, bins=np.arange(0, 5.5, 0.25), ax=ax, color="steelblue")
    ax.set_xlabel("Rating", fontsize=12, fontweight="bold")
    ax.set_ylabel("Number of Recipes", fontsize=12, fontweight="bold")
    ax.set_title("Recipe Rating Distribution", fontsize=13, fontweight="bold")
    return _save(fig, path, dpi)


def plot_dendrogram(
    linkage_matrix: np.ndarray,
    labels: list[str],
    k: int,
    path: Path,
    dpi: int = 150,
) -> Path:
    fig, ax = plt.subplots(figsize=(14, 6))
    # Links below the merge that leaves k - 1 clusters keep their cluster colour
    threshold = None
    if 1 < k <= len(labels):
        threshold = float(np.asarray(linkage_matrix)[-(k - 1), 2])
    dendrogram(
        np.array(linkage_matrix),
        labels=labels if len(labels) <= 80 else None,
        no_labels=len(labels) > 80,
        color_threshold=threshold,
        ax=ax,
    )
    ax.set_title(f"Ingredient Dendrogram ({k} clusters)", fontsize=13, fontweight="bold")
    ax.set_ylabel("Euclidean distance", fontsize=12, fontweight="bold")
    return _save(fig, path, dpi)


def plot_confusion(report: TreeReport, path: Path, dpi: int = 150) -> Path:
    fig, ax = plt.subplots(figsize=(6, 5))
    sns.heatmap(report.confusion, annot=True, fmt="d", cmap="Blues", cbar=False, ax=ax)
    ax.set_xlabel("Predicted", fontsize=12, fontweight="bold")
    ax.set_ylabel("Actual", fontsize=12, fontweight="bold")
    ax.set_title(f"{report.name.title()} Tree: Confusion Matrix", fontsize=13, fontweight="bold")
    return _save(fig, path, dpi)


def plot_feature_importance(report: TreeReport, path: Path, top: int = 15, dpi: int = 150) -> Path:
    table = report.feature_importances.head(top)
    fig, ax = plt.subplots(figsize=(8, max(3, 0.4 * len(table) + 1)))
    if table.empty:
        ax.text(0.5, 0.5, "Tree made no splits", ha="center", va="center", transform=ax.transAxes)
    else:
        sns.barplot(data=table, x="importance", y="feature", ax=ax, color="steelblue")
    ax.set_xlabel("Importance", fontsize=12, fontweight="bold")
    ax.set_ylabel("")
    ax.set_title(f"{report.name.title()} Tree: Top Features", fontsize=13, fontweight="bold")
    return _save(fig, path, dpi)


def plot_roc(report: TreeReport, path: Path, dpi: int = 150) -> Path:
    if report.roc is None:
        raise ValueError(f"{report.name} tree has no ROC curve (not a binary target)")
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(report.roc["fpr"], report.roc["tpr"], linewidth=2, label=f"AUC = {report.auc:.3f}")
    ax.plot([0, 1], [0, 1], color="grey", linestyle="--")
    ax.set_xlabel("False positive rate", fontsize=12, fontweight="bold")
    ax.set_ylabel("True positive rate", fontsize=12, fontweight="bold")
    ax.set_title(f"{report.name.title()} Tree: ROC Curve", fontsize=13, fontweight="bold")
    ax.legend(loc="lower right")
    return _save(fig, path, dpi)
