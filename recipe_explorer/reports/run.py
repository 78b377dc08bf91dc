"""
Run the full exploratory report.

Usage:
    python -m recipe_explorer.reports.run
"""
from __future__ import annotations

import logging
from pathlib import Path

from ..artifacts.cache import ArtifactCache
from ..artifacts.config import DEFAULT_CACHE_CONFIG, CacheConfig
from ..classification.config import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig
from ..classification.trees import train_calorie_classifier, train_summer_classifier
from ..clustering.hierarchy import IngredientClustering, cluster_table
from ..data_ingestion.config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from ..data_ingestion.ingest import (
    RATING_COLUMN,
    clean_recipes,
    load_processed_recipes,
    load_raw_recipes,
    write_processed_recipes,
)
from ..similarity.engine import RecipeNotFoundError, SimilarityEngine
from . import narrative, plots
from .config import DEFAULT_REPORT_CONFIG, ReportConfig

logger = logging.getLogger(__name__)


def run_report(
    report_config: ReportConfig = DEFAULT_REPORT_CONFIG,
    ingestion_config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
    cache_config: CacheConfig = DEFAULT_CACHE_CONFIG,
    classifier_config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
) -> Path:
    """
    Load, clean, analyse and write ``report.md`` plus figures.

    Returns the path of the written report.
    """
    out = report_config.output_dir
    out.mkdir(parents=True, exist_ok=True)
    dpi = report_config.dpi
    cache = ArtifactCache(cache_config)

    raw = load_raw_recipes(ingestion_config.raw_path, separator=ingestion_config.separator)
    # Read back through the processed CSV so artifacts share keys with the API
    write_processed_recipes(clean_recipes(raw, ingestion_config), ingestion_config)
    df = load_processed_recipes(ingestion_config)

    sections = ["# Recipe Explorer Report", "", "## Dataset", "", narrative.describe_dataset(len(raw), df)]
    plots.plot_rating_distribution(df[RATING_COLUMN], out / "rating_distribution.png", dpi=dpi)
    sections += ["", "![Rating distribution](rating_distribution.png)"]

    # Recommendations
    engine = SimilarityEngine.from_frame(df, cache=cache)
    sections += ["", "## Similar recipes", ""]
    try:
        ranked = engine.query(report_config.sample_recipe, limit=report_config.recommendation_count)
        sections.append(narrative.describe_recommendations(report_config.sample_recipe, ranked))
    except RecipeNotFoundError as exc:
        logger.warning("Skipping recommendation section: %s", exc)
        sections.append(f"_{exc}_")

    # Clustering
    clustering = IngredientClustering.from_frame(df, cache=cache)
    method, k = report_config.linkage_method, report_config.cluster_count
    assignments = clustering.cut(method, k)
    sections += ["", "## Ingredient clusters", "", narrative.describe_clusters(method, cluster_table(assignments))]
    plots.plot_dendrogram(
        clustering.linkage_matrix(method), clustering.attributes, k, out / "dendrogram.png", dpi=dpi
    )
    sections += ["", "![Dendrogram](dendrogram.png)"]

    # Classifiers
    for report in (
        train_calorie_classifier(df, classifier_config, cache),
        train_summer_classifier(df, classifier_config, cache),
    ):
        prefix = report.name
        sections += ["", f"## {report.name.title()} classifier", "", narrative.describe_classifier(report)]
        plots.plot_confusion(report, out / f"{prefix}_confusion.png", dpi=dpi)
        plots.plot_feature_importance(
            report, out / f"{prefix}_importance.png", top=classifier_config.top_features, dpi=dpi
        )
        sections += [
            "",
            f"![Confusion matrix]({prefix}_confusion.png)",
            f"![Feature importance]({prefix}_importance.png)",
        ]
        if report.roc is not None:
            plots.plot_roc(report, out / f"{prefix}_roc.png", dpi=dpi)
            sections.append(f"![ROC curve]({prefix}_roc.png)")

    path = out / "report.md"
    path.write_text("\n".join(sections) + "\n", encoding="utf-8")
    logger.info("Cache stats: %s", cache.stats())
    return path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    report_path = run_report()
    print(f"Report complete. Written to: {report_path}")
