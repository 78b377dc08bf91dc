"""
Plain-text commentary for the report sections.

Each function returns Markdown so the batch report can concatenate them.
"""
from __future__ import annotations

import pandas as pd

from ..classification.trees import TreeReport
from ..data_ingestion.ingest import RATING_COLUMN, attribute_columns


def describe_dataset(raw_rows: int, df: pd.DataFrame) -> str:
    attrs = attribute_columns(df)
    prevalence = df[attrs].mean().sort_values(ascending=False)
    common = ", ".join(f"{name} ({share:.0%})" for name, share in prevalence.head(5).items())
    return (
        f"The raw table held {raw_rows} recipes; after removing incomplete and "
        f"duplicated rows {len(df)} remain, described by {len(attrs)} ingredient/tag "
        f"flags. The mean rating is {df[RATING_COLUMN].mean():.2f} and "
        f"{(df[RATING_COLUMN] == 0).mean():.1%} of recipes are unrated (rating 0). "
        f"The most common flags are {common}."
    )


def describe_recommendations(query: str, ranked: list[tuple[str, float]]) -> str:
    if not ranked:
        return f"No recipe passes the filters for **{query}**."

    lines = [
        f"Recipes closest to **{query}** by ingredient/tag overlap:",
        "",
        "| # | Recipe | Distance |",
        "|---|---|---|",
    ]
    for pos, (title, distance) in enumerate(ranked, start=1):
        lines.append(f"| {pos} | {title} | {distance:.3f} |")

    nearest = ranked[0][1]
    ties = sum(1 for _, d in ranked if d == nearest)
    if ties > 1:
        lines.append("")
        lines.append(f"{ties} recipes share the smallest distance ({nearest:.3f}); they are listed in table order.")
    return "\n".join(lines)


def describe_clusters(method: str, table: pd.DataFrame, preview: int = 8) -> str:
    sizes = table["size"]
    lines = [
        f"{method.title()} linkage split {int(sizes.sum())} ingredients/tags into "
        f"{len(table)} clusters (largest {int(sizes.max())}, smallest {int(sizes.min())}).",
        "",
    ]
    for row in table.itertuples(index=False):
        members = ", ".join(row.attributes[:preview])
        more = f" and {row.size - preview} more" if row.size > preview else ""
        lines.append(f"- Cluster {row.cluster_id} ({row.size}): {members}{more}")
    return "\n".join(lines)


def describe_classifier(report: TreeReport, top: int = 5) -> str:
    features = ", ".join(
        f"{row.feature} ({row.importance:.2f})"
        for row in report.feature_importances.head(top).itertuples(index=False)
    )
    text = (
        f"The {report.name} tree was trained on {report.train_size} recipes and tested on "
        f"{report.test_size}. Test accuracy is {report.accuracy:.1%} with Cohen's kappa "
        f"{report.kappa:.3f}."
    )
    if report.auc is not None:
        text += f" Area under the ROC curve is {report.auc:.3f}."
    if features:
        text += f" The most important splits use {features}."
    else:
        text += " The tree made no splits."
    return text
