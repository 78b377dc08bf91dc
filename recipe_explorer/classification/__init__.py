"""
Decision-tree classifiers.

Responsibilities:
- Build leakage-free training tables for the calorie bucket and the summer tag.
- Split them 75/25, stratified by the target class.
- Fit a single CART tree and report accuracy, kappa and feature importance.
"""
