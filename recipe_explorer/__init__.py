"""
Recipe Explorer.

Exploratory analysis of the Epicurious recipe table: cleaning, distance-based
recommendation, ingredient clustering and decision-tree classification.
"""
