"""
Ingredient clustering.

Responsibilities:
- Compute distances between ingredient/tag columns (the transposed table).
- Run agglomerative clustering with complete, average or Ward linkage.
- Cut the tree into k clusters without recomputing distances or linkage.
"""
