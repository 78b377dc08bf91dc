"""
Recipe similarity engine.

Responsibilities:
- Build the pairwise Euclidean distance matrix over one-hot recipe vectors.
- Look up a recipe by exact title and rank every other recipe by distance.
- Apply ingredient, rating and calorie filters to the ranked list.
"""
