"""
Exploratory report.

Responsibilities:
- Render the report figures with matplotlib and seaborn.
- Turn recommendation, clustering and classifier results into commentary.
- Run the whole analysis end to end and write ``report.md``.
"""
