"""
Data ingestion package.

Responsibilities:
- Read the raw recipe table from a delimited file.
- Drop duplicates, incomplete rows and uninformative columns.
- Rescale nutrition fields and persist the cleaned table for later stages.
"""
