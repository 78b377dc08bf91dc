"""
Derived-artifact cache.

Responsibilities:
- Fingerprint the cleaned recipe table so artifacts are tied to a dataset version.
- Build expensive artifacts (distance matrices, linkages, trees) once.
- Persist them on disk and reload them in later sessions.
"""
