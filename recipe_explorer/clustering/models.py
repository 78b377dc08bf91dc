from __future__ import annotations

from pydantic import BaseModel


class ClusterOut(BaseModel):
    cluster_id: int
    size: int
    attributes: list[str]


class ClusterResponse(BaseModel):
    method: str
    k: int
    assignments: dict[str, int]
    clusters: list[ClusterOut]
