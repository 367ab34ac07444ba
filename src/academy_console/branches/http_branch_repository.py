from __future__ import annotations

from typing import Sequence

from ..api.client import ApiClient
from ..api.http_base import as_int, unwrap_list
from .model import Branch
from .repository import BranchRepository


class HttpBranchRepository(BranchRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_branches(self) -> Sequence[Branch]:
        rows = unwrap_list(self._client.get("/academies/branches"))
        return [Branch(branch_id=as_int(r.get("id")), name=r.get("name") or "") for r in rows]
