from __future__ import annotations

from typing import Protocol, Sequence

from .model import Branch


class BranchRepository(Protocol):
    def list_branches(self) -> Sequence[Branch]:
        raise NotImplementedError
