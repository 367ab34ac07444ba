from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Branch:
    branch_id: int
    name: str


@dataclass(frozen=True)
class BranchState:
    branches: tuple[Branch, ...]
    active_branch_id: Optional[int]

    @property
    def is_multi_branch(self) -> bool:
        return len(self.branches) > 1

    @property
    def showing_all(self) -> bool:
        """Multi-branch owner looking at every branch at once."""
        return self.active_branch_id is None and self.is_multi_branch

    @property
    def active_branch(self) -> Optional[Branch]:
        for b in self.branches:
            if b.branch_id == self.active_branch_id:
                return b
        return None
