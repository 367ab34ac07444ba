from __future__ import annotations

import logging
from typing import Optional

from ..api.token_store import ACADEMY_ID_KEY, TokenStore
from ..core.constants import ALL_BRANCHES
from ..core.exceptions import ApiError, AuthorizationError
from .model import BranchState
from .repository import BranchRepository

logger = logging.getLogger(__name__)


class AcademyContext:
    """Active branch selection for multi-branch academies.

    The selection is persisted next to the token and sent as ``X-Academy-Id``
    on every API call, so switching only has to store it and reload the page.
    """

    def __init__(self, branches: BranchRepository, tokens: TokenStore):
        self._branches = branches
        self._tokens = tokens

    def stored_branch_id(self) -> Optional[int]:
        value = self._tokens.get(ACADEMY_ID_KEY)
        if value in (None, "", ALL_BRANCHES):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def fetch(self) -> BranchState:
        try:
            branches = tuple(self._branches.list_branches())
        except (ApiError, AuthorizationError) as e:
            # Single branch fallback.
            logger.info("branch list unavailable: %s", e)
            return BranchState(branches=(), active_branch_id=self.stored_branch_id())

        if self._tokens.get(ACADEMY_ID_KEY) == ALL_BRANCHES and len(branches) > 1:
            return BranchState(branches=branches, active_branch_id=None)

        stored = self.stored_branch_id()
        if stored is not None and any(b.branch_id == stored for b in branches):
            active = stored
        else:
            active = branches[0].branch_id if branches else None
        return BranchState(branches=branches, active_branch_id=active)

    def switch_branch(self, branch_id: Optional[int]) -> None:
        """Persist the selection; None means all branches."""
        if branch_id:
            self._tokens.set(ACADEMY_ID_KEY, str(int(branch_id)))
        else:
            self._tokens.set(ACADEMY_ID_KEY, ALL_BRANCHES)
