from __future__ import annotations

from dataclasses import dataclass

import pytest

from academy_console.api.token_store import ACADEMY_ID_KEY, MemoryTokenStore
from academy_console.branches.model import Branch
from academy_console.branches.service import AcademyContext
from academy_console.core.exceptions import ApiError, AuthorizationError


@dataclass
class InMemoryBranches:
    branches: tuple = ()
    error: Exception = None

    def list_branches(self):
        if self.error:
            raise self.error
        return list(self.branches)


TWO_BRANCHES = (Branch(branch_id=7, name="본점"), Branch(branch_id=8, name="2호점"))


def test_stored_selection_wins_when_it_is_a_known_branch():
    store = MemoryTokenStore({ACADEMY_ID_KEY: "8"})

    state = AcademyContext(InMemoryBranches(TWO_BRANCHES), store).fetch()

    assert state.active_branch_id == 8
    assert state.active_branch.name == "2호점"
    assert state.is_multi_branch


def test_unknown_selection_falls_back_to_first_branch():
    store = MemoryTokenStore({ACADEMY_ID_KEY: "99"})

    state = AcademyContext(InMemoryBranches(TWO_BRANCHES), store).fetch()

    assert state.active_branch_id == 7


def test_all_branches_selection():
    store = MemoryTokenStore()
    context = AcademyContext(InMemoryBranches(TWO_BRANCHES), store)

    context.switch_branch(None)
    state = context.fetch()

    assert store.get(ACADEMY_ID_KEY) == "all"
    assert state.showing_all
    assert state.active_branch is None
    assert context.stored_branch_id() is None


def test_all_is_ignored_for_single_branch_academy():
    store = MemoryTokenStore({ACADEMY_ID_KEY: "all"})

    state = AcademyContext(InMemoryBranches(TWO_BRANCHES[:1]), store).fetch()

    assert state.active_branch_id == 7
    assert not state.showing_all


@pytest.mark.parametrize("error", [ApiError("down"), AuthorizationError("teachers cannot list branches")])
def test_branch_list_failure_keeps_single_branch_mode(error):
    store = MemoryTokenStore({ACADEMY_ID_KEY: "7"})

    state = AcademyContext(InMemoryBranches(error=error), store).fetch()

    assert state.branches == ()
    assert state.active_branch_id == 7
    assert not state.is_multi_branch


def test_switch_branch_stores_id_as_string():
    store = MemoryTokenStore()

    AcademyContext(InMemoryBranches(TWO_BRANCHES), store).switch_branch(8)

    assert store.get(ACADEMY_ID_KEY) == "8"
