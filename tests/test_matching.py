"""Tests for matching accounts across ledgers."""

import pytest
from networth.domain.entities import SourceAccount, TargetAccount
from networth.domain.matching import (
    EXACT_NAME,
    STRUCTURAL,
    find_match_with_tier,
    find_matching_target,
    find_target_by_name,
)


def target(entry_id, owner, name, account_type="", institution=""):
    return TargetAccount(
        entry_id=entry_id, year=2026, owner=owner, account_name=name,
        account_type=account_type, institution=institution,
    )


@pytest.fixture
def alice_roth():
    return SourceAccount(
        id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA", institution="Vanguard"
    )


class TestExactName:
    """Tests for matching by generated name."""

    def test_exact_name(self, alice_roth):
        candidates = [target("e1", "Alice", "Alice's Vanguard IRA (Roth)")]

        match, tier = find_match_with_tier(alice_roth, candidates)

        assert match.entry_id == "e1"
        assert tier == EXACT_NAME

    def test_owner_compared_ignoring_case_and_name_trimmed(self, alice_roth):
        candidates = [target("e1", "ALICE", "  Alice's Vanguard IRA (Roth) ")]

        assert find_matching_target(alice_roth, candidates).entry_id == "e1"

    def test_name_with_other_owner_is_not_matched(self, alice_roth):
        candidates = [target("e1", "Bob", "Alice's Vanguard IRA (Roth)")]

        assert find_matching_target(alice_roth, candidates) is None

    def test_exact_name_wins_over_earlier_structural_candidate(self, alice_roth):
        """Test a name match later in the list beats a structural match earlier."""
        candidates = [
            target("e1", "Alice", "Old IRA", "IRA", "Vanguard"),
            target("e2", "Alice", "Alice's Vanguard IRA (Roth)", "IRA", "Vanguard"),
        ]

        match, tier = find_match_with_tier(alice_roth, candidates)

        assert match.entry_id == "e2"
        assert tier == EXACT_NAME

    def test_renamed_name_from_mapping(self, alice_roth):
        """Test the name an entry was renamed to matches exactly."""
        candidates = [target("e1", "Alice", "Alice Retirement", "Brokerage")]
        mapping = {"Alice's Vanguard IRA (Roth)": "Alice Retirement"}

        match, tier = find_match_with_tier(alice_roth, candidates, mapping)

        assert match.entry_id == "e1"
        assert tier == EXACT_NAME
        assert find_matching_target(alice_roth, candidates) is None


class TestStructural:
    """Tests for the owner, type and institution fallback."""

    def test_structural_match(self, alice_roth):
        candidates = [target("e1", "alice", "Roth", "ira", "VANGUARD")]

        match, tier = find_match_with_tier(alice_roth, candidates)

        assert match.entry_id == "e1"
        assert tier == STRUCTURAL

    def test_institution_must_agree(self, alice_roth):
        candidates = [target("e1", "Alice", "Roth", "IRA", "Fidelity")]

        assert find_matching_target(alice_roth, candidates) is None

    def test_empty_source_institution_matches_owner_and_type(self):
        source = SourceAccount(id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA")
        candidates = [target("e1", "Alice", "Roth", "IRA", "Fidelity")]

        assert find_matching_target(source, candidates).entry_id == "e1"

    def test_first_of_several_structural_candidates(self, alice_roth):
        candidates = [
            target("e1", "Alice", "Roth A", "IRA", "Vanguard"),
            target("e2", "Alice", "Roth B", "IRA", "Vanguard"),
        ]

        assert find_matching_target(alice_roth, candidates).entry_id == "e1"

    def test_description_disables_structural_match(self):
        """Test described accounts only ever match by name."""
        source = SourceAccount(
            id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA",
            institution="Vanguard", description="Rollover",
        )
        candidates = [target("e1", "Alice", "Alice's Vanguard IRA (Roth)", "IRA", "Vanguard")]

        assert find_match_with_tier(source, candidates) == (None, None)

    def test_no_candidates(self, alice_roth):
        assert find_match_with_tier(alice_roth, []) == (None, None)


class TestFindTargetByName:
    """Tests for looking up group targets by name."""

    def test_ignores_case_and_whitespace(self):
        candidates = [target("e1", "Joint", "Other"), target("e2", "Joint", "Combined 401k")]

        assert find_target_by_name(" combined 401K ", candidates).entry_id == "e2"

    def test_empty_name_matches_nothing(self):
        assert find_target_by_name("", [target("e1", "Joint", "")]) is None
