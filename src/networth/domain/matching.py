"""Identity matching between liquid asset accounts and accounts ledger entries.

There is no stable foreign key between the two ledgers, so matching is
heuristic and first-match-wins over the candidate order:

1. Exact name: the candidate's ``account_name`` equals the source account's
   generated name (or the name it was renamed to, per the name mapping) and
   the owners agree case-insensitively.
2. Structural: only when the source has no description. Owner and account
   type must agree case-insensitively; the institution must agree too unless
   the source leaves it empty.

Several structurally equal candidates resolve to the first one. No match
means the caller creates a new entry.
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from networth.domain.entities import SourceAccount, TargetAccount
from networth.domain.naming import name_for

EXACT_NAME = 1
STRUCTURAL = 2


def _folded(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def find_match_with_tier(
    source: SourceAccount,
    candidates: Sequence[TargetAccount],
    name_mapping: Optional[Mapping[str, str]] = None,
) -> tuple[Optional[TargetAccount], Optional[int]]:
    """Find the best match for a source account and report which tier found it.

    Args:
        source: Liquid asset account to match
        candidates: Accounts ledger entries, in priority order
        name_mapping: Optional generated-name to renamed-name mapping

    Returns:
        Tuple of (matching entry or None, EXACT_NAME / STRUCTURAL / None)
    """
    expected_name = name_for(source)
    accepted_names = {expected_name}
    if name_mapping and expected_name in name_mapping:
        accepted_names.add(name_mapping[expected_name].strip())
    owner = _folded(source.owner)

    for candidate in candidates:
        if candidate.account_name.strip() in accepted_names and _folded(candidate.owner) == owner:
            return candidate, EXACT_NAME

    # A description exists to tell apart accounts that would otherwise collide
    if source.description.strip():
        return None, None

    account_type = _folded(source.account_type)
    institution = _folded(source.institution)
    for candidate in candidates:
        if _folded(candidate.owner) != owner:
            continue
        if _folded(candidate.account_type) != account_type:
            continue
        if institution and _folded(candidate.institution) != institution:
            continue
        return candidate, STRUCTURAL

    return None, None


def find_matching_target(
    source: SourceAccount,
    candidates: Sequence[TargetAccount],
    name_mapping: Optional[Mapping[str, str]] = None,
) -> Optional[TargetAccount]:
    """Return the accounts ledger entry a source account reconciles into."""
    match, _ = find_match_with_tier(source, candidates, name_mapping)
    return match


def find_target_by_name(
    account_name: str, candidates: Sequence[TargetAccount]
) -> Optional[TargetAccount]:
    """Return the first entry whose name equals account_name, ignoring case."""
    wanted = _folded(account_name)
    if not wanted:
        return None
    for candidate in candidates:
        if _folded(candidate.account_name) == wanted:
            return candidate
    return None
