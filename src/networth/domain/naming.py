"""Canonical display names for liquid asset accounts."""

from typing import Optional

from networth.domain.entities import JOINT_OWNER, SourceAccount


TAX_LABELS = {
    "Tax-Free": "Roth",
    "Tax-Deferred": "Traditional",
    "After-Tax": "Taxable",
}

# Account types where the tax treatment is part of the name.
TAX_LABELLED_TYPES = ("IRA", "401k")


def generate_account_name(
    owner: Optional[str],
    tax_type: Optional[str],
    account_type: Optional[str],
    institution: Optional[str],
    description: Optional[str] = "",
) -> str:
    """Build the canonical name of an account from its attributes.

    Format: ``[Owner's |Joint ][Institution ][Type][ (Tax label)][ - Description]``.

    Examples:
        >>> generate_account_name("Alice", "Tax-Free", "IRA", "Vanguard")
        "Alice's Vanguard IRA (Roth)"
        >>> generate_account_name("Joint", "After-Tax", "Brokerage", "Fidelity", "Kids")
        'Joint Fidelity Brokerage - Kids'

    Args:
        owner: Owner name, "Joint" for shared accounts
        tax_type: Tax type such as "Tax-Free"
        account_type: Account type such as "IRA"
        institution: Institution name, may be empty
        description: Optional disambiguator

    Returns:
        Trimmed account name (empty when every input is empty)
    """
    owner = (owner or "").strip()
    tax_type = (tax_type or "").strip()
    account_type = (account_type or "").strip()
    institution = (institution or "").strip()
    description = (description or "").strip()

    name = ""
    if owner:
        name += "Joint " if owner.lower() == JOINT_OWNER.lower() else f"{owner}'s "
    if institution:
        name += f"{institution} "
    if account_type:
        name += account_type
    if tax_type and account_type in TAX_LABELLED_TYPES:
        name += f" ({TAX_LABELS.get(tax_type, tax_type)})"
    if description:
        name += f" - {description}"
    return name.strip()


def name_for(account: SourceAccount) -> str:
    """Return the canonical name of a source account."""
    return generate_account_name(
        account.owner,
        account.tax_type,
        account.account_type,
        account.institution,
        account.description,
    )
