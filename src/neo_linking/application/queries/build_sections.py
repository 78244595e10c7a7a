"""Build provider list sections for display."""

from typing import List

from ...core.entities import ProviderCatalog
from ...core.value_objects import Item, ResolvedLinkState, Section

PROVIDER_SECTION_HEADER = "Identity Providers"
PROVIDER_SECTION_FOOTER = "Choose a login flow from one of the identity providers above."

LINK_SECTION_HEADER = "Manage linking between providers"
LINK_SECTION_FOOTER = (
    "Select an unchecked row to link the currently signed in user to that auth provider. "
    "To unlink the user from a linked provider, select its corresponding row marked with a checkmark."
)


def build_provider_sections(catalog: ProviderCatalog) -> List[Section]:
    """Sections for the sign-in screen, one row per provider."""
    items = [Item(title=provider.display_name) for provider in catalog]
    return [
        Section(
            header_description=PROVIDER_SECTION_HEADER,
            footer_description=PROVIDER_SECTION_FOOTER,
            items=items
        )
    ]


def build_link_sections(link_state: ResolvedLinkState) -> List[Section]:
    """Sections for the account linking screen.
    
    Linked providers are checked; rows have no nested content since
    selecting one acts in place.
    """
    items = [
        Item(
            title=row.provider.display_name,
            is_checked=row.is_linked,
            has_nested_content=False
        )
        for row in link_state
    ]
    return [
        Section(
            header_description=LINK_SECTION_HEADER,
            footer_description=LINK_SECTION_FOOTER,
            items=items
        )
    ]
