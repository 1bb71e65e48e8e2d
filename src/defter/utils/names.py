"""Name normalisation used for case-insensitive uniqueness and lookups."""


def name_key(name: str) -> str:
    """Return the comparison key for a customer, product or ledger name.

    ``casefold`` turns the Turkish dotted capital I into ``i`` plus a
    combining dot; the dot is dropped so that "İLAÇ" matches "ilaç".
    """
    return (name or "").strip().casefold().replace("\u0307", "")
