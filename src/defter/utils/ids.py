"""Record identifier generation."""

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Return an opaque id such as ``_k3j9x0a2b``.

    Ids are unique enough for one local user; they keep the shape of the ids
    already present in exported bundles.
    """
    return "_" + "".join(secrets.choice(_ALPHABET) for _ in range(9))
