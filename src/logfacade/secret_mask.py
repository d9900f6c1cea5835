"""
logfacade - Secret Mask

Masquage des secrets (header Authorization, champ JSON password)
dans une sortie de log déjà rendue.
"""

import re

# Compilés une seule fois et réutilisés: la compilation coûte bien plus
# cher que la recherche. Les objets Pattern sont partageables entre threads.
_AUTHORIZATION_PATTERN = re.compile(
    rb"(Authorization:\s*\w+\s\w{3})[^\r\n]*([^\r\n]{2})", re.IGNORECASE
)
_PASSWORD_PATTERN = re.compile(rb'(password"\s*:\s*".{2})[^"]*(.")', re.IGNORECASE)

_AUTHORIZATION_MASK = rb"\1*****\2"
_PASSWORD_MASK = rb"\1***\2"


def secret_mask(data: bytes) -> bytes:
    """
    Masque les secrets d'un buffer.

    Ordre d'application:
        1. Authorization: <scheme> <3 premiers caractères>*****<2 derniers>
        2. "password":"<2 premiers>***<dernier>"

    Sans correspondance, le buffer est retourné inchangé.

    Args:
        data: Sortie de log brute

    Returns:
        Buffer masqué
    """
    masked = _AUTHORIZATION_PATTERN.sub(_AUTHORIZATION_MASK, data)
    return _PASSWORD_PATTERN.sub(_PASSWORD_MASK, masked)
