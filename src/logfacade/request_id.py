"""
logfacade - Request ID

Propagation d'un identifiant de requête opaque via contextvars, et
middleware qui l'ajoute comme champ "request_id" aux entrées de log.
"""

import contextvars
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

# Clé réservée du request id dans le contexte
_request_id_var: contextvars.ContextVar[Any] = contextvars.ContextVar(
    "logfacade_request_id"
)


def new_context(
    parent: Optional[contextvars.Context], request_id: str
) -> contextvars.Context:
    """
    Retourne un nouveau contexte portant le request id.

    Le parent n'est pas modifié.

    Args:
        parent: Contexte parent, ou None pour le contexte courant
        request_id: Identifiant de la requête

    Returns:
        Copie du parent avec le request id défini
    """
    ctx = parent.copy() if parent is not None else contextvars.copy_context()
    ctx.run(_request_id_var.set, request_id)
    return ctx


def from_context(ctx: contextvars.Context) -> str:
    """
    Retourne le request id du contexte.

    Returns:
        request id, ou "" si absent ou si la valeur n'est pas une str
    """
    value = ctx.get(_request_id_var)
    if isinstance(value, str):
        return value
    return ""


def request_id_middleware(ctx: contextvars.Context) -> List[Any]:
    """Ajoute le request id comme champ s'il est présent dans le contexte."""
    request_id = from_context(ctx)
    if request_id:
        return ["request_id", request_id]
    return []


@contextmanager
def request_scope(request_id: str) -> Iterator[None]:
    """
    Définit le request id dans le contexte courant pour la durée du bloc.

    Example:
        with request_scope("req-123"):
            logger.with_context().info("handled")
    """
    token = _request_id_var.set(request_id)
    try:
        yield
    finally:
        _request_id_var.reset(token)
