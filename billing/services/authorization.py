"""Authorization Resolver - role reference to capability set."""

import logging

from billing.core.exceptions import AuthorizationError, NotFoundError
from billing.core.records import CAPABILITY_NAMES, Capabilities

logger = logging.getLogger(__name__)


def resolve_capabilities(role_ref, store) -> Capabilities:
    """Look the role up through ``store``.

    Raises:
        NotFoundError: ``role_ref`` does not name a role.
    """
    capabilities = store.find_role(role_ref)
    if capabilities is None:
        raise NotFoundError(resource="Role", resource_id=role_ref)
    return capabilities


def require(role_ref, store, *names: str) -> Capabilities:
    """Capabilities of ``role_ref`` if it holds every one of ``names``.

    Used by mutation gates: a role that does not resolve is a denial, not a 404.

    Raises:
        AuthorizationError: naming the first missing capability.
    """
    for name in names:
        if name not in CAPABILITY_NAMES:
            raise ValueError(f"Unknown capability {name!r}")
    try:
        capabilities = resolve_capabilities(role_ref, store)
    except NotFoundError:
        logger.warning("Permission denied: role %s does not resolve", role_ref)
        raise AuthorizationError(names[0] if names else None) from None
    for name in names:
        if not capabilities.has(name):
            logger.warning("Permission denied: role %s lacks %s", role_ref, name)
            raise AuthorizationError(name)
    return capabilities
