"""Repository layer modules."""

from portal.repositories.configuration_store import ConfigurationStore, get_configuration_store
from portal.repositories.portal_repository import PortalRepository

__all__ = [
    "ConfigurationStore",
    "PortalRepository",
    "get_configuration_store",
]
