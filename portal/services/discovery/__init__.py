from portal.services.discovery.collection_discovery import CollectionDiscoveryService
from portal.services.discovery.collection_resolver import CollectionResolver

__all__ = ["CollectionDiscoveryService", "CollectionResolver"]
