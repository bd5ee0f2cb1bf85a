from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.catalog.services import ServiceCatalog

__all__ = ["IdentityRegistry", "ServiceCatalog"]
