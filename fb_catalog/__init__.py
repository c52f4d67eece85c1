"""
Facebook catalog management client.

Async wrapper over the login SDK and the Graph API catalog endpoints:
businesses, product catalogs, products and product sets.
"""

from fb_catalog.services.catalog_client import CatalogClient, MembershipUpdateMode

__version__ = "0.1.0"

__all__ = ["CatalogClient", "MembershipUpdateMode", "__version__"]
