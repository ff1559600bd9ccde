"""Storefront: catalog, selection cascade, cart and checkout."""
