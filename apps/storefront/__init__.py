"""Košnica storefront API: catalog queries, client stores and accounts."""
