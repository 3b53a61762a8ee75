"""Clients for the remote services BoothCode depends on."""

from boothcode.infrastructure.services.collection_provider import CollectionProvider
from boothcode.infrastructure.services.seller_directory_provider import SellerDirectoryProvider
from boothcode.infrastructure.services.shopify_provider import (
    ShopifyCollectionProvider,
    to_collection_gid,
)
from boothcode.infrastructure.services.webkul_provider import WebkulSellerDirectoryProvider

__all__ = [
    "CollectionProvider",
    "SellerDirectoryProvider",
    "ShopifyCollectionProvider",
    "WebkulSellerDirectoryProvider",
    "to_collection_gid",
]
