"""Booth code sync service.

Reacts to the three webhook events that can break the title prefix:
collection created, collection renamed and seller renamed. Each event is
handled statelessly against the durable state (the registry, the
collection's metafield and its title). Renames are safe to replay: a
redelivered event finds the title already prefixed and writes nothing.
"""

from dataclasses import dataclass
from enum import Enum

from boothcode.core.logging import get_logger
from boothcode.domain.services.seller_code_generator import SellerCodeGenerator
from boothcode.domain.services.title_prefixer import TitlePrefixer
from boothcode.infrastructure.services.collection_provider import CollectionProvider
from boothcode.infrastructure.services.seller_directory_provider import SellerDirectoryProvider

logger = get_logger(__name__)


class SyncOutcome(str, Enum):
    """What a handler did to the collection."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    NO_CODE = "no_code"
    NO_COLLECTION = "no_collection"


@dataclass(frozen=True)
class SyncResult:
    """Result of handling one webhook event.

    Attributes:
        outcome: What happened.
        collection_id: The collection acted on, if one was resolved.
        code: The collection's booth code, if it has one.
        title: The collection's title after handling, if known.
    """

    outcome: SyncOutcome
    collection_id: str | None = None
    code: str | None = None
    title: str | None = None


class BoothCodeSyncService:
    """Keeps collection titles prefixed with their seller's booth code."""

    def __init__(
        self,
        generator: SellerCodeGenerator,
        collections: CollectionProvider,
        sellers: SellerDirectoryProvider,
        default_title: str = "Untitled",
    ) -> None:
        self.generator = generator
        self.collections = collections
        self.sellers = sellers
        self.default_title = default_title

    async def handle_collection_created(
        self, collection_id: str, title: str | None, handle: str
    ) -> SyncResult:
        """Issue a code for a new collection and prefix its title.

        A collection that already carries a code (a redelivered creation
        event) keeps it; only the prefix is re-applied.

        Raises:
            SellerNotFoundError: If no seller owns the collection's handle.
            RemoteServiceError: If a remote call fails.
            RegistryStorageError: If the issued code cannot be persisted.
        """
        current_title = title or self.default_title

        stored_code = await self.collections.get_stored_code(collection_id)
        if stored_code:
            logger.info(
                "Collection already has a code, re-applying prefix",
                collection_id=collection_id,
                code=stored_code,
            )
            return await self._apply_prefix(collection_id, stored_code, current_title)

        seller = await self.sellers.lookup_by_handle(handle)
        code = await self.generator.generate_unique_code(seller.seller_id)

        new_title = TitlePrefixer.apply(code, current_title)
        await self.collections.update_title_and_code(collection_id, new_title, code)

        logger.info(
            "Collection code assigned",
            collection_id=collection_id,
            seller_id=seller.seller_id,
            code=code,
            title=new_title,
        )
        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            collection_id=collection_id,
            code=code,
            title=new_title,
        )

    async def handle_collection_renamed(self, collection_id: str, title: str) -> SyncResult:
        """Restore the code prefix after a collection was renamed.

        Raises:
            RemoteServiceError: If a remote call fails.
        """
        code = await self.collections.get_stored_code(collection_id)
        if not code:
            logger.info("Collection has no code, nothing to do", collection_id=collection_id)
            return SyncResult(outcome=SyncOutcome.NO_CODE, collection_id=collection_id, title=title)

        return await self._apply_prefix(collection_id, code, title)

    async def handle_seller_renamed(self, handle: str, name: str | None = None) -> SyncResult:
        """Rebuild the collection title after the seller changed its name.

        Args:
            handle: Seller handle, shared with the seller's collection.
            name: New shop name; when empty the current title is kept.

        Raises:
            RemoteServiceError: If a remote call fails.
        """
        collection = await self.collections.find_by_handle(handle)
        if collection is None:
            logger.info("No collection for seller handle", handle=handle)
            return SyncResult(outcome=SyncOutcome.NO_COLLECTION)

        code = collection.code
        if code is None:
            code = await self.collections.get_stored_code(collection.id)
        if not code:
            logger.info("Seller collection has no code", handle=handle, collection_id=collection.id)
            return SyncResult(
                outcome=SyncOutcome.NO_CODE,
                collection_id=collection.id,
                title=collection.title,
            )

        name = (name or "").strip()
        remainder = TitlePrefixer.strip(name) if name else TitlePrefixer.strip(collection.title)
        new_title = TitlePrefixer.build(code, remainder)

        if new_title == collection.title:
            logger.info("Seller collection title already current", collection_id=collection.id)
            return SyncResult(
                outcome=SyncOutcome.UNCHANGED,
                collection_id=collection.id,
                code=code,
                title=new_title,
            )

        await self.collections.update_title(collection.id, new_title)
        logger.info(
            "Seller collection renamed",
            handle=handle,
            collection_id=collection.id,
            code=code,
            title=new_title,
        )
        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            collection_id=collection.id,
            code=code,
            title=new_title,
        )

    async def _apply_prefix(self, collection_id: str, code: str, title: str) -> SyncResult:
        if TitlePrefixer.has_prefix(title, code):
            logger.info("Collection title already prefixed", collection_id=collection_id, code=code)
            return SyncResult(
                outcome=SyncOutcome.UNCHANGED,
                collection_id=collection_id,
                code=code,
                title=title,
            )

        new_title = TitlePrefixer.apply(code, title)
        await self.collections.update_title(collection_id, new_title)
        logger.info(
            "Collection title prefix restored",
            collection_id=collection_id,
            code=code,
            title=new_title,
        )
        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            collection_id=collection_id,
            code=code,
            title=new_title,
        )
