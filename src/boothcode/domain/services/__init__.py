"""Domain services for BoothCode.

Services contain the booth code business logic: code generation, title
prefix handling and webhook event orchestration.
"""

from boothcode.domain.services.booth_sync_service import (
    BoothCodeSyncService,
    SyncOutcome,
    SyncResult,
)
from boothcode.domain.services.seller_code_generator import SellerCodeGenerator
from boothcode.domain.services.title_prefixer import TitlePrefixer

__all__ = [
    "BoothCodeSyncService",
    "SellerCodeGenerator",
    "SyncOutcome",
    "SyncResult",
    "TitlePrefixer",
]
