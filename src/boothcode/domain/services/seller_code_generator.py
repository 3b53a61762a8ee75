"""Seller code generator service.

Derives a short booth code from a seller id and issues it uniquely against
the code registry.

Primary codes are one letter and two digits (``A00``-``Z99``, 2,600 codes).
The seller id is mapped onto that space by an affine hash, so the same seller
always starts from the same candidate. When the candidate is taken the base
number is stepped forward by a random amount; after ``max_attempts``
candidates the generator switches to the fallback format of two letters and
one digit (``AA0``-``ZZ9``, 6,760 codes).
"""

import asyncio
import random
import re
import string

from boothcode.core.logging import get_logger
from boothcode.domain.exceptions import (
    CodeAlreadyRegisteredError,
    InvalidSellerIdError,
    SellerCodeExhaustedError,
)
from boothcode.infrastructure.registry.base import CodeRegistry

logger = get_logger(__name__)


class SellerCodeGenerator:
    """Generator for unique seller booth codes.

    One instance is created at startup and shared by every webhook; its lock
    serializes the check-then-add against the registry.

    Example codes: B58, Q07 (primary), KT4 (fallback)
    """

    LETTERS = string.ascii_uppercase

    # 1 letter (26) x 2 digits (100)
    BASE_SPACE = 26 * 100
    MULTIPLIER = 101
    OFFSET = 12345

    # 2 letters (26 x 26) x 1 digit (10)
    FALLBACK_SPACE = 26 * 26 * 10

    PRIMARY_PATTERN = re.compile(r"^[A-Z][0-9]{2}$")
    FALLBACK_PATTERN = re.compile(r"^[A-Z]{2}[0-9]$")

    # Registration conflicts only happen when another process wins the race
    MAX_REGISTRATION_CONFLICTS = 3

    def __init__(
        self,
        registry: CodeRegistry,
        max_attempts: int = 20,
        step_max: int = 37,
        fallback_max_attempts: int = 1000,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            registry: Registry of issued codes.
            max_attempts: Primary candidates examined before falling back.
            step_max: Largest random step between primary candidates.
            fallback_max_attempts: Random fallback draws before sweeping the
                fallback space in order.
            rng: Random source; injectable for deterministic tests.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if step_max < 1:
            raise ValueError("step_max must be at least 1")

        self.registry = registry
        self.max_attempts = max_attempts
        self.step_max = step_max
        self.fallback_max_attempts = fallback_max_attempts
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()

    @staticmethod
    def coerce_seller_id(seller_id: int | str) -> int:
        """Convert a seller id from the directory into a non-negative int.

        Raises:
            InvalidSellerIdError: If the id is not a non-negative integer.
        """
        if isinstance(seller_id, bool):
            raise InvalidSellerIdError(seller_id)
        if isinstance(seller_id, str):
            if not seller_id.strip().isdigit():
                raise InvalidSellerIdError(seller_id)
            seller_id = int(seller_id.strip())
        if not isinstance(seller_id, int) or seller_id < 0:
            raise InvalidSellerIdError(seller_id)
        return seller_id

    @classmethod
    def derive_base(cls, seller_id: int | str) -> int:
        """Hash a seller id onto the primary base space.

        Examples:
            >>> SellerCodeGenerator.derive_base(482913)
            158
        """
        seller_id = cls.coerce_seller_id(seller_id)
        return ((seller_id % cls.BASE_SPACE) * cls.MULTIPLIER + cls.OFFSET) % cls.BASE_SPACE

    @classmethod
    def encode(cls, base: int) -> str:
        """Encode a base number as a primary code.

        Examples:
            >>> SellerCodeGenerator.encode(158)
            'B58'
            >>> SellerCodeGenerator.encode(7)
            'A07'
        """
        letter = cls.LETTERS[(base // 100) % 26]
        return f"{letter}{base % 100:02d}"

    @classmethod
    def encode_fallback(cls, number: int) -> str:
        """Encode a number in ``[0, FALLBACK_SPACE)`` as a fallback code.

        Examples:
            >>> SellerCodeGenerator.encode_fallback(0)
            'AA0'
            >>> SellerCodeGenerator.encode_fallback(6759)
            'ZZ9'
        """
        first = cls.LETTERS[(number // 260) % 26]
        second = cls.LETTERS[(number // 10) % 26]
        return f"{first}{second}{number % 10}"

    @classmethod
    def preview(cls, seller_id: int | str) -> str:
        """Return the seller's primary candidate without consulting the registry."""
        return cls.encode(cls.derive_base(seller_id))

    @classmethod
    def validate(cls, code: str) -> bool:
        """Validate that a code matches the primary or fallback format.

        Examples:
            >>> SellerCodeGenerator.validate("B58")
            True
            >>> SellerCodeGenerator.validate("KT4")
            True
            >>> SellerCodeGenerator.validate("b58")
            False
        """
        if not isinstance(code, str):
            return False
        return bool(cls.PRIMARY_PATTERN.match(code) or cls.FALLBACK_PATTERN.match(code))

    @classmethod
    def is_fallback(cls, code: str) -> bool:
        """Check whether a code uses the two-letter fallback format."""
        return isinstance(code, str) and bool(cls.FALLBACK_PATTERN.match(code))

    async def generate_unique_code(self, seller_id: int | str) -> str:
        """Issue a code for a seller and record it in the registry.

        Two calls for the same seller may return different codes: the
        registry remembers issued codes, not which seller owns them.

        Args:
            seller_id: Seller id from the seller directory.

        Returns:
            A code absent from the registry before the call, now registered.

        Raises:
            InvalidSellerIdError: If the seller id is not a non-negative integer.
            SellerCodeExhaustedError: If both code spaces are full.
            RegistryStorageError: If the registry cannot be persisted.
        """
        seller_id = self.coerce_seller_id(seller_id)

        async with self._lock:
            conflicts = 0
            while True:
                code = await self._find_free_code(seller_id)
                try:
                    await self.registry.add(code)
                except CodeAlreadyRegisteredError:
                    conflicts += 1
                    if conflicts >= self.MAX_REGISTRATION_CONFLICTS:
                        raise
                    logger.warning(
                        "Code taken by a concurrent writer, retrying",
                        seller_id=seller_id,
                        code=code,
                    )
                    continue

                logger.info(
                    "Seller code issued",
                    seller_id=seller_id,
                    code=code,
                    fallback=self.is_fallback(code),
                )
                return code

    async def _find_free_code(self, seller_id: int) -> str:
        base = self.derive_base(seller_id)
        code = self.encode(base)
        attempts = 1

        while await self.registry.contains(code):
            if attempts >= self.max_attempts:
                logger.warning(
                    "Primary code candidates exhausted, using fallback format",
                    seller_id=seller_id,
                    attempts=attempts,
                )
                return await self._find_fallback_code()
            base = (base + self._rng.randint(1, self.step_max)) % self.BASE_SPACE
            code = self.encode(base)
            attempts += 1

        return code

    async def _find_fallback_code(self) -> str:
        for _ in range(self.fallback_max_attempts):
            code = self.encode_fallback(self._rng.randrange(self.FALLBACK_SPACE))
            if not await self.registry.contains(code):
                return code

        # Random draws keep missing; walk the whole space once
        for number in range(self.FALLBACK_SPACE):
            code = self.encode_fallback(number)
            if not await self.registry.contains(code):
                return code

        logger.error("Fallback code space exhausted")
        raise SellerCodeExhaustedError()
