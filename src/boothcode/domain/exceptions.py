"""Exceptions raised by the booth code domain and its providers."""


class BoothCodeError(Exception):
    """Base class for all BoothCode errors."""

    pass


class NotFoundError(BoothCodeError):
    """Raised when a remote lookup has no match."""

    pass


class SellerNotFoundError(NotFoundError):
    """Raised when the seller directory has no seller for a handle."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"No seller found with handle '{handle}'")


class RemoteServiceError(BoothCodeError):
    """Raised when a remote service answers with anything but success."""

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        self.service = service
        self.status_code = status_code
        detail = f"{service}: {message}"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)


class RegistryError(BoothCodeError):
    """Base class for code registry errors."""

    pass


class RegistryStorageError(RegistryError):
    """Raised when the registry's backing store cannot be written."""

    pass


class CorruptRegistryError(RegistryError):
    """Raised when the registry's backing store cannot be parsed."""

    pass


class CodeAlreadyRegisteredError(RegistryError):
    """Raised when adding a code that the registry already holds."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Code '{code}' is already registered")


class InvalidSellerIdError(BoothCodeError, ValueError):
    """Raised when a seller id is not a non-negative integer."""

    def __init__(self, seller_id: object) -> None:
        self.seller_id = seller_id
        super().__init__(f"Invalid seller id for encoding: {seller_id!r}")


class SellerCodeExhaustedError(BoothCodeError):
    """Raised when every primary and fallback code has been issued."""

    def __init__(self) -> None:
        super().__init__(
            "All 2,600 primary and 6,760 fallback seller codes have been issued. "
            "Consider implementing an extended code format."
        )


class WebhookVerificationError(BoothCodeError):
    """Raised when a webhook's HMAC signature does not match its body."""

    pass
