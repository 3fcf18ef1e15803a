"""Custom exceptions and error handling for bridge operations."""

from typing import Any, Optional


class BridgeError(Exception):
    """Base exception for bridge abstraction errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "BridgeError",
        details: Optional[dict[str, Any]] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            error_type: Type/category of error
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary format for API responses."""
        result = {
            "success": False,
            "error": self.message,
            "error_type": self.error_type,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(BridgeError):
    """Error raised when a request payload fails schema validation."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        constraint: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        """
        Initialize validation error.

        Args:
            message: Human-readable error message
            field: Dotted path of the field that failed validation
            value: The invalid value
            constraint: Description of the constraint that was violated
            errors: Every validation error found, first one first
        """
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = value
        if constraint is not None:
            details["constraint"] = constraint
        if errors:
            details["validation_errors"] = errors

        super().__init__(
            message=message,
            error_type="ValidationError",
            details=details
        )
        self.field = field


class ProviderError(BridgeError):
    """Error raised by or about a specific bridge provider."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_type: str = "ProviderError",
        details: Optional[dict[str, Any]] = None,
    ):
        merged = {"provider": provider_name}
        merged.update(details or {})
        super().__init__(message=message, error_type=error_type, details=merged)
        self.provider_name = provider_name


class ProviderIneligibleError(ProviderError):
    """The provider cannot service the requested pair or amount."""

    def __init__(self, provider_name: str, reason: str):
        super().__init__(
            message=f"{provider_name} cannot service this transfer: {reason}",
            provider_name=provider_name,
            error_type="ProviderIneligibleError",
            details={"reason": reason},
        )
        self.reason = reason


class MaintenanceModeError(ProviderError):
    """The provider reported that it is in maintenance mode."""

    def __init__(self, provider_name: str, maintenance_message: Optional[str] = None):
        message = f"{provider_name} is in maintenance mode"
        if maintenance_message:
            message = f"{message}: {maintenance_message}"
        super().__init__(
            message=message,
            provider_name=provider_name,
            error_type="MaintenanceModeError",
            details=(
                {"maintenance_message": maintenance_message}
                if maintenance_message
                else None
            ),
        )
        self.maintenance_message = maintenance_message


class ProviderTimeoutError(ProviderError):
    """The provider did not answer within the allotted time."""

    def __init__(self, provider_name: str, timeout_s: float):
        super().__init__(
            message=f"{provider_name} did not respond within {timeout_s:g}s",
            provider_name=provider_name,
            error_type="ProviderTimeoutError",
            details={"timeout_s": timeout_s},
        )
        self.timeout_s = timeout_s


class UnsupportedCapabilityError(ProviderError):
    """The provider does not implement an optional capability."""

    def __init__(self, provider_name: str, capability: str):
        super().__init__(
            message=f"{provider_name} does not support {capability}",
            provider_name=provider_name,
            error_type="UnsupportedCapabilityError",
            details={"capability": capability},
        )
        self.capability = capability


class UnknownProviderError(BridgeError):
    """Error raised when no registered provider has the requested name."""

    def __init__(self, provider_name: str):
        super().__init__(
            message=f"No bridge provider named '{provider_name}' is registered.",
            error_type="UnknownProviderError",
            details={"provider": provider_name}
        )
        self.provider_name = provider_name


class NoQuotesAvailableError(BridgeError):
    """Error raised when no provider produced a quote."""

    def __init__(self, excluded: dict[str, str]):
        """
        Initialize no quotes error.

        Args:
            excluded: Reason each provider was excluded, keyed by provider name
        """
        if excluded:
            message = (
                "No bridge provider returned a quote for this transfer. "
                f"Excluded providers: {', '.join(sorted(excluded))}."
            )
        else:
            message = "No bridge providers are registered to quote this transfer."
        super().__init__(
            message=message,
            error_type="NoQuotesAvailableError",
            details={"excluded": dict(excluded)} if excluded else None
        )
        self.excluded = dict(excluded)


class AssetNotFoundError(BridgeError):
    """Error raised when a source denom is not present in the asset lists."""

    def __init__(self, source_denom: str, chain_id: Optional[str | int] = None):
        """
        Initialize asset not found error.

        Args:
            source_denom: The source denom that was not found
            chain_id: Chain the representation was requested for, if any
        """
        if chain_id is None:
            message = f"Asset '{source_denom}' not found in the asset lists."
        else:
            message = (
                f"Asset '{source_denom}' has no representation on chain {chain_id!r}."
            )
        details: dict[str, Any] = {"source_denom": source_denom}
        if chain_id is not None:
            details["chain_id"] = chain_id
        super().__init__(
            message=message,
            error_type="AssetNotFoundError",
            details=details
        )


class ChainNotFoundError(BridgeError):
    """Error raised when a chain is not present in the chain list."""

    def __init__(self, chain: str | int):
        super().__init__(
            message=f"Chain {chain!r} not found in the chain list.",
            error_type="ChainNotFoundError",
            details={"chain": chain}
        )


class DecimalsMismatchError(BridgeError):
    """Error raised when an asset's decimals disagree with the registry."""

    def __init__(self, source_denom: str, declared: int, expected: int):
        super().__init__(
            message=(
                f"Asset '{source_denom}' declares {declared} decimals but the "
                f"registry lists {expected}."
            ),
            error_type="DecimalsMismatchError",
            details={
                "source_denom": source_denom,
                "declared": declared,
                "expected": expected,
            }
        )


def format_error_response(error: Exception) -> dict[str, Any]:
    """
    Format any exception into a standardized error response.

    Args:
        error: The exception to format

    Returns:
        Dictionary with standardized error format
    """
    if isinstance(error, BridgeError):
        return error.to_dict()

    # Handle Pydantic validation errors
    if hasattr(error, "errors"):
        errors = error.errors()
        if errors:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", []))
            message = first_error.get("msg", str(error))

            return {
                "success": False,
                "error": f"Validation error for field '{field}': {message}",
                "error_type": "ValidationError",
                "details": {
                    "field": field,
                    "validation_errors": errors
                }
            }

    # Generic exception
    return {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__
    }
