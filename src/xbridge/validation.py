"""Input validation for the externally invoked request shapes."""

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import Field, StrictBool, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import DecimalsMismatchError, ValidationError
from .models import BASE_UNIT_PATTERN, BridgeAsset, BridgeChain, WireModel
from .registry import AssetRegistry, ChainId

MIN_SLIPPAGE = 0.0
MAX_SLIPPAGE = 99.99

ParamsT = TypeVar("ParamsT", bound=WireModel)


class GetBridgeExternalUrlParams(WireModel):
    from_chain: BridgeChain
    to_chain: BridgeChain
    from_asset: BridgeAsset
    to_asset: BridgeAsset
    to_address: StrictStr = Field(min_length=1)


class GetBridgeQuoteParams(WireModel):
    from_chain: BridgeChain
    to_chain: BridgeChain
    from_asset: BridgeAsset
    to_asset: BridgeAsset
    from_amount: StrictStr = Field(pattern=BASE_UNIT_PATTERN)  # base units
    from_address: StrictStr = Field(min_length=1)
    to_address: StrictStr = Field(min_length=1)
    # Percentage, exclusive on both ends.
    slippage: Optional[float] = Field(default=None, gt=MIN_SLIPPAGE, lt=MAX_SLIPPAGE)

    @field_validator("slippage", mode="before")
    @classmethod
    def validate_slippage_type(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("slippage must be a number")
        return value

    @property
    def from_amount_int(self) -> int:
        return int(self.from_amount)

    def external_url_params(self) -> GetBridgeExternalUrlParams:
        return GetBridgeExternalUrlParams(
            from_chain=self.from_chain,
            to_chain=self.to_chain,
            from_asset=self.from_asset,
            to_asset=self.to_asset,
            to_address=self.to_address,
        )


class GetDepositAddressParams(WireModel):
    from_chain: BridgeChain
    to_chain: BridgeChain
    from_asset: BridgeAsset
    to_address: StrictStr = Field(min_length=1)
    auto_unwrap_into_native: Optional[StrictBool] = None


def _error_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _validate(model: Type[ParamsT], payload: Mapping[str, Any]) -> ParamsT:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        first = errors[0]
        field = _error_path(first.get("loc", ()))
        message = first.get("msg", str(exc))
        bad_input = first.get("input")
        raise ValidationError(
            message=f"Validation error for field '{field}': {message}",
            field=field,
            value=bad_input if isinstance(bad_input, (str, int, float)) else None,
            constraint=message,
            errors=[
                {"field": _error_path(error.get("loc", ())), "message": error.get("msg")}
                for error in errors
            ],
        ) from exc


def validate_quote_request(
    payload: Mapping[str, Any], registry: Optional[AssetRegistry] = None
) -> GetBridgeQuoteParams:
    """Validate a quote request, raising ``ValidationError`` with a field path.

    With a ``registry`` the asset decimals are checked against it as well.
    """
    params = _validate(GetBridgeQuoteParams, payload)
    if registry is not None:
        ensure_params_decimals(params, registry)
    return params


def validate_external_url_request(
    payload: Mapping[str, Any], registry: Optional[AssetRegistry] = None
) -> GetBridgeExternalUrlParams:
    params = _validate(GetBridgeExternalUrlParams, payload)
    if registry is not None:
        ensure_params_decimals(params, registry)
    return params


def validate_deposit_address_request(
    payload: Mapping[str, Any], registry: Optional[AssetRegistry] = None
) -> GetDepositAddressParams:
    params = _validate(GetDepositAddressParams, payload)
    if registry is not None:
        ensure_params_decimals(params, registry)
    return params


def ensure_params_decimals(
    params: Union[GetBridgeQuoteParams, GetBridgeExternalUrlParams, GetDepositAddressParams],
    registry: AssetRegistry,
) -> None:
    """Check every asset of a request against ``registry``."""
    ensure_registry_decimals(params.from_asset, registry)
    to_asset = getattr(params, "to_asset", None)
    if to_asset is not None:
        ensure_registry_decimals(to_asset, registry)


def ensure_registry_decimals(
    asset: BridgeAsset,
    registry: AssetRegistry,
    chain_id: Optional[ChainId] = None,
) -> BridgeAsset:
    """Reject an asset whose decimals disagree with the registry.

    Raises ``AssetNotFoundError`` when the registry does not know the asset.
    """
    expected = registry.decimals_for(asset.source_denom, chain_id)
    if asset.decimals != expected:
        raise DecimalsMismatchError(asset.source_denom, asset.decimals, expected)
    return asset
