"""Merge per-request parameters with process defaults and check required fields."""

from src.messaging.domain.exceptions import MissingParameter
from src.messaging.domain.models import ProcessDefaults, RequestParams


def resolve_params(params: RequestParams, defaults: ProcessDefaults) -> RequestParams:
    """Fill every empty field from defaults. Request value > default > empty."""
    return params.merged_with(defaults)


def validate_required(params: RequestParams) -> RequestParams:
    """Raise MissingParameter if appid/secret/userid/template_id is still empty."""
    missing = params.missing_required()
    if missing:
        raise MissingParameter(
            "Missing required parameters",
            details={"missing": missing},
        )
    return params
