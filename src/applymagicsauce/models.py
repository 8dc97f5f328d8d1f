"""
Data Models
===========
Pydantic models for API responses.
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from applymagicsauce.exceptions import DeserializationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class UsageLimit(_Frozen):
    """
    Call quota of a token for one API method.

    ``calls_available_since`` is the time of the last quota reset
    as a unix timestamp in milliseconds.
    """

    method: str
    calls_limit: int = Field(alias="callsLimit")
    calls_available: int = Field(alias="callsAvailable")
    calls_available_since: int = Field(alias="callsAvailableSince")
    calls_renewal: bool = Field(default=False, alias="callsRenewal")
    calls_renewal_days: int = Field(default=0, alias="callsRenewalDays")


class Token(_Frozen):
    """
    Authentication token issued by the ``/auth`` endpoint.

    ``expires`` is kept as the raw integer sent by the API, which does
    not use a standard timestamp encoding. Tokens usually expire after
    about an hour.
    """

    token: str = Field(repr=False)
    customer_id: int
    expires: int
    permissions: tuple[str, ...] = ()
    usage_limits: tuple[UsageLimit, ...] = ()

    @field_validator("permissions", "usage_limits", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        # the API sends null instead of an empty list
        return () if v is None else v

    def limit_for(self, method: str) -> Optional[UsageLimit]:
        """Get the usage limit for an API method, if the token has one."""
        for limit in self.usage_limits:
            if limit.method == method:
                return limit
        return None

    def refreshed(self, renewed: "Token") -> "Token":
        """
        Build the renewed version of this token.

        The bearer string, expiry, permissions and usage limits come from
        ``renewed``; the customer identifier is always kept.
        """
        return self.model_copy(
            update={
                "token": renewed.token,
                "expires": renewed.expires,
                "permissions": renewed.permissions,
                "usage_limits": renewed.usage_limits,
            }
        )


class Prediction(_Frozen):
    """Score of one trait; ``None`` when the API sent a null score."""

    trait: str
    value: Optional[float] = None


class Interpretation(_Frozen):
    trait: str
    value: Any = None


class Contributor(_Frozen):
    """Likes that contributed to a trait prediction."""

    trait: str
    positive: tuple[str, ...] = ()
    negative: tuple[str, ...] = ()

    @field_validator("positive", "negative", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return () if v is None else v


class PredictionResult(_Frozen):
    """
    Result of a prediction call.

    ``input_used`` is the number of input items the API actually used,
    e.g. after dropping likes it does not know or text in an unsupported
    language. ``PredictionResult()`` is the empty result returned when
    the API has nothing to predict from.
    """

    input_used: int = 0
    predictions: tuple[Prediction, ...] = ()
    interpretations: tuple[Interpretation, ...] = ()
    contributors: tuple[Contributor, ...] = ()

    @field_validator("predictions", "interpretations", "contributors", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return () if v is None else v

    @property
    def is_empty(self) -> bool:
        return self == PredictionResult()

    def scores(self) -> dict[str, Optional[float]]:
        """Map each predicted trait to its score."""
        return {p.trait: p.value for p in self.predictions}


def parse_response(model: type[ModelT], body: bytes) -> ModelT:
    """
    Parse a JSON response body into a model.

    Raises:
        DeserializationError: If the body is not valid JSON for the model
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise DeserializationError(
            f"invalid {model.__name__} response: {e.error_count()} error(s)"
        ) from e
