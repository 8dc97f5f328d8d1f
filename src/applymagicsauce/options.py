"""
Prediction Options
==================
Query parameters for the prediction endpoints.

Use ``text_options`` for ``predict_text`` and ``like_ids_options`` for
``predict_like_ids``; both return an immutable ``PredictionOptions``.
"""

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Optional, Union

import httpx


class OptionKey(str, Enum):
    """Query parameters accepted by the prediction endpoints."""

    SOURCE = "source"
    TRAITS = "traits"
    INTERPRETATIONS = "interpretations"
    CONTRIBUTORS = "contributors"


class Source(str, Enum):
    """Provenance of text sent to ``predict_text``."""

    WEBSITE = "WEBSITE"
    EMAIL = "EMAIL"
    BROCHURE = "BROCHURE"
    STATUS_UPDATE = "STATUS_UPDATE"
    TWEET = "TWEET"
    CV = "CV"
    OTHER = "OTHER"


_KEYS = frozenset(k.value for k in OptionKey)


def _value(v: Union[str, Enum]) -> str:
    return v.value if isinstance(v, Enum) else str(v)


def _flag(v: bool) -> str:
    return "true" if v else "false"


class PredictionOptions(Mapping[str, str]):
    """
    Immutable set of prediction query parameters.

    Keys are limited to ``OptionKey`` values.
    """

    __slots__ = ("_params",)

    def __init__(self, params: Optional[Mapping[Union[str, OptionKey], str]] = None):
        items = {_value(k): _value(v) for k, v in (params or {}).items()}
        unknown = set(items) - _KEYS
        if unknown:
            raise ValueError(f"unknown prediction options: {', '.join(sorted(unknown))}")
        self._params = items

    def __getitem__(self, key: Union[str, OptionKey]) -> str:
        return self._params[_value(key)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (str, OptionKey)):
            return _value(key) in self._params
        return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __hash__(self) -> int:
        return hash(frozenset(self._params.items()))

    def __repr__(self) -> str:
        return f"PredictionOptions({self._params!r})"

    @property
    def params(self) -> dict[str, str]:
        """Copy of the parameters, for use as request query params."""
        return dict(self._params)

    def encode(self) -> str:
        """Encode as a URL query string."""
        return str(httpx.QueryParams(self._params))

    @classmethod
    def decode(cls, query: str) -> "PredictionOptions":
        """Parse a URL query string produced by ``encode``."""
        return cls(dict(httpx.QueryParams(query.lstrip("?"))))


def _with_traits(params: dict[str, str], traits: Optional[Iterable[str]]) -> None:
    if isinstance(traits, str):
        traits = [traits]
    traits = [_value(t) for t in traits or ()]
    if traits:
        params[OptionKey.TRAITS.value] = ",".join(traits)


def text_options(
    source: Union[str, Source],
    traits: Optional[Iterable[str]] = None,
    interpretations: bool = False,
) -> PredictionOptions:
    """
    Build options for ``predict_text``.

    Args:
        source: Where the text comes from; required. Any ``Source`` member
            or another string accepted by the API
        traits: Traits to predict (all traits if empty)
        interpretations: Whether to include interpretations of the scores

    Returns:
        Options with ``source`` and ``interpretations`` always set
    """
    source = _value(source)
    if not source:
        raise ValueError("source is required for text predictions")

    params = {OptionKey.SOURCE.value: source}
    _with_traits(params, traits)
    params[OptionKey.INTERPRETATIONS.value] = _flag(interpretations)
    return PredictionOptions(params)


def like_ids_options(
    traits: Optional[Iterable[str]] = None,
    interpretations: bool = False,
    contributors: bool = False,
) -> PredictionOptions:
    """
    Build options for ``predict_like_ids``.

    All parameters are optional; the defaults match the API's own defaults.
    """
    params: dict[str, str] = {}
    _with_traits(params, traits)
    params[OptionKey.INTERPRETATIONS.value] = _flag(interpretations)
    params[OptionKey.CONTRIBUTORS.value] = _flag(contributors)
    return PredictionOptions(params)
