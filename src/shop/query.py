# builds catalog retrieval requests from search / filter criteria; pure, no I/O
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

ALL_PRODUCTS_PATH = "/products/"
SEARCH_PATH = "/search"
FILTER_PATH = "/products/filter"

PRICE_BAND_SEPARATOR = "-"


class SortOption(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


@dataclass(frozen=True)
class SearchCriteria:
    text: str = ""


@dataclass(frozen=True)
class FilterCriteria:
    """
    Structured catalog filter. Every field is independent; None or "" means
    "no constraint on that dimension".

    price_band is a "low-high" token as offered by the price selector,
    e.g. "50-200".
    """

    category_id: Optional[Union[int, str]] = None
    price_band: Optional[str] = None
    sort: Optional[Union[SortOption, str]] = None


@dataclass(frozen=True)
class RetrievalRequest:
    path: str
    params: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_fetch_all(self) -> bool:
        return self.path == ALL_PRODUCTS_PATH and not self.params

    def describe(self) -> str:
        if not self.params:
            return self.path
        return self.path + "?" + "&".join(f"{k}={v}" for k, v in self.params)


def _present(value) -> bool:
    return value is not None and value != ""


def split_price_band(band: str) -> Tuple[str, Optional[str]]:
    """
    Split "low-high" on the first separator. Parts are returned verbatim;
    a band without a separator yields (band, None).
    """
    low, sep, high = band.partition(PRICE_BAND_SEPARATOR)
    return low, (high if sep else None)


def compose_all() -> RetrievalRequest:
    return RetrievalRequest(ALL_PRODUCTS_PATH)


def compose_search(text: Optional[str]) -> RetrievalRequest:
    query = (text or "").strip()
    if not query:
        return compose_all()
    return RetrievalRequest(SEARCH_PATH, (("query", query),))


def compose_filter(criteria: FilterCriteria) -> RetrievalRequest:
    """
    Build a filter request holding only the constraints that are set.
    Raises ValueError if the sort key is not a known SortOption.
    """
    params = []
    if _present(criteria.price_band):
        low, high = split_price_band(str(criteria.price_band))
        params.append(("min_price", low))
        if high is not None:
            params.append(("max_price", high))
    if _present(criteria.category_id):
        params.append(("category_id", str(criteria.category_id)))
    if _present(criteria.sort):
        params.append(("sort_by", SortOption(criteria.sort).value))
    return RetrievalRequest(FILTER_PATH, tuple(params))


def compose(
    criteria: Union[SearchCriteria, FilterCriteria, None],
) -> RetrievalRequest:
    if criteria is None:
        return compose_all()
    if isinstance(criteria, SearchCriteria):
        return compose_search(criteria.text)
    if isinstance(criteria, FilterCriteria):
        return compose_filter(criteria)
    raise TypeError(f"Unsupported criteria type: {type(criteria).__name__}")
