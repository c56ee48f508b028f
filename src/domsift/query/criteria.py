# src/domsift/query/criteria.py
import logging
from typing import Any, Iterable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from domsift.core.managers.config_manager import config_manager
from domsift.errors import ConfigurationError

from .matching import (
    FIELD_EVALUATION_ORDER,
    FIXED_ATTRIBUTES,
    FieldSelector,
    MatchMode,
    compare_strings,
)

logger = logging.getLogger(__name__)

SelectorLike = Union[FieldSelector, str]
ModeLike = Union[MatchMode, str]


class Predicate(BaseModel):
    """
    One unit of a SearchCriteria: which facet(s) to read, what to look for and how to compare.
    """
    model_config = ConfigDict(frozen=True)

    selector: FieldSelector
    value: str
    attribute_name: Optional[str] = None
    mode: MatchMode = MatchMode.EQUALS

    @field_validator("selector", mode="before")
    @classmethod
    def _parse_selector(cls, value: Any) -> FieldSelector:
        return FieldSelector.parse(value)

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> MatchMode:
        return MatchMode.parse(value)

    @model_validator(mode="after")
    def _check_custom_attribute(self):
        """A custom attribute predicate is meaningless without the attribute to read."""
        if FieldSelector.CUSTOM_ATTRIBUTE in self.selector and not self.attribute_name:
            raise ConfigurationError(
                "Searching by custom attribute requires an attribute name.",
                context={"value": self.value},
            )
        return self

    def resolve(self, node: Any, field: FieldSelector) -> Optional[str]:
        """Reads the node-side string for a single selector bit."""
        if field is FieldSelector.ID:
            return node.id
        if field is FieldSelector.NAME:
            return node.tag
        if field is FieldSelector.CUSTOM_ATTRIBUTE:
            # Re-checked here as well: model_construct() skips validation
            if not self.attribute_name:
                raise ConfigurationError(
                    "Custom attribute predicate has no attribute name.",
                    context={"value": self.value},
                )
            return node.get_attribute(self.attribute_name)
        return node.get_attribute(FIXED_ATTRIBUTES[field])

    def matches(self, node: Any) -> bool:
        """True if any of the selected facets matches (facets are OR'ed)."""
        for field in FIELD_EVALUATION_ORDER:
            if field not in self.selector:
                continue
            if compare_strings(self.resolve(node, field), self.value, self.mode):
                return True
        return False


class SearchCriteria:
    """
    An ordered list of predicates combined with AND (match_all=True) or OR (match_all=False).

    Predicates that don't name a match mode get the criteria's default mode.
    Apart from appending predicates the criteria are immutable.
    """

    def __init__(
            self,
            match_all: bool = True,
            default_mode: Optional[ModeLike] = None,
            predicates: Optional[Iterable[Predicate]] = None
    ):
        self._match_all = match_all
        if default_mode is None:
            default_mode = config_manager.get_nested("query.default_match_mode", "equals")
        self._default_mode = MatchMode.parse(default_mode)
        self._predicates = list(predicates or [])

    # --- Construction ---

    @classmethod
    def by(
            cls,
            selector: SelectorLike,
            value: str,
            match_all: bool = True,
            mode: ModeLike = MatchMode.EQUALS
    ) -> "SearchCriteria":
        """Criteria holding a single predicate."""
        return cls(match_all=match_all, default_mode=mode).add_predicate(selector, value)

    @classmethod
    def input_elements(cls) -> "SearchCriteria":
        """OR criteria matching <input> and <select> elements."""
        return (
            cls(match_all=False, default_mode=MatchMode.EQUALS)
            .add_predicate(FieldSelector.NAME, "input")
            .add_predicate(FieldSelector.NAME, "select")
        )

    @classmethod
    def form_fields(cls) -> "SearchCriteria":
        """OR criteria matching every element that can carry a form value."""
        criteria = cls(match_all=False, default_mode=MatchMode.EQUALS)
        for tag in ("input", "select", "textarea", "button"):
            criteria.add_predicate(FieldSelector.NAME, tag)
        return criteria

    def add_predicate(
            self,
            selector: SelectorLike,
            value: str,
            attribute_name: Optional[str] = None,
            mode: Optional[ModeLike] = None
    ) -> "SearchCriteria":
        """
        Appends a predicate and returns the criteria for chaining.

        Raises:
            ConfigurationError: If the selector includes CUSTOM_ATTRIBUTE without an attribute name.
        """
        self._predicates.append(Predicate(
            selector=selector,
            value=value,
            attribute_name=attribute_name,
            mode=self._default_mode if mode is None else mode,
        ))
        logger.debug("Added predicate %r (match_all=%s).", self._predicates[-1], self._match_all)
        return self

    def add_custom_attribute(self, attribute_name: str, value: str) -> "SearchCriteria":
        """Appends a predicate on an arbitrary attribute, using the default mode."""
        return self.add_predicate(FieldSelector.CUSTOM_ATTRIBUTE, value, attribute_name)

    # --- Evaluation ---

    def is_acceptable(self, node: Any) -> bool:
        """
        Decides whether a node passes the criteria.

        Empty criteria accept everything. In AND mode the first unsatisfied
        predicate rejects the node; in OR mode the first satisfied one accepts it.
        """
        if not self._predicates:
            return True

        for predicate in self._predicates:
            satisfied = predicate.matches(node)
            if satisfied and not self._match_all:
                return True
            if not satisfied and self._match_all:
                return False

        return self._match_all

    __call__ = is_acceptable

    # --- Introspection ---

    @property
    def predicates(self) -> Tuple[Predicate, ...]:
        return tuple(self._predicates)

    @property
    def match_all(self) -> bool:
        return self._match_all

    @property
    def default_mode(self) -> MatchMode:
        return self._default_mode

    def __len__(self) -> int:
        return len(self._predicates)

    def __repr__(self) -> str:
        joiner = " AND " if self._match_all else " OR "
        parts = [
            f"{p.selector.name or p.selector}"
            f"{'[' + p.attribute_name + ']' if p.attribute_name else ''}"
            f" {p.mode.name or p.mode} {p.value!r}"
            for p in self._predicates
        ]
        return f"SearchCriteria({joiner.join(parts) or '*'})"
