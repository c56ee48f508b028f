# src/domsift/query/matching.py
from enum import Flag, auto
from typing import Optional, Tuple, Type, TypeVar, Union

F = TypeVar("F", bound=Flag)


class FieldSelector(Flag):
    """
    The facet(s) of a node a predicate reads. Members can be combined with `|`;
    each selected facet is tested separately against the same search string.
    """
    NAME = auto()
    TYPE = auto()
    ID = auto()
    VALUE = auto()
    ACTION = auto()
    HTML_ATTRIBUTE_NAME = auto()
    CUSTOM_ATTRIBUTE = auto()

    @classmethod
    def parse(cls, value: Union[str, "FieldSelector"]) -> "FieldSelector":
        """Parses 'name|type' style strings."""
        return _parse_flag(cls, value)


class MatchMode(Flag):
    """String comparison strategies; a comparison succeeds if any enabled mode holds."""
    EQUALS = auto()
    STARTS_WITH = auto()
    CONTAINS = auto()
    ENDS_WITH = auto()

    @classmethod
    def parse(cls, value: Union[str, "MatchMode"]) -> "MatchMode":
        """Parses 'starts_with|ends_with' style strings."""
        return _parse_flag(cls, value)


# The order in which selector bits are evaluated. It decides where
# SearchCriteria.is_acceptable short-circuits, so it is part of the contract.
FIELD_EVALUATION_ORDER: Tuple[FieldSelector, ...] = (
    FieldSelector.ID,
    FieldSelector.NAME,
    FieldSelector.TYPE,
    FieldSelector.VALUE,
    FieldSelector.ACTION,
    FieldSelector.HTML_ATTRIBUTE_NAME,
    FieldSelector.CUSTOM_ATTRIBUTE,
)

# Attribute read for the selectors that map onto a fixed attribute
FIXED_ATTRIBUTES = {
    FieldSelector.TYPE: "type",
    FieldSelector.VALUE: "value",
    FieldSelector.ACTION: "action",
    FieldSelector.HTML_ATTRIBUTE_NAME: "name",
}

MODE_EVALUATION_ORDER: Tuple[MatchMode, ...] = (
    MatchMode.EQUALS,
    MatchMode.STARTS_WITH,
    MatchMode.CONTAINS,
    MatchMode.ENDS_WITH,
)


def _parse_flag(flag_cls: Type[F], value: Union[str, F]) -> F:
    if isinstance(value, flag_cls):
        return value

    result = flag_cls(0)
    for part in str(value).split("|"):
        key = part.strip().upper().replace("-", "_")
        if not key:
            continue
        try:
            result |= flag_cls[key]
        except KeyError:
            raise ValueError(f"Unknown {flag_cls.__name__} member: '{part.strip()}'") from None
    if not result:
        raise ValueError(f"No {flag_cls.__name__} members in '{value}'")
    return result


def compare_strings(candidate: Optional[str], target: str, mode: MatchMode) -> bool:
    """
    Compares a node-side string against a search string, ignoring case.

    The enabled modes are tried in the order Equals, StartsWith, Contains,
    EndsWith and the first success wins. An absent candidate (or target)
    never matches.
    """
    if candidate is None or target is None:
        return False

    candidate = candidate.lower()
    target = target.lower()

    for bit in MODE_EVALUATION_ORDER:
        if not mode & bit:
            continue
        if bit is MatchMode.EQUALS and candidate == target:
            return True
        if bit is MatchMode.STARTS_WITH and candidate.startswith(target):
            return True
        if bit is MatchMode.CONTAINS and target in candidate:
            return True
        if bit is MatchMode.ENDS_WITH and candidate.endswith(target):
            return True
    return False
