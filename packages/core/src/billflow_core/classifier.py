"""Line item classification.

Every row of a quote or invoice is classified as ITEM, HEADER or
TIMESHEET before it is summed or reconciled. The stored type tag wins
when present; rows saved without a tag fall back to a name heuristic,
because rows synthesized from logged hours are always named
"Work on <date>".

The heuristic lives only here, behind ``ClassificationRule``, so the
aggregator and the timesheet matcher never look at row names.

Earlier dashboard figures counted any row whose name contained
"work on", including rows tagged ITEM by old conversions. Only
``ClassifierMode.LEGACY`` gives those figures (for rows of the
"Work on <date>" shape); the default tagged rule trusts the stored tag.
"""

import re
from typing import Optional, Protocol, runtime_checkable

from .config import ClassifierConfig, ClassifierMode
from .exceptions import ConfigurationError
from .models import LineItem, LineItemType

# "Work on 15/01/2025", "work on Jan 15, 2025", ... the remainder must contain a digit.
TIMESHEET_NAME_PATTERN = re.compile(r"^work\s+on\s+(?=.*\d).+$", re.IGNORECASE)


def looks_like_timesheet_name(name: Optional[str]) -> bool:
    """True if a row name matches the "Work on <date>" pattern."""
    if not name:
        return False
    return TIMESHEET_NAME_PATTERN.match(name.strip()) is not None


@runtime_checkable
class ClassificationRule(Protocol):
    """Contract for a classification rule.

    Any object with a ``classify(item) -> LineItemType`` method is a
    rule; implementations must be pure.
    """

    def classify(self, item: LineItem) -> LineItemType:
        ...


class TaggedRule:
    """Stored tag first, name heuristic only for untagged rows."""

    def classify(self, item: LineItem) -> LineItemType:
        if item.type is not None:
            return item.type
        if looks_like_timesheet_name(item.name):
            return LineItemType.TIMESHEET
        return LineItemType.ITEM


class LegacyNameRule:
    """Like ``TaggedRule``, but ITEM-tagged rows named like timesheet rows are
    promoted to TIMESHEET.

    Older quote-to-invoice conversions re-tagged every copied row as ITEM,
    so timesheet rows on those invoices are only recognisable by name.
    HEADER and TIMESHEET tags are still authoritative.
    """

    def classify(self, item: LineItem) -> LineItemType:
        if item.type in (LineItemType.HEADER, LineItemType.TIMESHEET):
            return item.type
        if looks_like_timesheet_name(item.name):
            return LineItemType.TIMESHEET
        return LineItemType.ITEM


class StrictTagRule:
    """Tags only; untagged rows are plain items."""

    def classify(self, item: LineItem) -> LineItemType:
        return item.type or LineItemType.ITEM


_RULES = {
    ClassifierMode.TAGGED: TaggedRule,
    ClassifierMode.LEGACY: LegacyNameRule,
    ClassifierMode.STRICT: StrictTagRule,
}


def rule_for_mode(mode) -> ClassificationRule:
    """Build the rule configured by ``ClassifierMode``."""
    try:
        return _RULES[ClassifierMode(mode)]()
    except (KeyError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown classifier mode: {mode}",
            config_key="BILLFLOW_CLASSIFIER_MODE",
            expected=", ".join(m.value for m in ClassifierMode),
            actual=mode,
        ) from e


class LineItemClassifier:
    """Classifies document rows with a configurable rule.

    Example:
        classifier = LineItemClassifier()
        classifier.classify(LineItem(name="Work on 15/01/2025", quantity=3))
        # -> LineItemType.TIMESHEET
    """

    def __init__(
        self,
        rule: Optional[ClassificationRule] = None,
        config: Optional[ClassifierConfig] = None,
    ):
        if rule is None:
            rule = rule_for_mode((config or ClassifierConfig()).mode)
        self.rule = rule

    def classify(self, item: LineItem) -> LineItemType:
        """Classify a single row."""
        return self.rule.classify(item)

    def participates_in_totals(self, item: LineItem) -> bool:
        """True for rows that carry money (ITEM and TIMESHEET)."""
        return self.classify(item) != LineItemType.HEADER

    def is_timesheet(self, item: LineItem) -> bool:
        """True for rows that represent billed hours."""
        return self.classify(item) == LineItemType.TIMESHEET


_default_classifier = LineItemClassifier(rule=TaggedRule())


def classify(item: LineItem) -> LineItemType:
    """Classify a row with the default tagged rule."""
    return _default_classifier.classify(item)


def participates_in_totals(item: LineItem) -> bool:
    """True for rows that carry money under the default rule."""
    return _default_classifier.participates_in_totals(item)
