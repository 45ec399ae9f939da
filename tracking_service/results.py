"""
Tagged per-object outcomes for batch operations.

Batch parse, propagate and predict calls return one ObjectResult per object
instead of raising on the first failure, so a fault for one satellite never
removes results computed for another.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from tracking_service.errors import TrackingError


@dataclass(frozen=True)
class ObjectResult:
    """Outcome of one object's step in a batch: either a value or an error."""

    name: str
    value: Any = None
    error: Optional[TrackingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def capture(cls, name: str, func: Callable[[], Any]) -> "ObjectResult":
        """Run func and tag its return value or TrackingError with name."""
        try:
            return cls(name=name, value=func())
        except TrackingError as e:
            return cls(name=name, error=e)


def successes(results: Iterable[ObjectResult]) -> List[Any]:
    """Values of the successful results, in order."""
    return [r.value for r in results if r.ok]


def failures(results: Iterable[ObjectResult]) -> Dict[str, str]:
    """Map of object name to error message for the failed results."""
    return {r.name: str(r.error) for r in results if not r.ok}
