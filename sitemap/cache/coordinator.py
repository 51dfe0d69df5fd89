"""
Carries the freshness decision from the prepare phase to the execute phase
of one request.

The decision lives on the request's render context (any object with a
``freshness`` attribute), never on shared state.
"""
from sitemap.errors import StateError
from .core import FreshnessDecision


class RequestCoordinator:
    """
    Single-write, read-after-write slot on a request scope.

    Usage:
        coordinator = RequestCoordinator()
        coordinator.set_decision(context, refresh=True)   # prepare
        ...
        refresh = coordinator.get_decision(context)       # execute
    """

    def set_decision(self, scope, refresh: bool) -> None:
        """
        Record the decision for this request.

        Raises:
            StateError: A decision was already recorded for this request
        """
        if scope.freshness is not None:
            raise StateError("Freshness decision already recorded for this request")
        scope.freshness = FreshnessDecision(refresh=refresh)

    def get_decision(self, scope) -> bool:
        """
        Read the decision recorded in the prepare phase.

        Raises:
            StateError: Nothing was recorded (prepare did not run for this request)
        """
        if scope.freshness is None:
            raise StateError("No freshness decision recorded for this request")
        return scope.freshness.refresh

    def should_render(self, scope) -> bool:
        """False only when the stored sitemap is known to be fresh."""
        return scope.freshness is None or scope.freshness.refresh
