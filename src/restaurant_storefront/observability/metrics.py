"""Custom metrics for the restaurant storefront."""

from opentelemetry import metrics

# Get meter for storefront
meter = metrics.get_meter("storefront")

# Restaurant API response time histogram
restaurant_api_response_time = meter.create_histogram(
    name="restaurant_api_response_time_seconds",
    description="Response time for restaurant API calls",
    unit="s",
)

restaurant_api_failure_counter = meter.create_counter(
    name="restaurant_api_failure_total",
    description="Total number of failed restaurant API calls by operation",
    unit="1",
)

# Basket mutations by action and outcome
basket_mutation_counter = meter.create_counter(
    name="basket_mutation_total",
    description="Total number of basket mutations by action and outcome",
    unit="1",
)

stale_response_counter = meter.create_counter(
    name="catalog_stale_response_total",
    description="Catalog responses discarded because a newer action started",
    unit="1",
)


def record_api_call(operation: str, duration_seconds: float) -> None:
    """Record a restaurant API call.

    Args:
        operation: The operation performed (e.g., "list_basket", "add_basket_item")
        duration_seconds: Duration in seconds
    """
    restaurant_api_response_time.record(duration_seconds, {"operation": operation})


def record_api_failure(operation: str, error_type: str) -> None:
    """Record a failed restaurant API call.

    Args:
        operation: The operation that failed
        error_type: Type of error that occurred
    """
    restaurant_api_failure_counter.add(1, {"operation": operation, "error_type": error_type})


def record_basket_mutation(action: str, success: bool) -> None:
    """Record a basket mutation.

    Args:
        action: The mutation performed ("added", "updated", "deleted")
        success: Whether the restaurant API accepted it
    """
    basket_mutation_counter.add(1, {"action": action, "outcome": "success" if success else "failure"})


def record_stale_response(operation: str) -> None:
    """Record a catalog response dropped as stale.

    Args:
        operation: The catalog action whose response was dropped
    """
    stale_response_counter.add(1, {"operation": operation})
