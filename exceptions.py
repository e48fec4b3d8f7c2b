"""Errors raised while building the hospital statistics report."""


class ReportError(Exception):
    """Base class for report generation errors."""


class InvalidParameter(ReportError):
    """A request parameter is missing or out of range for the chosen period type."""

    MESSAGES = {
        "type": "Invalid 'type' parameter. It must be 'year', 'quarter' or 'month'.",
        "quarter": "When type='quarter', you must send quarter=1..4.",
        "month": "When type='month', you must send month=1..12.",
        "year": "Invalid 'year' parameter. It must be between 1 and 9998.",
    }

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        self.message = message or self.MESSAGES.get(field, f"Invalid '{field}' parameter.")
        super().__init__(self.message)


class AggregationFailure(ReportError):
    """The data store could not answer one of the grouped-count queries."""

    def __init__(self, entity: str, error: Exception):
        self.entity = entity
        self.error = str(error) or error.__class__.__name__
        self.message = f"Failed to aggregate {entity} for the report"
        super().__init__(f"{self.message}: {self.error}")
