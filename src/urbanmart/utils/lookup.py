from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


def get_or_raise(aggregate_cls, identifier, message: str, key: str = "_entity"):
    """Load an aggregate by identity, re-raising a miss with a readable message."""
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({key: [message]}) from None


def _query(aggregate_cls, **filters):
    query = current_domain.repository_for(aggregate_cls)._dao.query
    return query.filter(**filters) if filters else query


def find_one(aggregate_cls, **filters):
    """Return the first aggregate matching ``filters`` or ``None``."""
    results = _query(aggregate_cls, **filters).all()
    return results.items[0] if results.items else None


def find_all(aggregate_cls, order_by=None, **filters) -> list:
    """Every aggregate matching ``filters``, without the repository's page limit."""
    query = _query(aggregate_cls, **filters)
    if order_by:
        query = query.order_by(order_by)
    # limit() must be applied last: every other clone falls back to the default page size
    return query.limit(None).all().items


def count(aggregate_cls, **filters) -> int:
    return _query(aggregate_cls, **filters).all().total


def choice_value(enum_cls, value, field: str = "status"):
    """Validate a query-string filter against ``enum_cls`` and return its value."""
    try:
        return enum_cls(value).value
    except ValueError:
        raise ValidationError({field: [f"Invalid {field}: {value}"]}) from None
