"""Helpers for reading whole result sets through repository DAOs."""

BATCH_SIZE = 100


def fetch_all(queryset, batch_size=BATCH_SIZE):
    """Drain ``queryset`` page by page.

    Querysets are capped at a page size when evaluated, so anything that has
    to see every matching record (aggregates, cascades) reads through here.
    """
    items = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(batch_size).all()
        items.extend(page.items)
        offset += batch_size
        if offset >= page.total or not page.items:
            return items
