"""Helpers over Protean querysets."""


def iter_records(query, batch_size=100):
    """Yield every record matched by ``query``, fetching in fixed-size pages.

    Querysets carry a default page size, so aggregate reads walk the result
    set explicitly instead of relying on a single ``all()``.
    """
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        yield from result.items
        offset += batch_size
        if not result.items or offset >= result.total:
            break


def count(query) -> int:
    return query.limit(1).all().total
