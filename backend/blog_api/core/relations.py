# blog_api/core/relations.py
"""
Batched relation counts (``posts_count``, ``likes_count`` ...) for rows that
were already fetched, one aggregate query per relation.
"""
from tortoise.functions import Count


async def attach_counts(rows: list, *relations: str) -> None:
    """Set ``<relation>_count`` on every row in ``rows``."""
    if not rows:
        return
    model = type(rows[0])
    ids = [r.id for r in rows]
    for rel in relations:
        pairs = await (
            model.filter(id__in=ids)
            .annotate(n=Count(rel, distinct=True))
            .values_list("id", "n")
        )
        counts = dict(pairs)
        for r in rows:
            setattr(r, f"{rel}_count", counts.get(r.id, 0))
