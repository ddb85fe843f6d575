from collections.abc import Sequence

# Statistics fields that may be used as a rank key.
RANK_KEYS: frozenset[str] = frozenset({"view", "enjoy", "stored"})


def _rank_value(item: dict, rank: str) -> int:
    statistics = item.get("statistics") or {}
    return statistics.get(rank) or 0


def rank_by(items: Sequence[dict], rank: str | None) -> Sequence[dict]:
    """
    Return *items* ordered by ``statistics[rank]``, highest first.

    ``sorted`` is stable, so entries with equal values keep their input
    order.  Without a rank key the input is returned untouched.
    """
    if not rank:
        return items
    if rank not in RANK_KEYS:
        raise ValueError(f"unknown rank key {rank!r}; expected one of {sorted(RANK_KEYS)}")
    return sorted(items, key=lambda item: _rank_value(item, rank), reverse=True)
