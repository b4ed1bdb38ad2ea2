from collections import Counter
from threading import Lock
from typing import Dict, Counter as CounterType

_metrics: CounterType[str] = Counter()
_lock = Lock()


def _inc(key: str) -> None:
    with _lock:
        _metrics[key] += 1


def record_coupon_created() -> None:
    _inc("coupons_created")


def record_coupon_updated() -> None:
    _inc("coupons_updated")


def record_coupon_deleted() -> None:
    _inc("coupons_deleted")


def record_coupon_published() -> None:
    _inc("coupons_published")


def record_coupon_unpublished() -> None:
    _inc("coupons_unpublished")


def record_coupon_conflict() -> None:
    _inc("coupon_conflicts")


def snapshot() -> Dict[str, int]:
    with _lock:
        return dict(_metrics)


def reset() -> None:
    with _lock:
        _metrics.clear()
