from starlette.requests import Request

from app.utils.rate_limit import SlidingWindowRateLimiter, get_client_ip


def test_rate_limiter_prunes_stale_buckets_on_interval(monkeypatch):
    rl = SlidingWindowRateLimiter(max_buckets=10_000, prune_interval_seconds=1)

    t = {"now": 1000.0}
    monkeypatch.setattr("app.utils.rate_limit.time.monotonic", lambda: t["now"])

    for i in range(200):
        ok, _ = rl.allow(f"k:{i}", limit=1, window_seconds=60)
        assert ok is True

    # Advance beyond window + prune interval and hit a new key to trigger prune.
    t["now"] = 1000.0 + 120.0
    ok, _ = rl.allow("k:new", limit=1, window_seconds=60)
    assert ok is True
    assert len(rl._buckets) == 1

    ok, _ = rl.allow("k:0", limit=1, window_seconds=60)
    assert ok is True


def test_rate_limiter_blocks_within_window(monkeypatch):
    rl = SlidingWindowRateLimiter()
    t = {"now": 50.0}
    monkeypatch.setattr("app.utils.rate_limit.time.monotonic", lambda: t["now"])

    assert rl.allow("ip", limit=2, window_seconds=60) == (True, 1)
    assert rl.allow("ip", limit=2, window_seconds=60) == (True, 2)
    assert rl.allow("ip", limit=2, window_seconds=60) == (False, 2)

    t["now"] = 111.0
    assert rl.allow("ip", limit=2, window_seconds=60) == (True, 1)


def _request(peer: str, forwarded: str | None = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "headers": headers, "client": (peer, 1234)})


def test_forwarded_header_ignored_from_untrusted_peer():
    assert get_client_ip(_request("203.0.113.7", "1.2.3.4"), trusted_proxy_cidrs=[]) == "203.0.113.7"


def test_forwarded_header_used_from_trusted_proxy():
    req = _request("10.0.0.5", "198.51.100.1, 192.0.2.9")
    assert get_client_ip(req, trusted_proxy_cidrs=["10.0.0.0/8"]) == "192.0.2.9"
