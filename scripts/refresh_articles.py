#!/usr/bin/env python3
"""
Refresh the article cache from the upstream content API.

This helper mirrors the service's /update-kv endpoint but can be executed
manually from a developer workstation or a cron job. It fetches the full
article set and replaces the cached copy in Redis.
"""

import argparse
import asyncio
import json
from pathlib import Path
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import BaseConfig  # noqa: E402
from shared.logging import configure_logging  # noqa: E402
from service_articles.app.adapters.upstream_client import UpstreamClient  # noqa: E402
from service_articles.app.cache.reader import CacheReader  # noqa: E402
from service_articles.app.cache.store import RedisKeyValueStore  # noqa: E402
from service_articles.app.cache.writer import CacheWriter, build_payloads  # noqa: E402
from service_articles.app.refresh.coordinator import RefreshCoordinator  # noqa: E402


async def refresh(*, redis_url: str, api_url: str, timeout: float) -> dict:
    """Execute one refresh and return the result as a dict."""
    store = RedisKeyValueStore(redis_url)
    upstream = UpstreamClient(api_url, timeout=timeout)
    await store.start()
    await upstream.start()
    try:
        coordinator = RefreshCoordinator(upstream, CacheWriter(store), CacheReader(store))
        result = await coordinator.refresh()
    finally:
        await upstream.stop()
        await store.stop()
    return result.to_dict()


async def dry_run(*, api_url: str, timeout: float) -> dict:
    """Fetch and validate the article set and report the planned writes without writing."""
    upstream = UpstreamClient(api_url, timeout=timeout)
    article_set = await upstream.fetch_article_set()
    article_payloads, summary_payload = build_payloads(article_set)
    return {
        "ok": True,
        "planned_keys": [key for key, _ in article_payloads],
        "planned_writes": len(article_payloads) + 1,
        "planned_bytes": sum(len(payload) for _, payload in article_payloads) + len(summary_payload),
    }


def _parse_args(defaults: BaseConfig) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh the article cache from the content API.")
    parser.add_argument("--redis-url", default=defaults.redis_url, help="Redis connection URL")
    parser.add_argument("--api-url", default=defaults.api_server_base_url, help="Content API base URL")
    parser.add_argument("--timeout", type=float, default=defaults.upstream_timeout_seconds, help="Upstream timeout in seconds")
    parser.add_argument("--dry-run", action="store_true", help="Fetch and validate only; do not write to Redis")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON result")
    return parser.parse_args()


def main() -> int:
    defaults = BaseConfig()
    args = _parse_args(defaults)
    configure_logging("articles", defaults.log_level)

    try:
        if args.dry_run:
            summary = asyncio.run(dry_run(api_url=args.api_url, timeout=args.timeout))
        else:
            summary = asyncio.run(refresh(redis_url=args.redis_url, api_url=args.api_url, timeout=args.timeout))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[refresh] failed: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("[refresh] DRY RUN - no Redis writes executed")

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 0 if summary.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
