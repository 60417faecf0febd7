#!/usr/bin/env python3
"""Inheritage SDK quickstart.

Demonstrates the core workflow against the public API:

1. Create a client with a bounded timeout.
2. Fetch one heritage site and inspect the envelope metadata.
3. Revalidate it with its ETag.
4. Read a few records from the NDJSON vector feed.
5. Handle a typed API error.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

import asyncio
import logging

from inheritage import (
    CancellationToken,
    ClientConfig,
    InheritageApiError,
    InheritageClient,
    RequestCancelled,
    RequestOptions,
)


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")

    # -- Step 1: Create the client -------------------------------------------
    client = InheritageClient(ClientConfig(timeout_seconds=15.0))
    print(f"[1] Client targeting {client.config.api_root}")

    # -- Step 2: Fetch a site ------------------------------------------------
    site = await client.get_heritage("hampi", fields=["slug", "name", "state"])
    print(f"[2] status={site.status} trace_id={site.trace_id}")
    print(f"    data:       {site.data}")
    if site.rate_limit:
        print(f"    rate limit: {site.rate_limit.remaining}/{site.rate_limit.limit}")

    # -- Step 3: Conditional revalidation ------------------------------------
    if site.etag:
        again = await client.get_heritage(
            "hampi",
            fields=["slug", "name", "state"],
            options=RequestOptions(if_none_match=site.etag),
        )
        print(f"[3] Revalidated: not_modified={again.not_modified}")
    else:
        print("[3] Server sent no ETag; skipping revalidation")

    # -- Step 4: Vector feed, bounded by a cancellation deadline -------------
    try:
        feed = await client.get_ai_vector_index(
            limit=3,
            options=RequestOptions(signal=CancellationToken.after(10)),
        )
        print(f"[4] Read {len(feed.data or [])} vector records")
    except RequestCancelled as exc:
        print(f"[4] Vector feed cancelled: {exc.message}")

    # -- Step 5: Typed errors ------------------------------------------------
    try:
        await client.get_heritage("no-such-site-anywhere")
    except InheritageApiError as exc:
        print(f"[5] {exc.status} {exc.code}: {exc.message}")
        if exc.hint:
            print(f"    hint: {exc.hint}")


if __name__ == "__main__":
    asyncio.run(main())
