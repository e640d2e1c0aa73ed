#!/usr/bin/env python3
"""
Demo script for the journal reflection API.

Sends a few journal entries to a running server and shows the reflection,
the cache short-circuit on a repeated entry, and how each error kind
should be handled by a client.

Start the server first:
    python -m journal_reflect.api.app
"""

import sys
import time

import httpx

BASE_URL = "http://localhost:8000"

ENTRY = (
    "Today I had a breakthrough at work. I finally understood a complex problem "
    "that I've been struggling with for weeks. The solution came to me during my "
    "morning walk, and I felt a surge of confidence and accomplishment."
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def reflect(client: httpx.Client, content: str) -> None:
    """Send one entry and print the outcome."""
    start = time.time()
    response = client.post("/api/reflect", json={"content": content})
    elapsed_ms = (time.time() - start) * 1000
    data = response.json()

    if response.is_success:
        print(f"Summary:    {data['summary']}")
        print(f"Pattern:    {data['pattern']}")
        print(f"Suggestion: {data['suggestion']}")
        print(f"Model:      {data['metadata']['model']} ({elapsed_ms:.0f}ms round trip)")
        return

    print(f"Error ({response.status_code} {data['error']}): {data['message']}")
    retry_after = data.get("retryAfter")
    if data["error"] == "rate_limit" and retry_after:
        print(f"  -> Rate limited. Retry after {retry_after} seconds.")
    elif data["error"] in ("timeout", "api_error", "internal_error"):
        print(f"  -> Retryable{f' after {retry_after}s' if retry_after else ''}.")
    elif data["error"] == "content_policy":
        print("  -> Content violates usage policies. Please modify your entry.")


def main() -> int:
    with httpx.Client(base_url=BASE_URL, timeout=60.0) as client:
        try:
            health = client.get("/health").json()
        except httpx.HTTPError as e:
            print(f"Server not reachable at {BASE_URL}: {e}")
            return 1
        print(f"Models: {health['models']['primary']} -> {health['models']['fallback']}")

        print_section("First reflection")
        reflect(client, ENTRY)

        print_section("Same entry again (served from cache)")
        reflect(client, ENTRY)

        print_section("Validation error")
        reflect(client, "too short")

        print_section("Cache stats")
        print(client.get("/health").json()["cache"])

    return 0


if __name__ == "__main__":
    sys.exit(main())
