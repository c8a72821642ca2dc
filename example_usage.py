#!/usr/bin/env python3
"""
Basic usage examples for the TinEye Python client library.

This script demonstrates how to build signed requests and call the
TinEye API with them.

Usage:
    example_usage.py PUBLIC_KEY PRIVATE_KEY [IMAGE_URL_OR_PATH]
"""

import json
import logging
import sys

from tineye_client import TinEyeClient, TinEyeClientError


def main():
    """Run basic usage examples."""
    if len(sys.argv) < 3:
        print(__doc__)
        return 1

    public_key, private_key = sys.argv[1], sys.argv[2]
    image = sys.argv[3] if len(sys.argv) > 3 else "https://tineye.com/images/meloncat.jpg"

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    print("=== TinEye Python Client Basic Usage Examples ===\n")

    with TinEyeClient(public_key, private_key) as client:
        # Example 1: Inspect a signed request without sending it
        print("1. Building a signed GET request...")
        descriptor = client.builder.build_get_request("image_count")
        print(f"   URL: {descriptor.request_url}")
        print(f"   Nonce: {descriptor.nonce}")
        print(f"   Date: {descriptor.date}\n")

        try:
            # Example 2: Account information
            print("2. Image count and remaining searches...")
            print(f"   Image count: {client.image_count().get('results')}")
            print(f"   Remaining: {json.dumps(client.remaining_searches().get('results'))}\n")

            # Example 3: Search
            print(f"3. Searching for {image}...")
            if image.startswith(("http://", "https://")):
                response = client.search_url(image, limit=5)
            else:
                with open(image, "rb") as f:
                    response = client.search_data(f.read(), filename=image.rsplit("/", 1)[-1], limit=5)

            matches = response.get("results", {}).get("matches", [])
            print(f"   ✓ {len(matches)} matches")
            for match in matches:
                print(f"   - {match.get('image_url')} (score {match.get('score')})")
        except TinEyeClientError as e:
            print(f"   ✗ {type(e).__name__}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
