#!/usr/bin/env python3
"""
Demo script to showcase the CloudCover TAXII client against a live server.

Credentials come from TAXII_USERNAME and TAXII_API_KEY (or the config file).
"""

import sys
from pathlib import Path

# Add the package to path
sys.path.insert(0, str(Path(__file__).parent))

from cc_taxii2 import CCTaxiiClient, TaxiiError
from cc_taxii2.config import get_config


def main():
    print("=" * 70)
    print("CLOUDCOVER TAXII 2.1 CLIENT DEMO")
    print("=" * 70)
    print()

    config = get_config()
    try:
        agent = CCTaxiiClient.from_config(config)
    except TaxiiError as e:
        print(f"Error: {e}")
        return 1

    print(f"Server: {agent.base_url}")
    print(f"Account: {agent.account}")
    print()

    # Step 1: server information
    print("Step 1: DISCOVERY")
    print("-" * 70)
    try:
        discovery = agent.get_discovery()
        print(f"Title: {discovery.title}")
        print(f"Contact: {discovery.contact}")
        print(f"API roots: {', '.join(discovery.api_roots)}")
    except TaxiiError as e:
        print(f"Error: {e}")
    print()

    # Step 2: collections of the account's private root
    print("Step 2: COLLECTIONS")
    print("-" * 70)
    try:
        for collection_id in agent.get_collections(agent.account):
            print(f"  • {collection_id}")
    except TaxiiError as e:
        print(f"Error: {e}")
    print()

    # Step 3: indicator counts for the public and private roots
    print("Step 3: INDICATORS")
    print("-" * 70)
    for label, private in (("public root", False), ("private root", True)):
        try:
            indicators = agent.get_cc_indicators(
                private=private,
                matches={"type": "indicator"},
                follow_pages=True
            )
            print(f"Indicators in {label}: {len(indicators)}")
        except TaxiiError as e:
            print(f"Error reading {label}: {e}")
    print()

    print("=" * 70)
    print("DEMO COMPLETE")
    print("=" * 70)
    print()
    print("Try these CLI commands:")
    print("  cc-taxii2 discovery")
    print("  cc-taxii2 collections --private")
    print("  cc-taxii2 indicators --single-page --limit 5")
    print("  cc-taxii2 indicators --added-after 2024-01-01T00:00:00Z --format json --output iocs.json")
    print()
    return 0


if __name__ == '__main__':
    sys.exit(main())
