#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Health Checker CLI Tool
Quick script to check the Classic Wines Dashboard API health status
"""
import argparse
import sys
from pathlib import Path

import requests

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))


def check_health(base_url):
    """Query /health and print the component report. Returns an exit code."""
    url = f"{base_url.rstrip('/')}/health"

    print("\n" + "=" * 60)
    print("CLASSIC WINES DASHBOARD - HEALTH CHECK")
    print("=" * 60 + "\n")

    try:
        response = requests.get(url, timeout=5)
        data = response.json()
    except requests.RequestException as e:
        print(f"[FAIL] Cannot reach {url}: {e}")
        return 2
    except ValueError:
        print(f"[FAIL] {url} did not return JSON (HTTP {response.status_code})")
        return 2

    status = data.get('status', 'unknown')
    print(f"Status:  {status.upper()}")
    print(f"Service: {data.get('service', '?')} {data.get('version', '')}")

    print("\nComponents:")
    for name, state in sorted(data.get('components', {}).items()):
        print(f"   {name:<10} {state}")

    return 0 if status == 'healthy' else 1


def main(argv=None):
    import config

    parser = argparse.ArgumentParser(description="Check the dashboard API health endpoint")
    parser.add_argument("--url", default=f"http://localhost:{config.API_PORT}",
                        help="API base URL (default: local API_PORT)")
    args = parser.parse_args(argv)
    return check_health(args.url)


if __name__ == "__main__":
    sys.exit(main())
