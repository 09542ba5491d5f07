#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the Supabase project and Cloudinary account are reachable.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

import cloudinary.api

from microblog.core.config import get_settings
from microblog.db.supabase import test_supabase_connection
from microblog.services.media_service import configure_cloudinary


def main():
    settings = get_settings()
    print("=" * 50)
    print("MICROBLOG - CONNECTION TEST")
    print("=" * 50)

    # Test Supabase
    print("\n[1] Testing Supabase...")
    print(f"    URL: {settings.supabase_url}")
    if test_supabase_connection():
        print("    ✅ Supabase: CONNECTED")
    else:
        print("    ❌ Supabase: FAILED")

    # Test Cloudinary (only if credentials are set)
    print("\n[2] Testing Cloudinary...")
    if configure_cloudinary():
        print(f"    Cloud: {settings.cloudinary_cloud_name}")
        try:
            cloudinary.api.ping()
            print("    ✅ Cloudinary: CONNECTED")
        except Exception as e:
            print(f"    ❌ Cloudinary: FAILED ({e})")
    else:
        print("    ⚠️  Cloudinary: credentials not configured (media uploads disabled)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
