#!/usr/bin/env python3
"""
Seed Script

Loads the sample trending topics, communities and a handful of job
listings into an empty Supabase project so the discovery pages have
something to show.

Run: python scripts/seed_fixtures.py
"""
import sys
sys.path.insert(0, '.')

from microblog.db.supabase import TABLES, get_supabase_client
from microblog.services import fixtures

JOBS = [
    {"title": "Senior Python Engineer", "company": "Streamline", "location": "Remote",
     "type": "Full-time", "salary": "$140k - $170k",
     "description": "Own the feed ranking and notification pipeline."},
    {"title": "Frontend Developer", "company": "Pixelworks", "location": "Berlin",
     "type": "Full-time", "salary": "€65k - €80k",
     "description": "Build accessible, fast interfaces for millions of readers."},
    {"title": "Community Manager", "company": "Openhall", "location": "London",
     "type": "Part-time", "salary": "£28k pro rata",
     "description": "Grow and moderate our developer communities."},
    {"title": "Data Analyst", "company": "Northwind Labs", "location": "Toronto",
     "type": "Contract", "salary": "$60/hr",
     "description": "Turn engagement data into product decisions."},
    {"title": "Design Intern", "company": "Brightside", "location": "New York",
     "type": "Internship", "salary": "$25/hr",
     "description": "Work alongside the design team on the mobile app."},
]


def without_ids(rows):
    return [{key: value for key, value in row.items() if key != "id"} for row in rows]


def seed(client, table, rows):
    existing = client.table(table).select("id", count="exact").limit(1).execute()
    if existing.count:
        print(f"    ⚠️  {table}: already has {existing.count} rows, skipped")
        return
    client.table(table).insert(rows).execute()
    print(f"    ✅ {table}: inserted {len(rows)} rows")


def main():
    client = get_supabase_client()
    print("=" * 50)
    print("MICROBLOG - SEED SAMPLE DATA")
    print("=" * 50)

    print("\n[1] Trending topics...")
    seed(client, TABLES["trending_topics"], without_ids(fixtures.FALLBACK_TRENDING_TOPICS))

    print("\n[2] Communities...")
    seed(client, TABLES["communities"], without_ids(fixtures.FALLBACK_COMMUNITIES))

    print("\n[3] Jobs...")
    seed(client, TABLES["jobs"], JOBS)

    print("\n" + "=" * 50)
    print("Seeding complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
