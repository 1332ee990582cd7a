"""
Backfill Posting Cadence Script
Recomputes posts_this_week, posts_this_month and last_post_date for every
group from its posted posts. Idempotent.

Usage: python -m app.scripts.backfill_posting_cadence
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from app.modules.posts.service import PostService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    logger.info("Starting posting cadence backfill...")
    supabase = SupabaseClient.get_service_client()
    refreshed = PostService(supabase).recompute_all_cadence()
    logger.info(f"Backfill complete: {refreshed} group(s) refreshed")


if __name__ == "__main__":
    main()
