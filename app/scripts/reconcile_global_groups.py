"""
Reconcile Global Groups Script
Recomputes added_by_count for every global group from the tenant group store
and repairs group back-references. Safe to run repeatedly; can be run
manually or as a nightly job.

Usage: python -m app.scripts.reconcile_global_groups
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from app.modules.global_groups.service import GlobalGroupService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    """Main reconciliation function"""
    logger.info("Starting global group reconciliation...")
    supabase = SupabaseClient.get_service_client()
    try:
        report = GlobalGroupService(supabase).reconcile_counts()
    except Exception as e:
        logger.error(f"Error during reconciliation: {e}")
        raise

    logger.info("=" * 50)
    logger.info("Reconciliation complete!")
    logger.info(f"Entries checked: {report.checked}")
    logger.info(f"Counters updated: {report.updated}")
    logger.info(f"Groups relinked by name: {report.relinked}")
    logger.info(f"Orphaned references fixed: {report.orphans_cleared}")
    logger.info("=" * 50)


if __name__ == "__main__":
    main()
