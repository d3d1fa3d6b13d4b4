import json
import os

import structlog
from dotenv import load_dotenv
from invoke import Context, task

from photogallery.api import create_stores
from photogallery.config import load_config
from photogallery.services.reconciliation import Reconciler

logger = structlog.get_logger()


@task
def reconcile(c: Context, env_file: str = ".env", dry_run: bool = False):
    """
    Remove orphan blobs and report records whose original is missing.

    Run while no uploads are in flight: a blob written by an upload that has
    not stored its metadata yet looks like an orphan.

    Args:
        c (Context): Invoke context.
        env_file (str): Path to the environment file. Default is '.env'.
        dry_run (bool): If True, only reports what would be deleted.
    """
    if os.path.exists(env_file):
        logger.info(f"Loading environment variables from {env_file}")
        load_dotenv(dotenv_path=env_file)
    else:
        logger.warning(f"Environment file not found at {env_file}. Using existing environment.")

    config = load_config()
    metadata_store, blob_store = create_stores(config)
    report = Reconciler(metadata_store, blob_store).reconcile(dry_run=dry_run)

    for photo_id in report.dangling_records:
        logger.warning("Record without original", photo_id=photo_id)
    for photo_id in report.unreadable_records:
        logger.warning("Record with unreadable file name", photo_id=photo_id)

    print(json.dumps(report.to_dict(), indent=2))
    return report
