"""
Lambda function to remove orphaned upload chunks from the CDN object store.
Triggered on a schedule by an EventBridge rule.
Local scratch directories live on the API host and are swept by the API process.
"""
import json
import logging
from src.core import config
from src.core.exceptions import StorageIOException
from src.repositories.s3_repository import S3Repository
from src.services.cleanup_service import CleanupService

logger = logging.getLogger(__name__)
logger.setLevel(getattr(logging, config.settings.log_level.upper(), logging.INFO))


def handler(event, context):
    """
    Lambda handler for the scheduled temp chunk sweep.

    Args:
        event: Scheduled event (contents unused)
        context: Lambda context object

    Returns:
        dict: Sweep result with status and number of deleted chunks
    """
    sweeper = CleanupService(object_store=S3Repository())

    try:
        deleted = sweeper.sweep_remote_temp()

        logger.info("Deleted %d orphaned chunks", deleted)

        return {
            'statusCode': 200,
            'body': json.dumps({
                'message': f'Deleted {deleted} orphaned chunks',
                'temp_chunks_deleted': deleted
            })
        }

    except StorageIOException as e:
        logger.error("Storage error during sweep: %s", e.message)
        return {
            'statusCode': 502,
            'body': json.dumps({
                'error': 'Storage Error',
                'message': e.message
            })
        }

    except Exception as e:
        logger.exception("Unexpected error during sweep")
        return {
            'statusCode': 500,
            'body': json.dumps({
                'error': 'Internal Server Error',
                'message': str(e)
            })
        }
