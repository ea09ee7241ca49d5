"""
File Record Repository for DynamoDB operations.
Persists metadata for finalized artifacts and direct image uploads.
"""
from datetime import datetime
from typing import Optional
import boto3
from botocore.exceptions import ClientError
from src.core import config
from src.core.exceptions import DynamoDBException
from src.models.file_record import UploadedFileRecord


class FileRecordRepository:
    """Repository for uploaded file record DynamoDB operations."""

    def __init__(self):
        self.dynamodb = boto3.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(config.settings.file_records_table_name)

    def create(self, record: UploadedFileRecord) -> UploadedFileRecord:
        """
        Create new file record.

        Args:
            record: UploadedFileRecord domain model

        Returns:
            The stored record

        Raises:
            DynamoDBException: If create operation fails
        """
        try:
            item = {
                'file_id': record.file_id,
                'blob_name': record.blob_name,
                'container_name': record.container_name,
                'original_name': record.original_name,
                'mime_type': record.mime_type,
                'size': record.size,
                'visibility': record.visibility,
                'status': record.status,
                'url': record.url,
                'tags': record.tags,
                'created_at': record.created_at.isoformat()
            }

            self.table.put_item(
                Item=item,
                ConditionExpression='attribute_not_exists(file_id)'
            )
            return record

        except ClientError as e:
            raise DynamoDBException(f"Failed to create file record: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error creating file record: {str(e)}") from e

    def get_by_id(self, file_id: str) -> Optional[UploadedFileRecord]:
        """
        Retrieve file record by ID.

        Returns:
            UploadedFileRecord or None if not found

        Raises:
            DynamoDBException: If query fails
        """
        try:
            response = self.table.get_item(Key={'file_id': file_id})

            if 'Item' not in response:
                return None

            return self._item_to_record(response['Item'])

        except ClientError as e:
            raise DynamoDBException(f"Failed to get file record: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error getting file record: {str(e)}") from e

    def _item_to_record(self, item: dict) -> UploadedFileRecord:
        """Convert DynamoDB item to UploadedFileRecord domain model."""
        return UploadedFileRecord(
            file_id=item['file_id'],
            blob_name=item['blob_name'],
            container_name=item['container_name'],
            original_name=item['original_name'],
            mime_type=item['mime_type'],
            size=int(item['size']),
            url=item['url'],
            visibility=item.get('visibility', 'public'),
            status=item.get('status', 'available'),
            tags=list(item.get('tags', [])),
            created_at=datetime.fromisoformat(item['created_at'])
        )
