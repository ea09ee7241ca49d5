"""
S3 Repository for CDN object storage.
Stores chunk blobs and final artifacts in Amazon S3, one object key per path.
"""
from typing import List
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from src.core import config
from src.core.exceptions import StorageIOException
from src.repositories.object_store_repository import ObjectStoreRepository, StoredObject

# S3 DeleteObjects accepts at most 1000 keys per call
_DELETE_BATCH_SIZE = 1000


class S3Repository(ObjectStoreRepository):
    """Repository for S3 object operations."""

    def __init__(self):
        self.s3_client = boto3.client('s3', region_name=config.settings.aws_region)
        self.bucket_name = config.settings.s3_bucket_name

    def put(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """
        Upload bytes to S3.

        Args:
            path: Object key
            data: Blob content
            content_type: MIME type stored with the object

        Raises:
            StorageIOException: If upload fails
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageIOException(f"CDN upload failed for {path}: {str(e)}") from e

    def put_file(self, path: str, local_path: str, content_type: str = "application/octet-stream") -> None:
        """
        Upload a local file to S3 without loading it into memory.

        Raises:
            StorageIOException: If the file cannot be read or the upload fails
        """
        try:
            self.s3_client.upload_file(
                local_path,
                self.bucket_name,
                path,
                ExtraArgs={'ContentType': content_type}
            )
        except (ClientError, BotoCoreError, OSError) as e:
            raise StorageIOException(f"CDN upload failed for {path}: {str(e)}") from e

    def get(self, path: str) -> bytes:
        """
        Retrieve an object from S3.

        Args:
            path: Object key

        Returns:
            bytes: Object content

        Raises:
            StorageIOException: If retrieval fails
        """
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=path)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise StorageIOException(f"CDN download failed for {path}: {str(e)}") from e

    def delete(self, path: str) -> None:
        """
        Delete an object, or every object under a prefix when path ends in '/'.

        Raises:
            StorageIOException: If any delete request fails
        """
        try:
            if not path.endswith('/'):
                self.s3_client.delete_object(Bucket=self.bucket_name, Key=path)
                return

            keys = [obj.path for obj in self.list(path)]
            for start in range(0, len(keys), _DELETE_BATCH_SIZE):
                batch = keys[start:start + _DELETE_BATCH_SIZE]
                response = self.s3_client.delete_objects(
                    Bucket=self.bucket_name,
                    Delete={'Objects': [{'Key': key} for key in batch], 'Quiet': True}
                )
                errors = response.get('Errors', [])
                if errors:
                    raise StorageIOException(
                        f"CDN delete failed for {len(errors)} object(s) under {path}: {errors[0].get('Message')}"
                    )
        except StorageIOException:
            raise
        except (ClientError, BotoCoreError) as e:
            raise StorageIOException(f"CDN delete failed for {path}: {str(e)}") from e

    def list(self, prefix: str) -> List[StoredObject]:
        """
        List objects under a key prefix, following pagination.

        Raises:
            StorageIOException: If listing fails
        """
        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            objects = []
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                for item in page.get('Contents', []):
                    objects.append(StoredObject(
                        path=item['Key'],
                        size=item['Size'],
                        last_modified=item['LastModified']
                    ))
            return objects
        except (ClientError, BotoCoreError) as e:
            raise StorageIOException(f"CDN listing failed for {prefix}: {str(e)}") from e
