"""
AWS Systems Manager Parameter Store helper.
Resolves secrets such as the JWT signing key, cached per process.
"""
import boto3
from functools import lru_cache


@lru_cache(maxsize=10)
def get_parameter(parameter_name: str, region: str = "us-east-1") -> str:
    """
    Fetch a (possibly SecureString) parameter, decrypted.

    Args:
        parameter_name: Full parameter name (e.g., /media-upload-api/dev/jwt-secret)
        region: AWS region

    Returns:
        Parameter value
    """
    ssm = boto3.client('ssm', region_name=region)
    response = ssm.get_parameter(Name=parameter_name, WithDecryption=True)
    return response['Parameter']['Value']


def clear_parameter_cache() -> None:
    """Forget cached values so rotated secrets are picked up."""
    get_parameter.cache_clear()
