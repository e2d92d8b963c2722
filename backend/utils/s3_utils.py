"""
AWS S3 utilities for uploaded report storage.
"""
import boto3
from botocore.exceptions import ClientError
from config.aws_config import aws_config


def get_s3_client():
    """Get boto3 S3 client."""
    return boto3.client(
        "s3",
        aws_access_key_id=aws_config.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=aws_config.AWS_SECRET_ACCESS_KEY,
        region_name=aws_config.AWS_REGION,
    )


def split_s3_url(s3_url: str) -> tuple[str, str]:
    """s3://bucket/key -> (bucket, key)."""
    if not s3_url or not s3_url.startswith("s3://"):
        raise ValueError(f"Not an S3 URL: {s3_url!r}")
    bucket, _, key = s3_url[len("s3://"):].partition("/")
    if not key:
        raise ValueError(f"S3 URL has no key: {s3_url!r}")
    return bucket, key


def upload_report_object(file_obj, well_id: int, file_name: str) -> str:
    """
    Upload a report to s3://bucket/{prefix}/{well_id}/{file_name}.
    Returns the S3 URL.
    """
    s3 = get_s3_client()
    key = f"{aws_config.S3_REPORT_PREFIX}/{well_id}/{file_name}"
    s3.upload_fileobj(file_obj, aws_config.S3_BUCKET_NAME, key)
    return f"s3://{aws_config.S3_BUCKET_NAME}/{key}"


def get_presigned_url(s3_url: str, expiration: int | None = None) -> str:
    """Presigned download URL for a stored report."""
    bucket, key = split_s3_url(s3_url)
    return get_s3_client().generate_presigned_url(
        "get_object",
        Params={"Bucket": bucket, "Key": key},
        ExpiresIn=expiration or aws_config.PRESIGNED_URL_EXPIRATION,
    )


def delete_report_object(s3_url: str) -> bool:
    """Delete a stored report. Returns False when the URL is invalid or S3 refuses."""
    try:
        bucket, key = split_s3_url(s3_url)
        get_s3_client().delete_object(Bucket=bucket, Key=key)
        return True
    except (ValueError, ClientError) as e:
        print(f"[S3] Could not delete {s3_url}: {e}")
        return False
