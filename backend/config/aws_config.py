"""
AWS S3 configuration for uploaded reports.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class AWSConfig:
    """AWS S3 configuration. Reports live under s3://S3_BUCKET_NAME/S3_REPORT_PREFIX/{well_id}/."""
    AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID", "")
    AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY", "")
    AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
    S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "well-intervention-reports")
    S3_REPORT_PREFIX = os.getenv("S3_REPORT_PREFIX", "reports").strip("/")
    # seconds a download link stays valid
    PRESIGNED_URL_EXPIRATION = int(os.getenv("PRESIGNED_URL_EXPIRATION", "3600"))


aws_config = AWSConfig()
