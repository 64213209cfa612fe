import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from trendhaven.core.config import settings
from trendhaven.storage.base import ImageStore


def r2_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.R2_ENDPOINT,
        aws_access_key_id=settings.R2_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY or None,
        region_name=settings.R2_REGION,
        config=Config(signature_version="s3v4"),
    )


class R2ImageStore(ImageStore):
    def __init__(self, client=None, bucket: str | None = None, cdn_base: str | None = None):
        self._client = client
        self.bucket = bucket or settings.R2_BUCKET
        self.cdn_base = (settings.R2_CDN_BASE if cdn_base is None else cdn_base).rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = r2_client()
        return self._client

    def save(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") not in {"NoSuchKey", "404"}:
                raise

    def url(self, key: str) -> str:
        if self.cdn_base:
            return f"{self.cdn_base}/{key}"
        base = settings.R2_ENDPOINT.rstrip("/")
        return f"{base}/{self.bucket}/{key}"
