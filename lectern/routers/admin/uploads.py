# lectern/routers/admin/uploads.py
import uuid
from typing import Optional

import boto3
import structlog
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse

from lectern.config import (
    ASSETS_BASE_URL,
    S3_ACCESS_KEY,
    S3_BUCKET,
    S3_ENDPOINT,
    S3_REGION,
    S3_SECRET_KEY,
)

logger = structlog.get_logger()

router = APIRouter()

POST_IMAGE_PREFIX = "posts"


def _s3_client():
    if not (S3_REGION and S3_ENDPOINT and S3_ACCESS_KEY and S3_SECRET_KEY and S3_BUCKET):
        raise HTTPException(status_code=500, detail="S3 env not fully configured")
    return boto3.client(
        "s3",
        region_name=S3_REGION,
        endpoint_url=S3_ENDPOINT,
        aws_access_key_id=S3_ACCESS_KEY,
        aws_secret_access_key=S3_SECRET_KEY,
        config=BotoConfig(s3={"addressing_style": "virtual"}),
    )


def public_url_for(key: str) -> str:
    key = key.lstrip("/")
    if ASSETS_BASE_URL:
        return f"{ASSETS_BASE_URL}/{key}"
    return f"{S3_ENDPOINT.rstrip('/')}/{S3_BUCKET}/{key}"


def image_key_for(filename: Optional[str]) -> str:
    """posts/<random hex>.<ext>; the original name is never trusted as a path."""
    original = filename or "image"
    ext = "." + original.rsplit(".", 1)[1].lower() if "." in original else ""
    return f"{POST_IMAGE_PREFIX}/{uuid.uuid4().hex}{ext}"


@router.post("/uploads/presign")
def presign_upload(payload: dict = Body(...)):
    """
    Body: {"filename": "page-12.png", "content_type": "image/png"}
    Returns: {"upload_url", "public_url", "key"}; the form stores public_url as the post image.
    """
    content_type = (payload or {}).get("content_type") or "application/octet-stream"
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only images can be attached to posts")

    key = image_key_for((payload or {}).get("filename"))
    s3 = _s3_client()
    try:
        upload_url = s3.generate_presigned_url(
            ClientMethod="put_object",
            Params={"Bucket": S3_BUCKET, "Key": key, "ContentType": content_type},
            ExpiresIn=300,
        )
    except (BotoCoreError, ClientError) as e:
        logger.exception("presign_failed", key=key)
        raise HTTPException(status_code=500, detail=f"Presign failed: {e}") from e

    return JSONResponse({"upload_url": upload_url, "public_url": public_url_for(key), "key": key})
