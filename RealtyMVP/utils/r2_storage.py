import boto3
from botocore.client import Config
from flask import current_app


def r2_enabled() -> bool:
    return bool(current_app.config.get("R2_BUCKET"))


def _r2_client():
    cfg = current_app.config
    endpoint_url = f"https://{cfg['R2_ACCOUNT_ID']}.r2.cloudflarestorage.com"

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=cfg["R2_ACCESS_KEY_ID"],
        aws_secret_access_key=cfg["R2_SECRET_ACCESS_KEY"],
        region_name="auto",
        config=Config(signature_version="s3v4"),
    )


def r2_put_bytes(
    data: bytes,
    *,
    subdir: str,
    filename: str,
    content_type: str = "application/octet-stream",
) -> dict:
    """
    Upload bytes to R2.
    Returns: {"key": "...", "url": "..."}
    """
    bucket = current_app.config["R2_BUCKET"]
    public_base = (current_app.config.get("R2_PUBLIC_BASE_URL") or "").rstrip("/")

    key = f"{subdir.strip('/')}/{filename}"

    s3 = _r2_client()
    s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=data,
        ContentType=content_type,
        CacheControl="public, max-age=31536000, immutable",
    )

    url = f"{public_base}/{key}" if public_base else key
    return {"key": key, "url": url}


def r2_key_for_url(url: str):
    """Object key behind a URL returned by r2_put_bytes, or None if it is not ours."""
    public_base = (current_app.config.get("R2_PUBLIC_BASE_URL") or "").rstrip("/")
    if public_base:
        if url.startswith(public_base + "/"):
            return url[len(public_base) + 1:]
        return None
    return None if "://" in url else url.lstrip("/")


def r2_delete_object(key: str) -> None:
    _r2_client().delete_object(Bucket=current_app.config["R2_BUCKET"], Key=key)
