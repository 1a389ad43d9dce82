"""
Google Drive transfers with a caller-supplied OAuth access token.

The worker never refreshes or issues tokens: an expired token simply
surfaces as an UpstreamTransferFailure.
"""
import json
import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests

from ffmpeg_worker.core import config
from ffmpeg_worker.core.errors import UpstreamTransferFailure

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
ERROR_BODY_LIMIT = 500


@dataclass
class UploadResult:
    id: str
    web_view_link: Optional[str] = None
    web_content_link: Optional[str] = None


def _auth(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def _describe(resp: requests.Response) -> str:
    body = (resp.text or "").strip()
    if len(body) > ERROR_BODY_LIMIT:
        body = body[:ERROR_BODY_LIMIT] + "..."
    return f"HTTP {resp.status_code} {body}".rstrip()


# ==================================================
# DOWNLOAD (alt=media, ATOMIC)
# ==================================================
def download_drive_file(file_id: str, access_token: str, out_path: str) -> None:
    url = f"{config.DRIVE_API_URL}/files/{quote(file_id, safe='')}"
    tmp = out_path + ".part"

    try:
        with requests.get(
            url,
            params={"alt": "media"},
            headers=_auth(access_token),
            stream=True,
            timeout=config.HTTP_TIMEOUT,
            allow_redirects=True,
        ) as r:
            if not r.ok:
                raise UpstreamTransferFailure(
                    f"Download of {file_id} failed: {_describe(r)}"
                )
            with open(tmp, "wb") as f:
                for chunk in r.iter_content(CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as e:
        raise UpstreamTransferFailure(f"Download of {file_id} failed: {e}") from e

    os.replace(tmp, out_path)
    logger.info("downloaded %s (%d bytes)", file_id, os.path.getsize(out_path))


# ==================================================
# UPLOAD (multipart/related)
# ==================================================
def build_multipart_body(
    file_path: str,
    out_path: str,
    filename: str,
    mime_type: str,
    folder_id: Optional[str] = None,
    boundary: str = config.UPLOAD_BOUNDARY,
) -> None:
    """Write the metadata part and the raw file part to ``out_path``."""
    meta = {"name": filename}
    if folder_id:
        meta["parents"] = [folder_id]

    metadata_part = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(meta)}\r\n"
    )
    file_part_header = (
        f"--{boundary}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    )
    end = f"\r\n--{boundary}--\r\n"

    with open(out_path, "wb") as out:
        out.write(metadata_part.encode("utf-8"))
        out.write(file_part_header.encode("utf-8"))
        with open(file_path, "rb") as src:
            shutil.copyfileobj(src, out, CHUNK_SIZE)
        out.write(end.encode("utf-8"))


def upload_to_drive(
    access_token: str,
    file_path: str,
    filename: str,
    mime_type: str,
    folder_id: Optional[str] = None,
) -> UploadResult:
    boundary = config.UPLOAD_BOUNDARY
    url = f"{config.DRIVE_UPLOAD_URL}/files"
    params = {
        "uploadType": "multipart",
        "fields": "id,webViewLink,webContentLink",
    }
    headers = {
        **_auth(access_token),
        "Content-Type": f"multipart/related; boundary={boundary}",
    }

    staged = os.path.join(
        os.path.dirname(os.path.abspath(file_path)),
        f"upload-{uuid.uuid4().hex}.bin"
    )

    try:
        build_multipart_body(file_path, staged, filename, mime_type, folder_id, boundary)

        with open(staged, "rb") as body:
            r = requests.post(
                url,
                params=params,
                headers=headers,
                data=body,
                timeout=config.HTTP_TIMEOUT,
            )
    except requests.RequestException as e:
        raise UpstreamTransferFailure(f"Upload of {filename} failed: {e}") from e
    finally:
        try:
            os.remove(staged)
        except OSError:
            pass

    if not r.ok:
        raise UpstreamTransferFailure(f"Upload of {filename} failed: {_describe(r)}")

    try:
        data = r.json()
    except ValueError:
        raise UpstreamTransferFailure(
            f"Upload of {filename} returned a non-JSON response: {_describe(r)}"
        )
    if not isinstance(data, dict) or not data.get("id"):
        raise UpstreamTransferFailure(f"Upload of {filename} returned no file id")

    logger.info("uploaded %s as %s", filename, data["id"])
    return UploadResult(
        id=data["id"],
        web_view_link=data.get("webViewLink"),
        web_content_link=data.get("webContentLink"),
    )
