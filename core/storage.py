"""
LoveSync - File Object Store

Thin layer over Cloudinary: put(path, file) uploads and returns a
StoredFile reference; public_url() turns a stored reference (a public id
string or the CloudinaryResource a CloudinaryField loads) into a URL.
"""

import logging
import os
from dataclasses import dataclass

import cloudinary
import cloudinary.uploader
from cloudinary import CloudinaryResource
from cloudinary.exceptions import Error as CloudinaryError

logger = logging.getLogger(__name__)

StorageError = CloudinaryError


@dataclass(frozen=True)
class StoredFile:
    public_id: str
    url: str


def put(path, file):
    """
    Upload `file` (bytes, a file object or an UploadedFile) under `path`.

    Raises StorageError on upload failure.
    """
    if hasattr(file, 'seek'):
        file.seek(0)
    result = cloudinary.uploader.upload(
        file,
        public_id=path,
        resource_type='image',
        overwrite=True,
    )
    logger.info("Uploaded %s", result.get('public_id', path))
    return StoredFile(public_id=result['public_id'], url=result.get('secure_url') or public_url(result['public_id']))


def delete(reference):
    public_id = getattr(reference, 'public_id', reference)
    try:
        cloudinary.uploader.destroy(str(public_id))
    except CloudinaryError as exc:
        logger.warning("Could not delete %s from Cloudinary: %s", public_id, exc)


def public_url(reference):
    if not reference:
        return None
    if isinstance(reference, CloudinaryResource):
        return reference.build_url(secure=True)
    return cloudinary.CloudinaryImage(str(reference)).build_url(secure=True)


def safe_name(filename):
    """File name stem usable inside a Cloudinary public id."""
    stem = os.path.splitext(os.path.basename(filename or 'photo'))[0]
    cleaned = ''.join(ch if ch.isalnum() or ch in '-_' else '_' for ch in stem)
    return cleaned or 'photo'
