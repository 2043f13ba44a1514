"""
Cloudinary integration utilities.

Provides ``upload_profile_picture`` for account avatars and
``upload_post_media`` for image / video / audio attached to posts.  Both
handle configuration, validation, and error handling so the view layer
stays thin and the integration is easily testable.
"""

import logging

from django.conf import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
ALLOWED_IMAGE_TYPES = frozenset([
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
])
ALLOWED_VIDEO_TYPES = frozenset([
    "video/mp4",
    "video/webm",
    "video/quicktime",
])
ALLOWED_AUDIO_TYPES = frozenset([
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
    "audio/webm",
])

MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MB
MAX_MEDIA_SIZE = 50 * 1024 * 1024  # 50 MB

PROFILE_PICTURE_FOLDER = "artistry-hub/profiles"
POST_MEDIA_FOLDER = "artistry-hub/posts"
PROFILE_PICTURE_TRANSFORMATION = [
    {"width": 300, "height": 300, "crop": "fill", "gravity": "face"},
]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ImageValidationError(Exception):
    """Raised when an uploaded file fails pre-upload checks."""


def media_kind(content_type):
    """Map a MIME type to ``"image"``, ``"video"``, ``"audio"`` or ``None``."""
    if content_type in ALLOWED_IMAGE_TYPES:
        return "image"
    if content_type in ALLOWED_VIDEO_TYPES:
        return "video"
    if content_type in ALLOWED_AUDIO_TYPES:
        return "audio"
    return None


def validate_image(image_file):
    """
    Validate an ``UploadedFile`` before sending it to Cloudinary.

    Raises
    ------
    ImageValidationError
        If content type or size is unacceptable.
    """
    if image_file.content_type not in ALLOWED_IMAGE_TYPES:
        allowed = ", ".join(sorted(ALLOWED_IMAGE_TYPES))
        raise ImageValidationError(
            f"Unsupported file type '{image_file.content_type}'. "
            f"Allowed: {allowed}"
        )

    if image_file.size > MAX_IMAGE_SIZE:
        mb = MAX_IMAGE_SIZE // (1024 * 1024)
        raise ImageValidationError(
            f"Image file size ({image_file.size:,} bytes) exceeds "
            f"the {mb} MB limit."
        )


def validate_media(media_file):
    """
    Validate post media and return its kind.

    Raises
    ------
    ImageValidationError
        If the type is not image/video/audio or the file is too large.
    """
    kind = media_kind(media_file.content_type)
    if kind is None:
        raise ImageValidationError(
            f"Unsupported media type '{media_file.content_type}'. "
            "Upload an image, video or audio file."
        )
    if kind == "image":
        validate_image(media_file)
    elif media_file.size > MAX_MEDIA_SIZE:
        mb = MAX_MEDIA_SIZE // (1024 * 1024)
        raise ImageValidationError(
            f"Media file size ({media_file.size:,} bytes) exceeds "
            f"the {mb} MB limit."
        )
    return kind


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

def _configure_cloudinary():
    """
    Ensure the ``cloudinary`` library is configured from Django settings.

    Called once per upload rather than at module level so that tests can
    override settings freely.
    """
    import cloudinary

    cloudinary.config(
        cloud_name=getattr(settings, "CLOUDINARY_CLOUD_NAME", ""),
        api_key=getattr(settings, "CLOUDINARY_API_KEY", ""),
        api_secret=getattr(settings, "CLOUDINARY_API_SECRET", ""),
    )


def _upload(file_obj, **upload_kwargs):
    import cloudinary.uploader

    # Remove None values so Cloudinary uses its defaults
    upload_kwargs = {k: v for k, v in upload_kwargs.items() if v is not None}
    try:
        result = cloudinary.uploader.upload(file_obj, **upload_kwargs)
        url = result["secure_url"]
        logger.info("Cloudinary upload succeeded: %s", url)
        return url
    except Exception as exc:
        logger.error("Cloudinary upload failed: %s", exc)
        raise RuntimeError("Upload to Cloudinary failed.") from exc


def upload_profile_picture(image_file, *, user_id=None):
    """
    Upload an image to Cloudinary with profile-photo transformations.

    Parameters
    ----------
    image_file : django.core.files.uploadedfile.UploadedFile
        The raw file from ``request.FILES``.
    user_id : str | None
        Optional user identifier used as a stable public ID so re-uploads
        overwrite the previous picture.

    Returns
    -------
    str
        The HTTPS URL of the uploaded (and transformed) image.

    Raises
    ------
    ImageValidationError
        If the file fails type/size checks.
    RuntimeError
        If the Cloudinary upload itself fails.
    """
    validate_image(image_file)
    _configure_cloudinary()

    public_id = f"{PROFILE_PICTURE_FOLDER}/{user_id}" if user_id else None
    return _upload(
        image_file,
        folder=PROFILE_PICTURE_FOLDER if not public_id else None,
        public_id=public_id,
        overwrite=True,
        transformation=PROFILE_PICTURE_TRANSFORMATION,
        resource_type="image",
    )


def upload_post_media(media_file):
    """
    Upload a post attachment and return ``(url, kind)``.

    Audio is stored by Cloudinary under the ``video`` resource type.
    """
    kind = validate_media(media_file)
    _configure_cloudinary()

    url = _upload(
        media_file,
        folder=POST_MEDIA_FOLDER,
        resource_type="image" if kind == "image" else "video",
    )
    return url, kind
