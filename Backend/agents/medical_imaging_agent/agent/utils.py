"""Utility functions for the Medical Imaging Agent."""

import base64
import binascii
import io
import re

from loguru import logger
from PIL import Image, UnidentifiedImageError

from agents.medical_imaging_agent.agent.schemas import NormalizedImage
from agents.medical_imaging_agent.exceptions import ImageProcessingError, InvalidEncodingError

DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")
BASE64_PATTERN = re.compile(r"^([A-Za-z0-9+/]{4})*([A-Za-z0-9+/]{4}|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{2}==)$")

# Formats the vision model accepts as inline data; anything else is re-encoded as PNG
PASSTHROUGH_FORMATS = {"JPEG", "PNG", "WEBP"}
PNG_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


def strip_data_uri_prefix(image_string: str) -> str:
    """Remove a leading ``data:image/<type>;base64,`` tag if present."""
    return DATA_URI_PREFIX.sub("", image_string, count=1)


def decode_base64_image(image_string: str) -> bytes:
    """
    Validate and decode a base64 image string.

    Args:
        image_string: Base64 text, optionally prefixed with a data-URI tag

    Returns:
        Raw image bytes

    Raises:
        InvalidEncodingError: If the text is not well-formed base64
    """
    base64_data = strip_data_uri_prefix(image_string)

    if not BASE64_PATTERN.match(base64_data):
        raise InvalidEncodingError("Invalid base64 string format")

    try:
        return base64.b64decode(base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Invalid base64 string format: {e}") from e


def fit_inside(image: Image.Image, max_dimension: int) -> Image.Image:
    """
    Shrink an image in place so neither side exceeds max_dimension.

    Aspect ratio is preserved and smaller images are left untouched.
    """
    image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    return image


def encode_image(image: Image.Image, source_format: str | None) -> tuple[bytes, str]:
    """
    Encode an image back to bytes, keeping its format when the model accepts it.

    Returns:
        (image_bytes, mime_type)
    """
    output_format = source_format if source_format in PASSTHROUGH_FORMATS else "PNG"

    if output_format == "PNG" and image.mode not in PNG_MODES:
        image = image.convert("RGBA")

    out = io.BytesIO()
    image.save(out, format=output_format)
    return out.getvalue(), Image.MIME[output_format]


def normalize_image(image_string: str, max_dimension: int = 800) -> NormalizedImage:
    """
    Turn a client-supplied base64 image into a size-bounded base64 image.

    Args:
        image_string: Base64 text, optionally prefixed with a data-URI tag
        max_dimension: Upper bound for both width and height

    Returns:
        NormalizedImage with the re-encoded data and its MIME type

    Raises:
        InvalidEncodingError: If the text is not well-formed base64
        ImageProcessingError: If the bytes are not a readable image or resizing fails
    """
    image_bytes = decode_base64_image(image_string)
    logger.debug(f"Decoded image payload ({len(image_bytes)} bytes)")

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            source_format = image.format
            source_size = image.size
            image.load()

            fit_inside(image, max_dimension)
            data, mime_type = encode_image(image, source_format)
            width, height = image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.error(f"Image preparation error: {e}")
        raise ImageProcessingError(f"Unable to process image: {e}") from e

    logger.info(f"Normalized {source_format} image {source_size[0]}x{source_size[1]} -> {width}x{height} ({mime_type})")

    return NormalizedImage(
        base64_data=base64.b64encode(data).decode("utf-8"),
        mime_type=mime_type,
        width=width,
        height=height
    )
