"""Pillow-backed image codec."""

import io

from PIL import Image

from .error_handling import with_error_handling
from .exceptions import CodecError, CodecErrorKind, ConfigurationError
from .models import ImageDimensions

FORMAT_TO_CONTENT_TYPE = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}

# Formats accepting a quality setting
LOSSY_FORMATS = ("JPEG", "WEBP")


def _open_image(image_bytes: bytes) -> Image.Image:
    """Open encoded image bytes; a header Pillow cannot parse is undecodable."""
    try:
        return Image.open(io.BytesIO(image_bytes))
    except (OSError, ValueError, SyntaxError) as e:
        raise CodecError(
            f"Image header cannot be decoded: {e}",
            kind=CodecErrorKind.UNDECODABLE,
        ) from e


class PillowImageCodec:
    """Probe and resize images with Pillow.

    With ``preserve_format`` the derivative keeps the source format; otherwise
    it is re-encoded as ``output_format``.
    """

    def __init__(
        self,
        preserve_format: bool = True,
        output_format: str = "JPEG",
        quality: int = 95,
    ):
        output_format = output_format.upper()
        if output_format not in FORMAT_TO_CONTENT_TYPE:
            raise ConfigurationError(
                f"Unsupported output format '{output_format}', expected one of "
                f"{', '.join(FORMAT_TO_CONTENT_TYPE)}"
            )
        self._preserve_format = preserve_format
        self._output_format = output_format
        self._quality = quality

    @with_error_handling
    def probe(self, image_bytes: bytes) -> ImageDimensions:
        """Read dimensions from the image header."""
        with _open_image(image_bytes) as image:
            width, height = image.size
        if width <= 0 or height <= 0:
            raise CodecError(
                f"Image header reports an empty size {width}x{height}",
                kind=CodecErrorKind.UNDECODABLE,
            )
        return ImageDimensions(height=height, width=width)

    @with_error_handling
    def transform(self, image_bytes: bytes, target_height: int) -> bytes:
        """
        Resize an image to ``target_height``, keeping the aspect ratio.

        Args:
            image_bytes: Complete encoded source image
            target_height: Height of the derivative in pixels

        Returns:
            Encoded derivative

        Raises:
            CodecError: If the image cannot be decoded or encoded
        """
        with _open_image(image_bytes) as image:
            try:
                image.load()
            except OSError as e:
                raise CodecError(
                    f"Image data is corrupt or truncated: {e}",
                    kind=CodecErrorKind.UNDECODABLE,
                ) from e

            if self._preserve_format and image.format:
                format_type = image.format
            else:
                format_type = self._output_format

            width = max(1, round(image.width * target_height / image.height))
            resized = image.resize((width, target_height), Image.Resampling.LANCZOS)

        if format_type == "JPEG" and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")

        save_kwargs = {"quality": self._quality} if format_type in LOSSY_FORMATS else {}
        output_stream = io.BytesIO()
        try:
            resized.save(output_stream, format=format_type, **save_kwargs)
        except (KeyError, ValueError, OSError) as e:
            raise CodecError(
                f"Cannot encode derivative as {format_type}: {e}",
                kind=CodecErrorKind.UNSUPPORTED,
            ) from e
        return output_stream.getvalue()

    def output_content_type(self, source_content_type: str) -> str:
        """Content type to store the derivative under."""
        if self._preserve_format:
            return source_content_type
        return FORMAT_TO_CONTENT_TYPE[self._output_format]
