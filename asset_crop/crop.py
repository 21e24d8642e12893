"""Image crop backend using pyvips.

Pure functions for cropping images, no Qt dependencies.
"""

from asset_crop.image_engine.codec import _get_pyvips_module, open_oriented
from asset_crop.logger import get_logger
from asset_crop.models import DEFAULT_JPEG_QUALITY, CropArea

_logger = get_logger("crop")


def validate_crop_bounds(img_width: int, img_height: int, crop: tuple[int, int, int, int]) -> bool:
    """Validate that crop rectangle is within image bounds.

    Args:
        img_width: Image width
        img_height: Image height
        crop: (left, top, width, height) crop rectangle

    Returns:
        True if crop is valid, False otherwise
    """
    left, top, width, height = crop
    if left < 0 or top < 0:
        return False
    if width <= 0 or height <= 0:
        return False
    if left + width > img_width:
        return False
    return not top + height > img_height


def _open_source(source_path: str):
    _get_pyvips_module()
    try:
        return open_oriented(source_path)
    except Exception as e:
        _logger.error("Failed to open source image %s: %s", source_path, e, exc_info=True)
        raise


def _save_crop(image, source_path: str, crop: tuple[int, int, int, int], output_path: str, quality: int) -> str:
    """Crop an already opened image and write it to `output_path`."""
    if not validate_crop_bounds(image.width, image.height, crop):
        _logger.error("Crop bounds %s invalid for image size %dx%d", crop, image.width, image.height)
        raise ValueError(f"Crop bounds {crop} invalid for image size {image.width}x{image.height}")

    left, top, width, height = crop
    try:
        cropped = image.crop(left, top, width, height)
        if output_path.lower().endswith((".jpg", ".jpeg")):
            if cropped.hasalpha():
                cropped = cropped.flatten(background=[255, 255, 255])
            cropped.write_to_file(output_path, Q=int(quality))
        else:
            cropped.write_to_file(output_path)
    except Exception as e:
        _logger.error("Error during crop/write operation for %s -> %s: %s", source_path, output_path, e, exc_info=True)
        raise

    _logger.debug("Crop saved: %s", output_path)
    return output_path


def apply_crop_to_file(
    source_path: str,
    crop: tuple[int, int, int, int],
    output_path: str,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> str:
    """Crop image and save to file using pyvips.

    Args:
        source_path: Path to source image file
        crop: (left, top, width, height) crop rectangle in pixels
        output_path: Path to save cropped image
        quality: JPEG quality used when `output_path` is a JPEG

    Returns:
        Path to saved file (same as output_path)

    Raises:
        ValueError: If the crop rectangle does not fit the image
        pyvips.Error: If reading or writing fails
    """
    _logger.debug("Cropping %s: crop=%s -> %s", source_path, crop, output_path)
    image = _open_source(source_path)
    return _save_crop(image, source_path, crop, output_path, quality)


def crop_to_area(source_path: str, area: CropArea, output_path: str, quality: int = DEFAULT_JPEG_QUALITY) -> str:
    """Crop to a normalized area, resolved against the image's own size.

    The source is opened once; the same image supplies the size and the pixels.
    """
    image = _open_source(source_path)
    crop = area.to_pixels(image.width, image.height)
    _logger.debug("Cropping %s: area=%s crop=%s -> %s", source_path, area, crop, output_path)
    return _save_crop(image, source_path, crop, output_path, quality)
