"""
Image Converter

Re-encodes a 3D PNG rendering as WebP twice: once with its uniform border
trimmed away and once untouched.
"""

from pathlib import Path
from typing import Union

from PIL import Image, ImageChops, UnidentifiedImageError

from .env import DEFAULT_QUALITY


class ConversionError(Exception):
    """Raised when a source image cannot be decoded or encoded"""
    pass


def trim_image(image: Image.Image) -> Image.Image:
    """
    Crop away the border that matches the top-left pixel

    A transparent top-left pixel means the border is transparent padding,
    so the alpha channel alone decides what is content. A uniform image is
    returned unchanged.
    """
    if image.mode != 'RGBA':
        image = image.convert('RGBA')

    corner = image.getpixel((0, 0))
    if corner[3] == 0:
        bbox = image.getchannel('A').getbbox()
    else:
        background = Image.new('RGBA', image.size, corner)
        bbox = ImageChops.difference(image, background).getbbox()

    if not bbox or bbox == (0, 0) + image.size:
        return image
    return image.crop(bbox)


def output_name(unicode_key: str, suffix: str = '') -> str:
    """Base filename for one variant: '1f44d' or '1f44d-1f3fb'"""
    return f"{unicode_key}-{suffix}" if suffix else unicode_key


class ImageConverter:
    """Writes trimmed/ and original/ WebP files for one PNG at a time"""

    def __init__(self, trimmed_dir: Union[str, Path], original_dir: Union[str, Path],
                 quality: int = DEFAULT_QUALITY):
        self.trimmed_dir = Path(trimmed_dir)
        self.original_dir = Path(original_dir)
        self.quality = quality

    def _save(self, image: Image.Image, path: Path) -> None:
        try:
            image.save(path, format='WEBP', quality=self.quality)
        except (OSError, ValueError) as e:
            raise ConversionError(f"Cannot encode {path.name}: {e}")

    def convert(self, png_path: Union[str, Path], name: str) -> None:
        """
        Convert one PNG

        Args:
            png_path: Source PNG
            name: Output base name (see output_name)

        Raises:
            ConversionError: the source is corrupt or an output cannot be written
        """
        png_path = Path(png_path)
        try:
            with Image.open(png_path) as source:
                source.load()
                image = source.convert('RGBA')
        except (UnidentifiedImageError, OSError) as e:
            raise ConversionError(f"Cannot decode {png_path}: {e}")

        self._save(trim_image(image), self.trimmed_dir / f"{name}.webp")
        self._save(image, self.original_dir / f"{name}.webp")
