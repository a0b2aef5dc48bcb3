"""Test utilities for building fake upstream emoji trees"""

import json
from pathlib import Path

from PIL import Image


def make_png(path: Path, size=(64, 64), content_box=(16, 16, 48, 48),
             color=(255, 200, 0, 255)) -> Path:
    """Write a transparent PNG with an opaque rectangle inside it"""
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.new('RGBA', size, (0, 0, 0, 0))
    if content_box:
        width = content_box[2] - content_box[0]
        height = content_box[3] - content_box[1]
        image.paste(Image.new('RGBA', (width, height), color), content_box[:2])
    image.save(path, format='PNG')
    return path


def make_svg(path: Path, body: str = '<circle cx="16" cy="16" r="8"/>') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 32 32">{body}</svg>')
    return path


def make_icon(assets_dir: Path, folder: str, metadata=None,
              tones=None, single_png=False, svg_in_default=True) -> Path:
    """
    Create one upstream icon folder

    Args:
        metadata: dict written to metadata.json, None for no file
        tones: skin-tone folder names to create under 3D/
        single_png: put one PNG directly under 3D/
        svg_in_default: place the SVG in Color/Default/ instead of Color/
    """
    icon_dir = assets_dir / folder
    icon_dir.mkdir(parents=True, exist_ok=True)

    if metadata is not None:
        (icon_dir / 'metadata.json').write_text(json.dumps(metadata), encoding='utf-8')

    slug = folder.replace(' ', '_').lower()
    for tone in tones or []:
        make_png(icon_dir / '3D' / tone / f'{slug}_3d_{tone.lower()}.png')
    if single_png:
        make_png(icon_dir / '3D' / f'{slug}_3d.png')

    color_dir = icon_dir / 'Color' / 'Default' if svg_in_default else icon_dir / 'Color'
    make_svg(color_dir / f'{slug}_color.svg')
    return icon_dir
