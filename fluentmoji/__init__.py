"""
fluentmoji build pipeline

Converts the upstream Fluent UI emoji tree into web assets:
- 3d/trimmed and 3d/original WebP renderings per skin tone
- flat SVGs
- emoji-map.json keyed by normalized Unicode codepoint
"""

__version__ = "1.0.0"
