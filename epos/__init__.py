"""Building blocks of a small teaching kernel: memory management, keyboard and console models, and FAT on-disk structures."""

__version__ = "0.1.0"