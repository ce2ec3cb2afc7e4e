from .io_utils import (read_grid, write_grid, read_image, read_image_series, read_tiff, read_gif,
                       write_image_series, save_gif, ensure_dir_exists, list_slice_files)
from .log_utils import setup_logging


__all__ = [
    "read_grid",
    "write_grid",
    "read_image",
    "read_image_series",
    "read_tiff",
    "read_gif",
    "write_image_series",
    "save_gif",
    "ensure_dir_exists",
    "list_slice_files",
    "setup_logging",
]
