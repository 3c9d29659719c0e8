# asbottleneck/config.py

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from asbottleneck.errors import ConfigError

DEFAULT_BIN_WIDTH = 16
ENV_PREFIX = "ASBOTTLENECK_"


@dataclass
class LocateConfig:
    sorted_dir: Path
    unsorted_dir: Path
    output_dir: Optional[Path] = None
    bin_width: int = DEFAULT_BIN_WIDTH
    strict_order: bool = False

    def validate(self) -> "LocateConfig":
        """
        Check the settings before a run starts.

        The bin width splits the leading-byte domain [0, 255] and has to be a
        power of two no larger than 256.
        """
        width = self.bin_width
        if width < 1 or width > 256 or width & (width - 1):
            raise ConfigError(
                f"Bin width must be a power of two between 1 and 256, got {width}"
            )
        if self.output_dir is not None and not Path(self.output_dir).is_dir():
            raise ConfigError(f"Output directory `{self.output_dir}` does not exist")
        return self
