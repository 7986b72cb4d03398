"""Configuration management for the enum extensions generator."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass
class Config:
    """Configuration for the enum extensions generator."""

    source_root: Path
    output_dir: Path
    verbose: bool = False
    log_dir: Optional[Path] = None
    use_cache: bool = True
    exclude: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables or .env file.

        Args:
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config object
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"

        if env_path.exists():
            load_dotenv(env_path)

        source_root_str = os.getenv("ENUMGEN_SOURCE_ROOT", "src")
        output_dir_str = os.getenv("ENUMGEN_OUTPUT_DIR", "generated")
        log_dir_str = os.getenv("ENUMGEN_LOG_DIR")
        verbose_str = os.getenv("ENUMGEN_VERBOSE", "false").lower()
        use_cache_str = os.getenv("ENUMGEN_USE_CACHE", "true").lower()
        exclude_str = os.getenv("ENUMGEN_EXCLUDE", "")

        return cls(
            source_root=Path(source_root_str),
            output_dir=Path(output_dir_str),
            verbose=verbose_str in ("true", "1", "yes"),
            log_dir=Path(log_dir_str) if log_dir_str else None,
            use_cache=use_cache_str in ("true", "1", "yes"),
            exclude=tuple(p.strip() for p in exclude_str.split(",") if p.strip()),
        )

    @classmethod
    def from_args(
        cls,
        source_root: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        verbose: Optional[bool] = None,
        log_dir: Optional[Path] = None,
        use_cache: Optional[bool] = None,
    ) -> "Config":
        """
        Create configuration from explicit arguments, falling back to environment.

        Args:
            source_root: Root directory of the analysed sources (overrides env)
            output_dir: Output directory (overrides env)
            verbose: Enable verbose output (overrides env)
            log_dir: Directory for log files (overrides env)
            use_cache: Use the persistent description cache (overrides env)

        Returns:
            Config object
        """
        config = cls.from_env()

        if source_root is not None:
            config.source_root = source_root
        if output_dir is not None:
            config.output_dir = output_dir
        if verbose is not None:
            config.verbose = verbose
        if log_dir is not None:
            config.log_dir = log_dir
        if use_cache is not None:
            config.use_cache = use_cache

        return config

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.source_root.exists():
            raise ValueError(f"Source root not found: {self.source_root}")

        if not self.source_root.is_dir():
            raise ValueError(f"Not a directory: {self.source_root}")

        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise ValueError(f"Output path is not a directory: {self.output_dir}")

    def ensure_output_dir(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
