"""
Configuration system for gisdeform.

YAML-loadable dataclasses for the command-line tools.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any
import yaml
from pathlib import Path


@dataclass
class FieldConfig:
    """Which deformation field to load."""
    basename: Optional[str] = None  # Path without .dim/.ima suffix
    affine: Optional[str] = None  # Optional linear transform applied after the field


@dataclass
class OutputConfig:
    """How transformed points are written."""
    path: Optional[str] = None  # None = stdout
    key: str = 'target_points'  # JSON member holding the points
    indent: Optional[int] = None


@dataclass
class ComparisonConfig:
    """Configuration for checking results against reference points."""
    precision: float = 1e-6  # Max per-component difference in mm
    step: float = 1.0  # Grid step in mm for generated blocks
    block_size: int = 10  # Block edge length in mm
    source_key: str = 'source_points'
    target_key: str = 'target_points'
    source_space: Optional[str] = None
    target_space: Optional[str] = None


@dataclass
class DeformationConfig:
    """Main configuration."""
    # Sub-configs
    transform: FieldConfig = field(default_factory=FieldConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    comparison: ComparisonConfig = field(default_factory=ComparisonConfig)

    # Global settings
    verbose: bool = True

    @classmethod
    def from_yaml(cls, path: str) -> 'DeformationConfig':
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML config file

        Returns:
            DeformationConfig instance
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeformationConfig':
        transform = FieldConfig(**data.get('transform', {}))
        output = OutputConfig(**data.get('output', {}))
        comparison = ComparisonConfig(**data.get('comparison', {}))

        global_settings = {
            k: v for k, v in data.items()
            if k not in ['transform', 'output', 'comparison']
        }

        return cls(
            transform=transform,
            output=output,
            comparison=comparison,
            **global_settings
        )

    def to_yaml(self, path: str) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Output path
        """
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'transform': asdict(self.transform),
            'output': asdict(self.output),
            'comparison': asdict(self.comparison),
            'verbose': self.verbose,
        }


def create_default_config() -> DeformationConfig:
    """Create default configuration."""
    return DeformationConfig()
