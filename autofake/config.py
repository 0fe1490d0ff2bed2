"""
Configuration for specification controllers.

Settings can be built in code or loaded from a YAML file checked in next to
the test suite:

    engine: magicmock
    collection_size: 5
    register_gateway: true
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from autofake.container.registry import DEFAULT_COLLECTION_SIZE
from autofake.engine import ENGINES


class FakesConfig(BaseModel):
    """Settings shared by all controllers that receive this config.

    Example:
        >>> config = FakesConfig(engine="magicmock", collection_size=5)
        >>> controller = SpecificationController(Widget, config=config)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    engine: str = Field(
        default="autospec",
        description="Name of the fake engine used when none is passed explicitly",
    )
    collection_size: int = Field(
        default=DEFAULT_COLLECTION_SIZE,
        ge=1,
        description="Number of fakes returned by some() when no count is given",
    )
    register_gateway: bool = Field(
        default=True,
        description="Register each new controller with the process-wide gateway",
    )

    @field_validator("engine")
    @classmethod
    def engine_is_known(cls, v: str) -> str:
        """Validate that the engine name is registered."""
        if v not in ENGINES:
            available = ", ".join(ENGINES)
            raise ValueError(f"Unknown fake engine '{v}'. Available: {available}")
        return v

    def to_yaml(self) -> str:
        """Serialize to YAML format."""
        result: str = yaml.dump(
            self.model_dump(mode="json"),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        return result

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "FakesConfig":
        """Deserialize from YAML format. Empty input yields the defaults."""
        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)


def load_config(path: str | Path) -> FakesConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        FakesConfig loaded from file

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    return FakesConfig.from_yaml(path.read_text())
