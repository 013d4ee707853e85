# schemagraph/config/settings.py

from typing import Literal

from pydantic import BaseModel, SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LayoutConfig(BaseModel):
    """Geometry constants shared by every layout algorithm."""

    # --- Node geometry ---
    node_width: float = 260
    header_height: float = 44
    row_height: float = 28

    # --- Hierarchical ---
    node_spacing: float = 80
    layer_spacing: float = 80
    barycenter_sweeps: int = 4

    # --- Force-directed ---
    force_iterations: int = 300
    force_seed: int = 42
    force_scale_per_node: float = 160
    collision_passes: int = 50
    collision_padding: float = 20

    # --- Circular ---
    circle_center_x: float = 0
    circle_center_y: float = 0
    circle_min_radius: float = 300
    circle_max_radius: float = 2400
    circle_per_node_radius: float = 60
    circle_start_angle: float = 0.0

    # --- Grid ---
    grid_row_gap: float = 40
    category_gap: float = 120


class Settings(BaseSettings):
    """
    Application settings, read from the environment and an optional .env file.
    Nested layout constants use a double underscore, e.g. LAYOUT__NODE_WIDTH=300.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # --- Source database (the converted model) ---
    database_url: str = Field("sqlite:///model.db")
    schema_name: str = Field("ifc")

    log_level: str = Field("INFO")

    # --- Layout persistence ---
    layout_backend: Literal["memory", "file", "neo4j"] = Field("file")
    layout_store_dir: str = Field(".schema_layouts")

    # --- Neo4j (only needed for the neo4j layout backend) ---
    neo4j_uri: str | None = None
    neo4j_user: str | None = None
    neo4j_password: SecretStr | None = None

    layout: LayoutConfig = Field(default_factory=LayoutConfig)


# --- Singleton Instance ---
settings = Settings()
