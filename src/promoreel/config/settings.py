"""Pydantic settings models for promoreel configuration."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRODUCT_DESCRIPTION = """\
Soo: The Adaptive Night Light That Learns You
Soo is a wall-mounted, AI-powered night light designed to bring intelligence, comfort, \
and sustainability to your living space.
Each unit features a light sensor, motion detector, and an onboard AI processor that \
together create a self-learning lighting experience. With its sleek half-cylinder design \
(9 cm H x 7 cm W x 5 cm D) and soft downward glow, Soo blends beautifully into any \
interior, providing just the right amount of light exactly when and where you need it.
Unlike traditional smart lights, Soo forms a decentralized network of up to 16 lamps, \
allowing them to communicate directly with one another. Over time, they learn your \
movement patterns to create predictive lighting paths, so as you move through your home \
at night, the lights ahead turn on gently before you arrive, and fade out after you pass.
Completely battery-powered and wire-free, Soo can be easily repositioned or rearranged: \
simply move them, and they automatically re-learn new paths, no configuration needed.
Crafted through sustainable 3D printing using eco-friendly materials, Soo is available in \
three elegant finishes: Mocha, Bone White, and Matte Gray.
Soo doesn't just light your path, it learns it."""

DEFAULT_FEATURES = [
    "Light & Motion Sensors",
    "AI-Powered Path Learning",
    "Decentralized Mesh Network",
    "Battery-Powered & Easy Relocation",
    "Eco-Friendly 3D Printed Material",
]

DEFAULT_SHAPE_GUIDELINE = (
    "Important: The generated video must strictly adhere to the exact shape of the "
    "product shown in the reference images. The lamps must look realistic and identical "
    "to the product. The dimensions (height: 10 centimeters, width: 8.5 centimeters, "
    "depth: 5 centimeters) must always be maintained. No changes to the product's shape "
    "or dimensions are allowed. The lamps must be depicted as wall-mounted, approximately "
    "40 to 60 centimeters above the ground. They should never be shown sitting on the "
    "floor or mounted higher than 60 centimeters on the wall."
)

DEFAULT_PRELOADED_IMAGES = [
    f"{stem}.png"
    for stem in (
        "0004", "0005", "0006", "0015", "0016", "0017", "0022", "0023", "0024", "0026",
        "0027", "0028", "0029", "0030", "0031", "0034", "0037", "0038", "0039", "0041",
    )
]


class APISettings(BaseSettings):
    """API key configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias="ANTHROPIC_API_KEY",
        description="Anthropic API key for Claude (idea and refinement generation)",
    )
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias="GEMINI_API_KEY",
        description="Google Gemini/Veo API key (video generation)",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        validation_alias="ANTHROPIC_MODEL",
        description="Anthropic model ID for idea and refinement generation",
    )


class VideoSettings(BaseSettings):
    """Video generation settings."""

    model_config = SettingsConfigDict(extra="ignore")

    single_image_model: str = Field(
        default="veo-3.1-fast-generate-preview",
        description="Model used when exactly one reference image is selected",
    )
    multi_image_model: str = Field(
        default="veo-3.1-generate-preview",
        description="Model used with 2-3 asset reference images",
    )
    resolution: Literal["720p", "1080p"] = Field(
        default="720p",
        description="Output resolution: 720p or 1080p",
    )
    aspect_ratio: Literal["16:9", "9:16"] = Field(
        default="16:9",
        description="Default aspect ratio: 16:9 or 9:16",
    )
    poll_interval: float = Field(
        default=10.0,
        ge=0.0,
        le=120.0,
        description="Seconds between operation status checks",
    )
    max_poll_attempts: int = Field(
        default=60,
        ge=0,
        description="Status checks before a job times out (0 disables the limit)",
    )
    download_timeout: float = Field(
        default=120.0,
        gt=0.0,
        description="Timeout in seconds for downloading the finished video",
    )


class AssetSettings(BaseSettings):
    """Product image library settings."""

    model_config = SettingsConfigDict(extra="ignore")

    preloaded_source: str = Field(
        default="data/image",
        description="Directory or http(s) base URL holding the preloaded images",
    )
    preloaded_images: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRELOADED_IMAGES),
        description="Ordered file names of the preloaded product images",
    )
    max_uploads: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Maximum number of user-uploaded images",
    )
    max_selection: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Maximum number of images selected for one video",
    )


class ProductSettings(BaseSettings):
    """Product the promotional video is about."""

    model_config = SettingsConfigDict(extra="ignore")

    description: str = Field(
        default=DEFAULT_PRODUCT_DESCRIPTION,
        min_length=1,
        description="Product description sent to idea generation",
    )
    features: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FEATURES),
        description="Feature tags the user may ask concepts to highlight",
    )
    shape_guideline: str = Field(
        default=DEFAULT_SHAPE_GUIDELINE,
        min_length=1,
        description="Fixed product-fidelity clause appended to every video prompt",
    )


class OutputSettings(BaseSettings):
    """Output settings."""

    model_config = SettingsConfigDict(extra="ignore")

    output_dir: str = Field(
        default="output",
        description="Directory where finished videos are saved",
    )


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    api: APISettings = Field(default_factory=APISettings)
    video: VideoSettings = Field(default_factory=VideoSettings)
    assets: AssetSettings = Field(default_factory=AssetSettings)
    product: ProductSettings = Field(default_factory=ProductSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @property
    def output_dir(self) -> str:
        """Convenience accessor for the output directory."""
        return self.output.output_dir

    def has_required_api_keys(self) -> bool:
        """Check if required API keys are configured."""
        return bool(
            self.api.anthropic_api_key.get_secret_value()
            and self.api.gemini_api_key.get_secret_value()
        )

    def get_missing_api_keys(self) -> list[str]:
        """Return list of missing required API keys."""
        missing = []
        if not self.api.anthropic_api_key.get_secret_value():
            missing.append("ANTHROPIC_API_KEY")
        if not self.api.gemini_api_key.get_secret_value():
            missing.append("GEMINI_API_KEY")
        return missing
