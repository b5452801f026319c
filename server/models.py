"""
Shared Pydantic request models for the Horn Designer geometry API.
"""

from pydantic import BaseModel, field_validator, model_validator

from horn.contract import check_blend_window
from horn.defaults import DEFAULT_MOD_SAMPLES, DEFAULT_PROFILE_SAMPLES, DEFAULT_RINGS, DEFAULT_SLICES
from horn.values import (
    HornDesign,
    ModulationBlendParams,
    ModulationParams,
    ProfileParams,
    ShapeBlendParams,
    ShellParams,
)


class ProfileParamsModel(BaseModel):
    """R-OSSE guide curve for one axis. Lengths in mm, angles in degrees."""
    R: float = 145.0        # Mouth half-extent
    r0: float = 12.7        # Throat radius
    a0_deg: float = 7.5     # Throat half-angle
    a_deg: float = 45.0     # Coverage half-angle
    k: float = 1.8          # Throat expansion factor
    rho: float = 0.3        # Apex radius
    b: float = 0.3          # Bending
    m: float = 0.8          # Apex shift
    q: float = 3.7          # Throat shape exponent

    @field_validator("R", "r0", "a0_deg", "a_deg", "k", "rho", "q")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("guide curve lengths, angles, k, rho and q must be positive.")
        return value

    @field_validator("b")
    @classmethod
    def validate_bending(cls, value: float) -> float:
        if value < 0:
            raise ValueError("b (bending) must be >= 0.")
        return value

    @field_validator("m")
    @classmethod
    def validate_apex_shift(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("m (apex shift) must be in (0, 1].")
        return value

    def to_params(self) -> ProfileParams:
        return ProfileParams(**self.model_dump())


class ShapeBlendModel(BaseModel):
    n_mouth: float = 4.5
    shape_start: float = 0.05
    shape_end: float = 0.85
    shape_pow: float = 1.0

    @field_validator("n_mouth")
    @classmethod
    def validate_n_mouth(cls, value: float) -> float:
        if value < 2:
            raise ValueError("n_mouth must be >= 2 (2 is an ellipse).")
        return value

    @field_validator("shape_pow")
    @classmethod
    def validate_power(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("shape_pow must be positive.")
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "ShapeBlendModel":
        for bound in (self.shape_start, self.shape_end):
            if not 0 <= bound <= 1:
                raise ValueError("shape blend window must lie inside [0, 1].")
        message = check_blend_window(self.shape_start, self.shape_end, "shape blend")
        if message:
            raise ValueError(message)
        return self

    def to_params(self) -> ShapeBlendParams:
        return ShapeBlendParams(**self.model_dump())


class ModulationBlendModel(BaseModel):
    mod_start: float = 0.15
    mod_end: float = 0.75
    mod_pow: float = 1.0

    @model_validator(mode="after")
    def validate_window(self) -> "ModulationBlendModel":
        for bound in (self.mod_start, self.mod_end):
            if not 0 <= bound <= 1:
                raise ValueError("modulation blend window must lie inside [0, 1].")
        if self.mod_pow <= 0:
            raise ValueError("mod_pow must be positive.")
        message = check_blend_window(self.mod_start, self.mod_end, "modulation blend")
        if message:
            raise ValueError(message)
        return self

    def to_params(self) -> ModulationBlendParams:
        return ModulationBlendParams(**self.model_dump())


class ModulationModel(BaseModel):
    enabled: bool = False
    base: float = 0.3
    amp: float = 0.5
    freq: float = 2.0
    exp: float = 4.0

    @model_validator(mode="after")
    def validate_pattern(self) -> "ModulationModel":
        if not 0 <= self.base <= 1:
            raise ValueError("modulation base must be in [0, 1].")
        if self.amp < 0:
            raise ValueError("modulation amp must be >= 0.")
        if self.freq <= 0:
            raise ValueError("modulation freq must be positive.")
        if self.exp < 1:
            raise ValueError("modulation exp must be >= 1.")
        return self

    def to_params(self) -> ModulationParams:
        return ModulationParams(**self.model_dump())


class ShellModel(BaseModel):
    enabled: bool = False
    thickness: float = 3.0
    throat_cap: bool = True
    mouth_cap: bool = True

    @field_validator("thickness")
    @classmethod
    def validate_thickness(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("shell thickness must be positive.")
        return value

    def to_params(self) -> ShellParams:
        return ShellParams(**self.model_dump())


class HornDesignRequest(BaseModel):
    """Full parameter intake for one geometry pass."""

    # ── Guide curves ───────────────────────────────────────────────────────
    horizontal: ProfileParamsModel = ProfileParamsModel()
    vertical: ProfileParamsModel = ProfileParamsModel(R=95.0, a_deg=30.0)

    # ── Cross-section shape and modulation ─────────────────────────────────
    shape_blend: ShapeBlendModel = ShapeBlendModel()
    mod_blend: ModulationBlendModel = ModulationBlendModel()
    diagonal_mod: ModulationModel = ModulationModel()
    cardinal_mod: ModulationModel = ModulationModel()

    # ── Mesh resolution ────────────────────────────────────────────────────
    rings: int = DEFAULT_RINGS
    slices: int = DEFAULT_SLICES
    profile_samples: int = DEFAULT_PROFILE_SAMPLES

    # ── Manufacturing ──────────────────────────────────────────────────────
    shell: ShellModel = ShellModel()

    include_points: bool = False

    @field_validator("rings")
    @classmethod
    def validate_rings(cls, value: int) -> int:
        if not 1 <= value <= 400:
            raise ValueError("rings must be between 1 and 400.")
        return value

    @field_validator("slices")
    @classmethod
    def validate_slices(cls, value: int) -> int:
        if not 3 <= value <= 512:
            raise ValueError("slices must be between 3 and 512.")
        return value

    @field_validator("profile_samples")
    @classmethod
    def validate_profile_samples(cls, value: int) -> int:
        if value < 2:
            raise ValueError("profile_samples must be at least 2.")
        return value

    def to_design(self) -> HornDesign:
        return HornDesign(
            horizontal=self.horizontal.to_params(),
            vertical=self.vertical.to_params(),
            shape_blend=self.shape_blend.to_params(),
            mod_blend=self.mod_blend.to_params(),
            diagonal=self.diagonal_mod.to_params(),
            cardinal=self.cardinal_mod.to_params(),
            rings=self.rings,
            slices=self.slices,
            shell=self.shell.to_params(),
            profile_samples=self.profile_samples,
        )


class ModulationPreviewRequest(BaseModel):
    diagonal_mod: ModulationModel = ModulationModel(enabled=True)
    cardinal_mod: ModulationModel = ModulationModel()
    num_points: int = DEFAULT_MOD_SAMPLES

    @field_validator("num_points")
    @classmethod
    def validate_num_points(cls, value: int) -> int:
        if not 8 <= value <= 4096:
            raise ValueError("num_points must be between 8 and 4096.")
        return value
