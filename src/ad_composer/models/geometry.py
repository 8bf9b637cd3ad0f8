from pydantic import BaseModel, ConfigDict, Field

# Tolerance for AI-produced rectangles that overshoot the canvas by rounding
ZONE_EPSILON = 0.01


class NormRect(BaseModel):
    """Rectangle normalized to 0–1 relative to the image size."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(description="left edge (0–1)")
    y: float = Field(description="top edge (0–1)")
    w: float = Field(description="width (0–1)")
    h: float = Field(description="height (0–1)")


class PixelRect(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    w: int
    h: int

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def right(self) -> int:
        return self.x + self.w


def to_pixels(norm: NormRect, canvas_w: int, canvas_h: int) -> PixelRect:
    """Normalized rect → pixel rect. Each edge is rounded independently."""
    return PixelRect(
        x=round(norm.x * canvas_w),
        y=round(norm.y * canvas_h),
        w=round(norm.w * canvas_w),
        h=round(norm.h * canvas_h),
    )


def is_valid_zone(rect: NormRect) -> bool:
    return (
        rect.x >= 0
        and rect.y >= 0
        and rect.x + rect.w <= 1 + ZONE_EPSILON
        and rect.y + rect.h <= 1 + ZONE_EPSILON
        and rect.w > 0
        and rect.h > 0
    )


def clamp_zone(rect: NormRect) -> NormRect:
    """Pull a rect back inside the unit square."""
    x = max(0.0, min(rect.x, 1.0))
    y = max(0.0, min(rect.y, 1.0))
    w = min(rect.w, 1.0 - x)
    h = min(rect.h, 1.0 - y)
    return NormRect(x=x, y=y, w=w, h=h)
