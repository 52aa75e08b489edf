from dataclasses import dataclass, field

SEX_CATEGORIES = ("male", "female")


def validate_sex(sex: str) -> str:
    """Return *sex* when it is a supported range category.

    Raises:
        ValueError: for anything outside ``male``/``female``.
    """
    if sex not in SEX_CATEGORIES:
        raise ValueError(f"sex must be one of {SEX_CATEGORIES}, got {sex!r}")
    return sex


@dataclass(frozen=True)
class BenchmarkDefinition:
    """A canonical biomarker with its aliases, accepted units and ranges."""

    name: str
    category: str
    male_range: str
    female_range: str | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)
    units: tuple[str, ...] = field(default_factory=tuple)
    full_name: str | None = None
    active: bool = True
    is_custom: bool = False

    @property
    def preferred_unit(self) -> str:
        """Target unit for normalized readings ("" when none is declared)."""
        return self.units[0] if self.units else ""

    @property
    def display_name(self) -> str:
        """``"TSH (Thyroid Stimulating Hormone)"`` for abbreviated names."""
        if self.full_name and self.full_name != self.name:
            return f"{self.name} ({self.full_name})"
        return self.name

    def range_for(self, sex: str) -> str:
        """Range expression for *sex*; female falls back to the male range."""
        if validate_sex(sex) == "female" and self.female_range:
            return self.female_range
        return self.male_range
