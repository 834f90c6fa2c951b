"""
Unit conversion between inches, centimeters, and canvas pixels.
Pixels are fixed at 96 per inch, the density a browser canvas uses.
"""

INCHES = "inches"
CENTIMETERS = "cm"

PIXELS_PER_INCH = 96
CM_PER_INCH = 2.54

_UNIT_ALIASES = {
    "in": INCHES,
    "inch": INCHES,
    "inches": INCHES,
    "cm": CENTIMETERS,
    "centimeters": CENTIMETERS,
    "centimetres": CENTIMETERS,
}


def parse_unit(text):
    """
    Resolve a user supplied unit name.

    Args:
        text: Unit name such as "in", "inches", "cm" (case-insensitive)

    Returns:
        INCHES or CENTIMETERS

    Raises:
        ValueError: If the name is not a known unit
    """
    unit = _UNIT_ALIASES.get(str(text).strip().lower())
    if unit is None:
        raise ValueError(f"Unknown unit: {text!r}")
    return unit


def to_inches(value, unit):
    """Convert a length in the given unit to inches"""
    if unit == CENTIMETERS:
        return value / CM_PER_INCH
    return value


def to_pixels(value, unit):
    """
    Convert a length in the given unit to canvas pixels.

    Negative values are valid and used for grid outsets.
    """
    return to_inches(value, unit) * PIXELS_PER_INCH


def pixels_to_units(pixels, unit):
    """Convert canvas pixels back to a length in the given unit"""
    inches = pixels / PIXELS_PER_INCH
    if unit == CENTIMETERS:
        return inches * CM_PER_INCH
    return inches


class UnitConverter:
    """
    Holds the active measurement unit and converts nominal dimensions.

    Supports two unit types:
    - inches
    - cm: Centimeters (divided by 2.54 before conversion)
    """

    def __init__(self, units=INCHES):
        """
        Initialize the unit converter.

        Args:
            units: Current unit type (INCHES or CENTIMETERS)
        """
        self.units = parse_unit(units)

    def set_units(self, units):
        """Change the current unit type"""
        self.units = parse_unit(units)

    def units_to_pixels(self, value, units=None):
        """
        Convert value in current units to pixels.

        Args:
            value: Value in current units
            units: Override current units (optional)

        Returns:
            Float pixel value
        """
        if units is None:
            units = self.units
        return to_pixels(value, units)

    def pixels_to_units(self, pixels, units=None):
        """Convert pixels to current units"""
        if units is None:
            units = self.units
        return pixels_to_units(pixels, units)

    def get_unit_label(self, units=None):
        """
        Get display label for unit type.

        Returns:
            String label ("in" or "cm")
        """
        if units is None:
            units = self.units

        if units == CENTIMETERS:
            return "cm"
        return "in"
