from config import default_units, percent_threshold

# Units are stored as coefficients (1.0 == 100%). Values above the
# threshold are taken to be percentages typed in by a user.


def to_coefficient(value):
    if value is None:
        return default_units
    if value > percent_threshold:
        return value / 100
    return value


def to_percent(value):
    if value is None:
        return default_units * 100
    if value <= percent_threshold:
        return round(value * 100)
    return round(value)


def normalize_resource_id(resource_id):
    """Resource ids arrive as ints or strings; compare them as strings."""
    if resource_id is None:
        return ""
    return str(resource_id)
