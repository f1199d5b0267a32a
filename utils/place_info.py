# utils/place_info.py

def map_price_level(level):
    """
    Maps Google's numeric price_level (0-4) to a human-friendly budget category.
    Adds built-in safety for invalid inputs and unknown cases.
    """
    if level is None:
        return {"category": "unknown", "disclaimer": "No price info available"}
    if isinstance(level, bool) or not isinstance(level, (int, float)):
        return {"category": "unknown", "disclaimer": "Invalid price data"}

    if level <= 1:
        return {"category": "low", "disclaimer": ""}
    elif level == 2:
        return {"category": "mid", "disclaimer": ""}
    elif level >= 3:
        return {"category": "high", "disclaimer": ""}

    return {"category": "unknown", "disclaimer": "No price info available"}


def primary_name(destination):
    """'Kyoto, Japan' -> 'kyoto'. Used to match a place name against the destination."""
    if not destination:
        return ""
    return destination.split(',')[0].strip().lower()
