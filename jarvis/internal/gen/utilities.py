import re


def divide(dividendo: int | float, divisor: int | float) -> float:
    """
    Avoids ZeroDivisionError.
    """
    if divisor == 0:
        return 0
    else:
        return dividendo / divisor


def normalize_unit(address2: str | None) -> str:
    """
    Canonicalizes the free-text secondary address line to "Unit <digits>".

    The rules are applied in order:
    1. Empty or blank -> ''.
    2. Lowercase and remove every whitespace character.
    3. Digits immediately followed by "unit" (204unit) -> those digits.
    4. No "unit" at all (apt204, #12) -> the first run of digits, possibly none.
    5. Otherwise (unit12, suiteunit4) -> the digits that follow "unit".

    It is a heuristic, text such as "suite 3 unit" loses the 3.
    """
    if not address2 or not address2.strip():
        return ''

    compact = re.sub(r'\s+', '', address2.lower())

    leading = re.match(r'^(\d+)unit', compact)
    if leading:
        return f'Unit {leading.group(1)}'

    unit = re.search(r'unit(\d*)', compact)
    if not unit:
        digits = re.search(r'\d+', compact)
        return f'Unit {digits.group(0) if digits else ""}'

    return f'Unit {unit.group(1)}'


def contains_tag(tags: list[str], tag: str) -> bool:
    """Shopify tags are case insensitive."""
    tag = tag.strip().lower()
    return any(x.strip().lower() == tag for x in tags)
