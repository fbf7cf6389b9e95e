def format_coord(x: int, y: int) -> str:
    """
    Convert zero-based (x, y) to a label like 'A1' (column letter, row number).
    """
    return f"{chr(ord('A') + x)}{y + 1}"
