def format_downloads(n: int) -> str:
    """1234567 -> '1.2M'"""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_size(size: int) -> str:
    """字节数 -> 'x.x MB' / 'x.x KB' / 'x B'"""
    if size >= 1_048_576:
        return f"{size / 1_048_576:.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"
