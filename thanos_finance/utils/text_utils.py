def truncate(text: str, max_len: int = 64) -> str:
    return text if len(text) <= max_len else text[:max_len - 1] + "…"

def format_brl(amount: float) -> str:
    """Format as Brazilian reais: R$ 1.234,56"""
    sign = "-" if amount < 0 else ""
    formatted = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {formatted}"

def format_percent(value: float) -> str:
    return f"{value:.1f}%".replace(".", ",")
