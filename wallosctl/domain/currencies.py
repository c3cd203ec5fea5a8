"""Display defaults for well-known ISO 4217 currency codes."""

# code -> (name, symbol)
KNOWN_CURRENCIES: dict[str, tuple[str, str]] = {
    "USD": ("US Dollar", "$"),
    "EUR": ("Euro", "€"),
    "GBP": ("British Pound", "£"),
    "JPY": ("Japanese Yen", "¥"),
    "CNY": ("Chinese Yuan", "¥"),
    "CHF": ("Swiss Franc", "CHF"),
    "CAD": ("Canadian Dollar", "C$"),
    "AUD": ("Australian Dollar", "A$"),
    "NZD": ("New Zealand Dollar", "NZ$"),
    "SEK": ("Swedish Krona", "kr"),
    "NOK": ("Norwegian Krone", "kr"),
    "DKK": ("Danish Krone", "kr"),
    "PLN": ("Polish Zloty", "zł"),
    "CZK": ("Czech Koruna", "Kč"),
    "HUF": ("Hungarian Forint", "Ft"),
    "INR": ("Indian Rupee", "₹"),
    "KRW": ("South Korean Won", "₩"),
    "SGD": ("Singapore Dollar", "S$"),
    "HKD": ("Hong Kong Dollar", "HK$"),
    "BRL": ("Brazilian Real", "R$"),
    "MXN": ("Mexican Peso", "MX$"),
    "ZAR": ("South African Rand", "R"),
    "TRY": ("Turkish Lira", "₺"),
}


def currency_defaults(code: str) -> tuple[str, str]:
    """Return (name, symbol) for a currency code.

    Unknown codes use the code itself for both.
    """
    normalized = code.strip().upper()
    return KNOWN_CURRENCIES.get(normalized, (normalized, normalized))
