"""Domain models for ms_market — pure dataclasses, no business logic."""

from dataclasses import dataclass


@dataclass
class Instrument:
    symbol: str
    display_name: str
    price: float  # admin-set live price, no history kept


# (symbol, display name, opening price). Reset restores exactly these.
DEFAULT_INSTRUMENTS: tuple[tuple[str, str, float], ...] = (
    ("TATAMOTORS", "TATA MOTORS", 400),
    ("ADANIGREEN", "ADANI GREEN", 1025),
    ("ONGC", "ONGC", 255),
    ("RELIANCE", "RELIANCE", 1450),
    ("ITC", "ITC", 415),
    ("HDFCBANK", "HDFC BANK", 1000),
    ("ICICIBANK", "ICICI BANK", 1375),
    ("ZOMATO", "ZOMATO", 325),
    ("TATAELXSI", "TATA ELXSI", 5540),
    ("INFOSYS", "INFOSYS", 1520),
    ("LNT", "L&T", 3900),
    ("GOLD", "GOLD", 122500),
    ("SILVER", "SILVER", 150000),
    ("CRUDEOIL", "CRUDE OIL", 5425),
    ("DOGE", "DOGE COIN", 17),
    ("ETHEREUM", "ETHEREUM", 345000),
)
