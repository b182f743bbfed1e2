# lootboxes/defaults.py
from decimal import Decimal

DEFAULT_STOCKS = {
    "AAPL": {"name": "Apple Inc.", "price": Decimal("175.50")},
    "TSLA": {"name": "Tesla, Inc.", "price": Decimal("600.75")},
    "AMZN": {"name": "Amazon.com, Inc.", "price": Decimal("3200.30")},
    "MSFT": {"name": "Microsoft Corporation", "price": Decimal("299.99")},
    "GOOGL": {"name": "Alphabet Inc.", "price": Decimal("2750.25")},
    "META": {"name": "Meta Platforms, Inc.", "price": Decimal("350.80")},
    "NVDA": {"name": "NVIDIA Corporation", "price": Decimal("650.45")},
    "NFLX": {"name": "Netflix, Inc.", "price": Decimal("450.60")},
}

# Each content entry's weight is its relative odds inside the box
DEFAULT_LOOTBOXES = {
    "Basic Lootbox": {
        "price": Decimal("50.00"),
        "contents": {"AAPL": 15, "TSLA": 10, "MSFT": 8, "NFLX": 6},
    },
    "Premium Lootbox": {
        "price": Decimal("100.00"),
        "contents": {"AMZN": 5, "GOOGL": 4, "AAPL": 3, "META": 2},
    },
    "Rare Lootbox": {
        "price": Decimal("150.00"),
        "contents": {"META": 3, "NVDA": 5, "AMZN": 2, "TSLA": 4, "GOOGL": 3},
    },
    "Mystery Lootbox": {
        "price": Decimal("75.00"),
        "contents": {"MSFT": 10, "NFLX": 8, "TSLA": 5, "AAPL": 4},
    },
    "Gold Lootbox": {
        "price": Decimal("150.00"),
        "contents": {"MSFT": 12, "GOOGL": 8, "NFLX": 6, "AAPL": 5},
    },
    "Legendary Lootbox": {
        "price": Decimal("350.00"),
        "contents": {"AMZN": 10, "META": 6, "NVDA": 4, "GOOGL": 5, "MSFT": 3},
    },
    "Diamond Lootbox": {
        "price": Decimal("500.00"),
        "contents": {"TSLA": 20, "META": 12, "AAPL": 15, "GOOGL": 10, "AMZN": 7},
    },
}
