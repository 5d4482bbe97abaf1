"""Delivery regions and shipping rates.

Thresholds can be overridden through environment variables so that
promotions do not require a release.
"""

import os

CURRENCY = "PKR"

FREE_SHIPPING_THRESHOLD = float(os.getenv("STOREFRONT_FREE_SHIPPING_THRESHOLD", "10000"))
DEFAULT_SHIPPING_FEE = float(os.getenv("STOREFRONT_DEFAULT_SHIPPING_FEE", "229"))
REMOTE_SURCHARGE_MULTIPLIER = 1.5

REGIONS = {
    "Punjab": [
        "Lahore",
        "Faisalabad",
        "Rawalpindi",
        "Multan",
        "Gujranwala",
        "Sialkot",
        "Sheikhupura",
        "Gujrat",
        "Bahawalpur",
    ],
    "Sindh": ["Karachi", "Hyderabad", "Sukkur", "Larkana"],
    "AJK": ["Mirpur", "Bhimber", "Kotli", "Muzaffarabad", "Rawalakot"],
    "Khyber Pakhtunkhwa": ["Peshawar", "Mardan", "Mingora", "Kohat", "Abbottabad"],
    "Balochistan": ["Quetta", "Turbat", "Khuzdar", "Gwadar", "Hub"],
    "Islamabad Capital Territory": ["Islamabad"],
}

REMOTE_CITIES = frozenset({"Quetta", "Gwadar"})

MAJOR_CITIES = frozenset({"Karachi", "Lahore", "Islamabad"})

DELIVERY_ESTIMATES = {
    "Karachi": "2-3",
    "Lahore": "2-3",
    "Islamabad": "3-4",
}
DEFAULT_DELIVERY_ESTIMATE = "4-5"


def default_fee_table() -> dict[str, float]:
    """City -> fee for every city we deliver to."""
    table = {}
    for cities in REGIONS.values():
        for city in cities:
            multiplier = REMOTE_SURCHARGE_MULTIPLIER if city in REMOTE_CITIES else 1
            table[city] = round(DEFAULT_SHIPPING_FEE * multiplier, 2)
    return table
