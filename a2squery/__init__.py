"""Steam A2S server query client with Arma 3 / DayZ server browser protocol support."""

__version__ = "0.1.0"