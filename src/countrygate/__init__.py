"""countrygate — country-based access gate for page loads."""

__version__ = "0.1.0"
