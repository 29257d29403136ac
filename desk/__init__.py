"""Front-office application: patient registry, billing, price list and dashboard."""
