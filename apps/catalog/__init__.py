"""Catalog app package.

Holds the bookable entities of the marketplace (tours, guides, drivers)
together with company profiles. Guide, driver and company profiles carry
the provider response-time statistic maintained by the inquiries app.
"""
