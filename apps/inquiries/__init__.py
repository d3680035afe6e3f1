"""Inquiries app package.

Customers send one inquiry to several providers (tours, guides, drivers or
companies). Every recipient answers independently; answering feeds the
provider response-time statistic and accepting a tour, guide or driver
inquiry turns it into confirmed bookings.
"""
