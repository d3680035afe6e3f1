"""Users app package.

Defines the custom user model used as AUTH_USER_MODEL throughout the
project. A single account can book as a customer and own bookable entities
as a provider.
"""
