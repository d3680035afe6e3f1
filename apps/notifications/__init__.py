"""Notifications app package.

Delivers booking and inquiry notifications to users: an in-app
``Notification`` row for every event and an e-mail when the recipient has
e-mail notifications enabled. Delivery runs in Celery tasks dispatched by
domain event handlers after the triggering transaction commits.
"""
