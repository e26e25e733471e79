"""Domain layer for ledgerview: entities, balance engine, chart and entry views.

Services are imported from their modules (e.g. ``ledgerview.domain.balance``);
the backend layer imports entities from this package, so nothing here pulls
in the services.
"""
