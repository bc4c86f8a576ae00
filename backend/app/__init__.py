"""
Vietnamese History Explorer

REST API and explorer core for browsing Vietnamese history by period,
on a map and along a timeline.

Packages:
- api: REST routes over periods, sub-periods and events
- explorer: data join, filtering, search and page view models
- models / services: SQLAlchemy persistence
"""

__version__ = "0.1.0"
