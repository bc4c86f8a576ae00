"""
Business logic services.

Services handle the application logic between API and database.
"""
from app.services import event_service
from app.services import period_service
from app.services import stats_service
