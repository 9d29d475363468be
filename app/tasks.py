"""
Celery tasks for periodic maintenance

Tasks:
- expire_subscriptions: Expire active subscriptions past their end date
- mark_stale_users_offline: Clear the online flag of users without a recent heartbeat
"""
import logging

from app.celery_app import celery_app
from app.database import SessionLocal
from app.services import revisions
from app.services.presence import mark_stale_offline
from app.services.subscriptions import expire_overdue_subscriptions

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.expire_subscriptions")
def expire_subscriptions():
    db = SessionLocal()
    try:
        expired = expire_overdue_subscriptions(db)
        if expired:
            revisions.bump("subscriptions")
            revisions.bump("profiles")
            logger.info("Expired %d subscriptions", expired)
        return {"expired": expired}
    except Exception:
        db.rollback()
        logger.exception("Subscription expiry failed")
        raise
    finally:
        db.close()


@celery_app.task(name="app.tasks.mark_stale_users_offline")
def mark_stale_users_offline():
    db = SessionLocal()
    try:
        count = mark_stale_offline(db)
        if count:
            revisions.bump("profiles")
            logger.info("Marked %d users offline", count)
        return {"marked_offline": count}
    except Exception:
        db.rollback()
        logger.exception("Presence cleanup failed")
        raise
    finally:
        db.close()
