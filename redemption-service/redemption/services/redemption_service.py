"""
Redemption Service — Redemption Ledger
At most one redemption per (identity_hash, campaign_id).

The SELECT below is only a fast path for a friendly error. The unique constraint
uq_redemptions_identity_campaign is what holds under concurrent requests: a
conflicting INSERT surfaces as IntegrityError and is reported as AlreadyRedeemed.
"""

import logging

from sqlalchemy.exc import IntegrityError

from redemption.errors import AlreadyRedeemed, StorageError, ValidationError
from redemption.extensions import db
from redemption.models.campaign import Campaign, Item
from redemption.models.redemption import Redemption

logger = logging.getLogger(__name__)


def find_redemption(identity_hash, campaign_id):
    return Redemption.query.filter_by(identity_hash=identity_hash, campaign_id=campaign_id).first()


def redeem(identity_hash, campaign_id, item_id=None):
    campaign = db.session.get(Campaign, campaign_id)
    if campaign is None:
        raise ValidationError('Campaign not found')

    if item_id is not None:
        item = db.session.get(Item, item_id)
        if item is None or item.campaign_id != campaign.id:
            raise ValidationError('Item does not belong to this campaign')

    if find_redemption(identity_hash, campaign_id):
        logger.info("Duplicate redemption rejected for campaign %s", campaign_id)
        raise AlreadyRedeemed()

    redemption = Redemption(identity_hash=identity_hash, campaign_id=campaign_id, item_id=item_id)
    db.session.add(redemption)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if find_redemption(identity_hash, campaign_id):
            logger.info("Concurrent duplicate redemption rejected for campaign %s", campaign_id)
            raise AlreadyRedeemed()
        logger.exception("Redemption insert failed for campaign %s", campaign_id)
        raise StorageError()

    logger.info("Redemption %s recorded for campaign %s", redemption.id, campaign_id)
    return redemption
