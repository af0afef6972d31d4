"""
Campaign Service — Campaign Store
Plain persistence for campaigns and their items.
"""

import logging

from sqlalchemy import or_

from redemption.errors import CampaignNotFound, ValidationError
from redemption.extensions import db
from redemption.models.campaign import Campaign, Item

logger = logging.getLogger(__name__)


def create_campaign(name, item_name=None, start_date=None, end_date=None, items=None, vendor_id=None):
    if start_date and end_date and start_date > end_date:
        raise ValidationError('startDate must be on or before endDate')

    campaign = Campaign(
        name=name,
        item_name=item_name,
        start_date=start_date,
        end_date=end_date,
        vendor_id=vendor_id
    )
    db.session.add(campaign)
    for label in items or []:
        campaign.items.append(Item(name=label))
    db.session.commit()

    logger.info("Created campaign %s (%d items)", campaign.id, len(campaign.items))
    return campaign


def list_campaigns(active_on=None):
    """All campaigns, or only those whose window contains `active_on` (inclusive)."""
    query = Campaign.query
    if active_on is not None:
        query = query.filter(
            or_(Campaign.start_date.is_(None), Campaign.start_date <= active_on),
            or_(Campaign.end_date.is_(None), Campaign.end_date >= active_on),
        )
    return query.order_by(Campaign.id).all()


def get_campaign(campaign_id):
    return db.session.get(Campaign, campaign_id)


def require_campaign(campaign_id):
    campaign = get_campaign(campaign_id)
    if campaign is None:
        raise CampaignNotFound()
    return campaign


def list_items(campaign_id):
    return Item.query.filter_by(campaign_id=campaign_id).order_by(Item.id).all()


def create_item(campaign_id, name):
    if get_campaign(campaign_id) is None:
        raise ValidationError('Campaign not found')

    item = Item(campaign_id=campaign_id, name=name)
    db.session.add(item)
    db.session.commit()
    return item
