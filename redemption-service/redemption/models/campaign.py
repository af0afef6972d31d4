"""
Campaign and Item models.
A campaign is active on day D when start_date <= D <= end_date; a missing bound is open.
"""

from redemption.extensions import db


class Campaign(db.Model):
    __tablename__ = 'campaigns'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    item_name = db.Column(db.String(255), nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    vendor_id = db.Column(db.Integer, db.ForeignKey('vendors.id'), nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    items = db.relationship(
        'Item',
        backref='campaign',
        lazy=True,
        order_by='Item.id'
    )

    def to_dict(self, include_items=False):
        data = {
            'id': self.id,
            'name': self.name,
            'itemName': self.item_name,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'vendorId': self.vendor_id
        }
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


class Item(db.Model):
    __tablename__ = 'items'

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey('campaigns.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'campaignId': self.campaign_id,
            'name': self.name
        }
