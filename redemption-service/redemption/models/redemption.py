"""
Redemption Model — append-only ledger
One row per (identity_hash, campaign_id); the unique constraint is what enforces it.
No foreign key to vendors: a redemption belongs to a verified
person, who may never have logged in as a vendor.
"""

from redemption.extensions import db


class Redemption(db.Model):
    __tablename__ = 'redemptions'
    __table_args__ = (
        db.UniqueConstraint('world_id_hash', 'campaign_id', name='uq_redemptions_identity_campaign'),
    )

    id = db.Column(db.Integer, primary_key=True)
    identity_hash = db.Column('world_id_hash', db.String(255), nullable=False)
    campaign_id = db.Column(db.Integer, db.ForeignKey('campaigns.id'), nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'campaignId': self.campaign_id,
            'itemId': self.item_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
