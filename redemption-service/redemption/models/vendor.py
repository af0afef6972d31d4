from redemption.extensions import db


class Vendor(db.Model):
    __tablename__ = 'vendors'

    id = db.Column(db.Integer, primary_key=True)
    # World ID nullifier for the vendor_login action
    identity_hash = db.Column('world_id_hash', db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    campaigns = db.relationship('Campaign', backref='vendor', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'identityHash': self.identity_hash,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
