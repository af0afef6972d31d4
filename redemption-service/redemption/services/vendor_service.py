"""
Vendor Service — Vendor Directory
Get-or-create keyed on the World ID nullifier.
"""

import logging

from sqlalchemy.exc import IntegrityError

from redemption.errors import StorageError
from redemption.extensions import db
from redemption.models.vendor import Vendor

logger = logging.getLogger(__name__)


def find_vendor(identity_hash):
    return Vendor.query.filter_by(identity_hash=identity_hash).first()


def list_vendors():
    return Vendor.query.order_by(Vendor.id).all()


def login_vendor(identity_hash):
    """
    Returns (vendor, created).
    A unique violation on insert means a concurrent login registered the same
    identity first: re-fetch once and report it as an existing vendor.
    """
    vendor = find_vendor(identity_hash)
    if vendor:
        return vendor, False

    vendor = Vendor(identity_hash=identity_hash)
    db.session.add(vendor)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        vendor = find_vendor(identity_hash)
        if vendor is None:
            logger.exception("Vendor insert failed without a conflicting row")
            raise StorageError()
        logger.info("Vendor %s registered concurrently; returning existing row", vendor.id)
        return vendor, False

    logger.info("Registered vendor %s", vendor.id)
    return vendor, True
