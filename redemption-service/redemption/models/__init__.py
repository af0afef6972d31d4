from redemption.models.vendor import Vendor
from redemption.models.campaign import Campaign, Item
from redemption.models.redemption import Redemption

__all__ = ["Vendor", "Campaign", "Item", "Redemption"]
