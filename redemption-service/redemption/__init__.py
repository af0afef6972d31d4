"""Vendor redemption service: World ID backed vendor login, campaigns and once-per-campaign redemptions."""
