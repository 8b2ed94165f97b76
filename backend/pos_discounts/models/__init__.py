from .campaign import CampaignRecord

__all__ = [
    "CampaignRecord",
]
