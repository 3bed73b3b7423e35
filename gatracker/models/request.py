from dataclasses import dataclass
from typing import Optional


DIRECT = "(direct)"


@dataclass
class RequestData:
    """Per-call tracking data, built fresh for every beacon."""

    page_url: Optional[str] = None
    page_title: Optional[str] = None
    host_name: Optional[str] = None
    referrer_site: Optional[str] = None
    referrer_page: Optional[str] = None
    search_source: Optional[str] = None
    search_keywords: Optional[str] = None
    event_category: Optional[str] = None
    event_action: Optional[str] = None
    event_label: Optional[str] = None
    event_value: Optional[int] = None

    def set_referrer(self, site: Optional[str], page: Optional[str]) -> None:
        """Frame the visit as arriving from a referring site."""
        self.referrer_site = site
        self.referrer_page = page
        self.search_source = None
        self.search_keywords = None

    def set_search_referrer(self, source: Optional[str], keywords: Optional[str]) -> None:
        """Frame the visit as arriving from a search engine."""
        self.search_source = source
        self.search_keywords = keywords
        self.referrer_site = None
        self.referrer_page = None

    @property
    def is_event(self) -> bool:
        return self.event_category is not None and self.event_action is not None

    @property
    def is_search(self) -> bool:
        return self.search_source is not None or self.search_keywords is not None

    @property
    def referrer(self) -> Optional[str]:
        if self.referrer_site is None and self.referrer_page is None:
            return None
        return (self.referrer_site or "") + (self.referrer_page or "")

    # utmz campaign values

    @property
    def campaign_source(self) -> str:
        if self.is_search:
            return self.search_source or DIRECT
        return self.referrer_site or DIRECT

    @property
    def campaign_name(self) -> str:
        if self.is_search:
            return "(organic)"
        if self.referrer_site:
            return "(referral)"
        return DIRECT

    @property
    def campaign_medium(self) -> str:
        if self.is_search:
            return "organic"
        if self.referrer_site:
            return "referral"
        return "(none)"

    @property
    def campaign_term(self) -> Optional[str]:
        return self.search_keywords

    @property
    def campaign_content(self) -> Optional[str]:
        if not self.referrer_site:
            return None
        return self.referrer_page
