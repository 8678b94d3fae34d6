"""
Pydantic models for automated findings and reviewer overrides.

RawFindings is a frozen snapshot produced once per analysis run. Manual
overrides are per-topic records where every checklist field is tri-state:
None (no opinion), True (confirmed) or False (denied).
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


SOCIAL_PLATFORMS = ("facebook", "instagram", "linkedin", "twitter", "youtube")


def _normalize_key(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v.strip().lower().replace(" ", "-").replace("_", "-")


class FindingModel(BaseModel):
    """Base for immutable automated findings."""
    model_config = ConfigDict(frozen=True, extra="ignore")


class OverrideModel(BaseModel):
    """Base for reviewer-entered data."""
    model_config = ConfigDict(extra="ignore")


class ViolationFinding(FindingModel):
    """A detected or reviewer-entered issue, before classification."""
    id: Optional[str] = Field(None, description="Stable id assigned by the producer")
    description: str
    severity: str = "medium"
    category: Optional[str] = None
    article: Optional[str] = None
    recommendation: Optional[str] = None

    @field_validator('severity', mode='before')
    @classmethod
    def normalize_severity(cls, v: Optional[str]) -> str:
        """Lowercase the severity; unknown values are kept and rejected later."""
        if v is None:
            return ""
        return str(v).strip().lower()


# ============================================
# AUTOMATED FINDINGS
# ============================================

class KeywordFinding(FindingModel):
    keyword: str
    found: bool = False
    position: Optional[int] = None


class SearchFindings(FindingModel):
    score: Optional[float] = None
    title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: List[KeywordFinding] = Field(default_factory=list)


class PerformanceFindings(FindingModel):
    score: Optional[float] = None
    load_time_ms: Optional[float] = None
    largest_contentful_paint_ms: Optional[float] = None


class MobileFindings(FindingModel):
    score: Optional[float] = None


class LocalFindings(FindingModel):
    score: Optional[float] = None


class ContentFindings(FindingModel):
    score: Optional[float] = None
    word_count: Optional[float] = None


class BacklinkFindings(FindingModel):
    score: Optional[float] = None
    total_backlinks: Optional[float] = None
    referring_domains: Optional[float] = None


class ImprintFindings(FindingModel):
    """Legal notice (Impressum) as detected on the website."""
    found: Optional[bool] = None
    score: Optional[float] = None
    found_elements: List[str] = Field(default_factory=list)
    missing_elements: List[str] = Field(default_factory=list)


class SocialPlatformFindings(FindingModel):
    found: bool = False
    followers: Optional[float] = None
    last_post: Optional[str] = None
    last_post_days: Optional[float] = None


class ReviewFindings(FindingModel):
    count: Optional[float] = None
    rating: Optional[float] = None


class WorkplacePlatformFindings(FindingModel):
    found: bool = False
    rating: Optional[float] = None
    reviews: Optional[float] = None


class WorkplaceFindings(FindingModel):
    kununu: Optional[WorkplacePlatformFindings] = None
    glassdoor: Optional[WorkplacePlatformFindings] = None


class AccessibilityFindings(FindingModel):
    violations: List[ViolationFinding] = Field(default_factory=list)
    passes: int = 0


class PrivacyFindings(FindingModel):
    violations: List[ViolationFinding] = Field(default_factory=list)


class SecurityHeaders(FindingModel):
    content_security_policy: bool = False
    x_frame_options: bool = False
    x_content_type_options: bool = False
    strict_transport_security: bool = False
    referrer_policy: bool = False


class SecurityFindings(FindingModel):
    has_ssl: Optional[bool] = None
    ssl_grade: Optional[str] = None
    headers: Optional[SecurityHeaders] = None
    safe_browsing_threats: List[str] = Field(default_factory=list)
    violations: List[ViolationFinding] = Field(default_factory=list)


class Competitor(FindingModel):
    name: str
    rating: Optional[float] = None
    review_count: Optional[float] = None
    distance_km: Optional[float] = None


class RawFindings(FindingModel):
    """Automated measurements for one analyzed business."""
    business_name: Optional[str] = None
    website_url: Optional[str] = None
    search: Optional[SearchFindings] = None
    performance: Optional[PerformanceFindings] = None
    mobile: Optional[MobileFindings] = None
    local: Optional[LocalFindings] = None
    content: Optional[ContentFindings] = None
    backlinks: Optional[BacklinkFindings] = None
    imprint: Optional[ImprintFindings] = None
    social: Dict[str, SocialPlatformFindings] = Field(default_factory=dict)
    reviews: Optional[ReviewFindings] = None
    workplace: Optional[WorkplaceFindings] = None
    accessibility: Optional[AccessibilityFindings] = None
    privacy: Optional[PrivacyFindings] = None
    security: Optional[SecurityFindings] = None
    competitors: List[Competitor] = Field(default_factory=list)

    @field_validator('social', mode='before')
    @classmethod
    def normalize_platforms(cls, v):
        """Lowercase platform keys."""
        if isinstance(v, dict):
            return {str(k).strip().lower(): p for k, p in v.items()}
        return v


# ============================================
# MANUAL OVERRIDES
# ============================================

class RatingOverride(OverrideModel):
    """Reviewer rating (0-100) for topics without a checklist."""
    rating: Optional[float] = None


class SearchOverride(RatingOverride):
    pass


class PerformanceOverride(RatingOverride):
    pass


class MobileOverride(RatingOverride):
    pass


class DirectoryListing(OverrideModel):
    name: str
    listed: bool = False
    complete: bool = False
    verified: bool = False


class KeywordRanking(OverrideModel):
    keyword: str
    position: Optional[int] = None


class LocalPresenceOverride(OverrideModel):
    directory_listings: List[DirectoryListing] = Field(default_factory=list)
    business_listing_claimed: Optional[bool] = None
    business_listing_verified: Optional[bool] = None
    nap_consistency: Optional[float] = Field(None, description="0-100 rating")
    keyword_rankings: List[KeywordRanking] = Field(default_factory=list)
    has_local_schema: Optional[bool] = None
    address_on_website: Optional[bool] = None
    maps_embedded: Optional[bool] = None


class ContentOverride(OverrideModel):
    text_quality: Optional[float] = None
    relevance: Optional[float] = None
    expertise: Optional[float] = None
    freshness: Optional[float] = None


class BacklinkOverride(OverrideModel):
    quality_score: Optional[float] = None
    domain_authority: Optional[float] = None
    local_relevance: Optional[float] = None


class ImprintOverride(OverrideModel):
    """Reviewer check of the mandatory legal-notice details."""
    found: Optional[bool] = None
    provider_name: Optional[bool] = None
    address: Optional[bool] = None
    contact: Optional[bool] = None
    representative: Optional[bool] = None
    register_entry: Optional[bool] = None
    vat_id: Optional[bool] = None
    rating: Optional[float] = None


class ViolationControls(OverrideModel):
    """Reviewer controls shared by topics that carry violations."""
    suppressed_violation_ids: List[str] = Field(default_factory=list)
    custom_violations: List[ViolationFinding] = Field(default_factory=list)


class AccessibilityOverride(ViolationControls):
    keyboard_navigation: Optional[bool] = None
    screen_reader_compatible: Optional[bool] = None
    color_contrast: Optional[bool] = None
    alt_texts_present: Optional[bool] = None
    focus_visibility: Optional[bool] = None
    text_scaling: Optional[bool] = None
    overall_score: Optional[float] = None


class TrackingScript(OverrideModel):
    name: str
    has_consent: Optional[bool] = None


class ExternalService(OverrideModel):
    name: str
    third_country: bool = False
    has_dpa: Optional[bool] = None


class DataPrivacyOverride(ViolationControls):
    has_ssl: Optional[bool] = None
    cookie_policy: Optional[bool] = None
    privacy_policy: Optional[bool] = None
    gdpr_compliant: Optional[bool] = None
    cookie_consent: Optional[bool] = None
    data_processing_agreement: Optional[bool] = None
    data_subject_rights: Optional[bool] = None
    processing_register: Optional[bool] = None
    data_protection_officer: Optional[bool] = None
    third_country_transfer: Optional[bool] = None
    third_country_documented: Optional[bool] = None
    tracking_scripts: List[TrackingScript] = Field(default_factory=list)
    external_services: List[ExternalService] = Field(default_factory=list)
    overall_score: Optional[float] = None


class TechnicalSecurityOverride(ViolationControls):
    has_ssl: Optional[bool] = None
    has_hsts: Optional[bool] = None
    safe_browsing_clean: Optional[bool] = None
    rating: Optional[float] = None


class SocialPlatformOverride(OverrideModel):
    url: Optional[str] = None
    followers: Optional[float] = None
    last_post: Optional[str] = None
    last_post_days: Optional[float] = None

    @property
    def is_present(self) -> bool:
        return bool(self.url and self.url.strip())


class SocialOverride(OverrideModel):
    platforms: Dict[str, SocialPlatformOverride] = Field(default_factory=dict)

    @field_validator('platforms', mode='before')
    @classmethod
    def normalize_platforms(cls, v):
        if isinstance(v, dict):
            return {str(k).strip().lower(): p for k, p in v.items()}
        return v


class WorkplacePlatformOverride(OverrideModel):
    found: Optional[bool] = None
    rating: Optional[float] = None
    reviews: Optional[float] = None


class WorkplaceOverride(OverrideModel):
    kununu: Optional[WorkplacePlatformOverride] = None
    glassdoor: Optional[WorkplacePlatformOverride] = None
    disable_auto_kununu: bool = False
    disable_auto_glassdoor: bool = False


class EmployeeCertification(OverrideModel):
    name: str
    employees_certified: int = 0


class StaffOverride(OverrideModel):
    total_employees: Optional[float] = None
    masters: Optional[float] = None
    skilled_workers: Optional[float] = None
    office_workers: Optional[float] = None
    apprentices: Optional[float] = None
    unskilled_workers: Optional[float] = None
    certifications: Dict[str, Optional[bool]] = Field(default_factory=dict)
    industry_specific: List[str] = Field(default_factory=list)
    annual_training_hours_per_employee: Optional[float] = None
    employee_certifications: List[EmployeeCertification] = Field(default_factory=list)


class QuoteResponseOverride(OverrideModel):
    response_time: Optional[str] = Field(
        None,
        description="1-hour, 2-4-hours, 4-8-hours, 1-day, 2-3-days, over-3-days, "
                    "no-response-2-days or no-response",
    )
    phone: bool = False
    email: bool = False
    contact_form: bool = False
    whatsapp: bool = False
    messenger: bool = False
    response_quality: Optional[str] = Field(None, description="excellent, good, average or poor")

    @field_validator('response_time', 'response_quality', mode='before')
    @classmethod
    def normalize_choice(cls, v: Optional[str]) -> Optional[str]:
        """Lowercase and dash-separate select values; empty means unset."""
        if v is None or str(v).strip() == '':
            return None
        return _normalize_key(str(v))


class RateTiers(OverrideModel):
    master: Optional[float] = None
    skilled: Optional[float] = None
    apprentice: Optional[float] = None
    helper: Optional[float] = None


class HourlyRateOverride(OverrideModel):
    own_rates: RateTiers = Field(default_factory=RateTiers)
    regional_rates: RateTiers = Field(default_factory=RateTiers)


class CorporateIdentityOverride(OverrideModel):
    uniform_logo: Optional[bool] = None
    uniform_work_clothing: Optional[bool] = None
    uniform_vehicle_branding: Optional[bool] = None
    uniform_color_scheme: Optional[bool] = None


class ManualOverrides(OverrideModel):
    """All reviewer input for one analysis, one optional record per topic."""
    search: Optional[SearchOverride] = None
    local_presence: Optional[LocalPresenceOverride] = None
    content: Optional[ContentOverride] = None
    backlinks: Optional[BacklinkOverride] = None
    imprint: Optional[ImprintOverride] = None
    accessibility: Optional[AccessibilityOverride] = None
    data_privacy: Optional[DataPrivacyOverride] = None
    technical_security: Optional[TechnicalSecurityOverride] = None
    performance: Optional[PerformanceOverride] = None
    mobile: Optional[MobileOverride] = None
    social_media: Optional[SocialOverride] = None
    workplace: Optional[WorkplaceOverride] = None
    staff_qualification: Optional[StaffOverride] = None
    quote_response: Optional[QuoteResponseOverride] = None
    hourly_rate: Optional[HourlyRateOverride] = None
    corporate_identity: Optional[CorporateIdentityOverride] = None
