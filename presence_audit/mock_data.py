"""
Sample findings for the test endpoint.
Returns deterministic raw findings without running a crawler.
"""
from .models import RawFindings

SSL_GRADES = ("A+", "A", "B", "C")
IMPRINT_ELEMENTS = (
    "Geschäftsführer/Inhaber",
    "Handelsregister",
    "USt-IdNr.",
    "Kontaktdaten",
    "Firmenanschrift",
)


def generate_mock_findings(business_name: str) -> RawFindings:
    """
    Generate deterministic sample findings for testing.
    Uses the business name for consistent but varied values.
    """
    # Create deterministic seed from business name
    seed = sum(ord(c) for c in business_name) % 100

    social = {
        "facebook": {
            "found": True,
            "followers": 80 + seed * 12,
            "last_post": "heute" if seed % 3 == 0 else f"vor {1 + seed % 20} Tagen",
        },
        "instagram": {
            "found": seed % 2 == 0,
            "followers": 40 + seed * 25,
            "last_post": f"vor {1 + seed % 4} Wochen",
        },
    }
    if seed > 60:
        social["linkedin"] = {"found": True, "followers": 20 + seed, "last_post": "1 Monat"}

    accessibility_violations = [
        {"description": "Bilder ohne Alternativtext", "severity": "serious"},
        {"description": "Unzureichender Farbkontrast im Footer", "severity": "moderate"},
    ][: seed % 3]

    # three to five of the listed elements
    found_count = 3 + seed % 3

    privacy_violations = []
    if seed % 4 == 0:
        privacy_violations.append(
            {"description": "Kein Cookie-Banner vor dem Setzen von Tracking-Cookies", "severity": "high",
             "article": "Art. 6 DSGVO"}
        )

    return RawFindings.model_validate({
        "business_name": business_name,
        "website_url": f"https://www.{''.join(c for c in business_name.lower() if c.isalnum()) or 'example'}.de",
        "search": {
            "score": 45 + (seed % 40),
            "title": f"{business_name} - Ihr Fachbetrieb",
            "keywords": [
                {"keyword": "meisterbetrieb", "found": seed % 2 == 0},
                {"keyword": "notdienst", "found": seed % 3 == 0},
                {"keyword": "angebot", "found": True},
            ],
        },
        "performance": {"score": 50 + (seed % 45), "load_time_ms": 1200 + seed * 30},
        "mobile": {"score": 55 + (seed % 40)},
        "local": {"score": 40 + (seed % 50)},
        "content": {"score": 50 + (seed % 35), "word_count": 300 + seed * 10},
        "backlinks": {"total_backlinks": seed * 3, "referring_domains": seed // 2},
        "imprint": {
            "found": True,
            "found_elements": list(IMPRINT_ELEMENTS[:found_count]),
            "missing_elements": list(IMPRINT_ELEMENTS[found_count:]),
        },
        "social": social,
        "reviews": {"count": seed % 60, "rating": round(3.5 + (seed % 15) / 10, 1)},
        "workplace": {
            "kununu": {"found": seed % 2 == 1, "rating": round(3.0 + (seed % 20) / 10, 1), "reviews": seed % 30},
        },
        "accessibility": {"violations": accessibility_violations, "passes": 20 + seed % 10},
        "privacy": {"violations": privacy_violations},
        "security": {
            "has_ssl": seed % 10 != 0,
            "ssl_grade": SSL_GRADES[seed % len(SSL_GRADES)],
            "headers": {
                "content_security_policy": seed % 2 == 0,
                "x_frame_options": True,
                "x_content_type_options": seed % 3 != 0,
                "strict_transport_security": seed % 5 != 0,
                "referrer_policy": seed % 4 == 0,
            },
        },
        "competitors": [
            {"name": "Muster Handwerk GmbH", "rating": 4.4, "review_count": 38, "distance_km": 3.2},
            {"name": "Beispiel & Söhne", "rating": 4.1, "review_count": 12, "distance_km": 7.8},
        ],
    })
