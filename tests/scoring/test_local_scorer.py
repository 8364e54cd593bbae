from veritas_check.domain.features import extract_email_features, extract_url_features
from veritas_check.scoring.engine import clamp_score, email_band, url_band


def test_clamp_score():
    assert clamp_score(0) == 0
    assert clamp_score(55) == 55
    assert clamp_score(250) == 100


def test_email_band_boundaries(reference):
    policy = reference.email
    assert email_band(0, policy) == "safe"
    assert email_band(34, policy) == "safe"
    assert email_band(35, policy) == "risky"
    assert email_band(64, policy) == "risky"
    assert email_band(65, policy) == "invalid"
    assert email_band(100, policy) == "invalid"


def test_url_band_boundaries(reference):
    policy = reference.url
    assert url_band(29, policy) == "safe"
    assert url_band(30, policy) == "suspicious"
    assert url_band(59, policy) == "suspicious"
    assert url_band(60, policy) == "dangerous"


def test_bands_are_monotonic(reference):
    order = {"safe": 0, "risky": 1, "suspicious": 1, "invalid": 2, "dangerous": 2}
    email_levels = [order[email_band(score, reference.email)] for score in range(101)]
    url_levels = [order[url_band(score, reference.url)] for score in range(101)]
    assert email_levels == sorted(email_levels)
    assert url_levels == sorted(url_levels)


def test_typosquat_with_service_id_is_at_least_risky(scorer):
    result = scorer.score_email(extract_email_features("support-id-7193@service.amason.com"))
    rules = {item.rule for item in result.indicators}
    assert {"lookalike_domain", "fuzzy_brand_match", "service_id_pattern"} <= rules
    assert result.normalized_score >= 55
    assert result.risk_band in {"risky", "invalid"}
    assert result.is_spam is True


def test_subdomain_confusion_url_is_dangerous(scorer):
    result = scorer.score_url(extract_url_features("https://paypal.com-verify.info/login"))
    rules = {item.rule for item in result.indicators}
    assert {"brand_embedded", "subdomain_confusion"} <= rules
    assert result.raw_score > 100
    assert result.normalized_score == 100
    assert result.risk_band == "dangerous"
    assert result.reason == f"Detected {len(result.indicators)} security concern(s)"


def test_ip_domain_is_invalid(scorer):
    result = scorer.score_email(extract_email_features("admin@192.168.1.1"))
    assert result.normalized_score == 100
    assert result.risk_band == "invalid"


def test_invalid_email_result(scorer):
    result = scorer.invalid_email_result("not-an-email")
    assert result.normalized_score == 100
    assert result.risk_band == "invalid"
    assert [item.rule for item in result.indicators] == ["invalid_format"]
    assert result.indicators[0].weight == 100


def test_scoring_is_deterministic(scorer):
    features = extract_email_features("ceo.payroll.wire@examp1e-billing.xyz")
    first = scorer.score_email(features)
    second = scorer.score_email(features)
    assert first == second
    assert 0 <= first.normalized_score <= 100
