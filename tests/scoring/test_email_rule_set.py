import pytest

from veritas_check.domain.features import extract_email_features
from veritas_check.scoring.email_rules import EMAIL_RULES


def _rules(scorer, address: str) -> list[str]:
    return [item.rule for item in scorer.score_email(extract_email_features(address)).indicators]


def test_rule_table_order_and_size():
    names = [rule.name for rule in EMAIL_RULES]
    assert len(names) == 33
    assert names[:3] == ["disposable_domain", "free_provider_impersonation", "lookalike_domain"]
    assert names[-1] == "vowelless_name"


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("someone@tempmail.com", "disposable_domain"),
        ("amazon.support@gmail.com", "free_provider_impersonation"),
        ("admin@paypall.com", "lookalike_domain"),
        ("admin@paypall.com", "fuzzy_brand_match"),
        ("alert@netflix-account.net", "combo_domain"),
        ("alert@netflix-account.net", "action_word_domain"),
        ("help@amszon.com", "keyboard_proximity"),
        ("help@g00gle.com", "character_substitution"),
        ("admin@\u0430pple.com", "homoglyph_script"),
        ("contact@paypaI.com", "digit_letter_lookalike"),
        ("contact@paypaI.com", "mixed_case_domain"),
        ("user1234567@example.com", "long_digit_run"),
        ("aaaaaa@example.com", "repeating_characters"),
        ("hello@shop.xyz", "suspicious_tld"),
        ("noreply@bit.ly", "shortener_domain"),
        ("a.b@x.y.z.example.com", "excessive_subdomains"),
        ("verify@amazon.com-update.info", "subdomain_confusion"),
        ("verify@amazon.com-update.info", "brand_in_subdomain"),
        ("billing@pay-pal.com", "hyphenated_brand"),
        ("a@example.com", "short_local_part"),
        ("info@example.com", "generic_local_part"),
        ("urgent.verify@mycompany.com", "professional_domain_mismatch"),
        ("john++promo@example.com", "alias_pattern"),
        ("john..doe@example.com", "consecutive_special_chars"),
        ("admin@xn--pple-43d.com", "punycode_domain"),
        ("admin@192.168.1.1", "ip_domain"),
        ("ticket-38472@example.com", "service_id_pattern"),
        ("sales@domain-forsale.com", "parked_domain"),
        ("x.y@a-b-c-d.com", "excessive_hyphens"),
        ("hello@bcdfgh.com", "vowelless_name"),
    ],
)
def test_rule_fires(scorer, address, expected):
    assert expected in _rules(scorer, address)


def test_long_local_part(scorer):
    assert "long_local_part" in _rules(scorer, "ab" * 33 + "@example.com")


def test_official_brand_domain_is_not_flagged_as_typosquat(scorer):
    result = scorer.score_email(extract_email_features("support@amazon.com"))
    rules = [item.rule for item in result.indicators]
    for rule in ("lookalike_domain", "fuzzy_brand_match", "keyboard_proximity", "combo_domain"):
        assert rule not in rules
    assert result.risk_band == "safe"


def test_plain_corporate_address_has_no_indicators(scorer):
    result = scorer.score_email(extract_email_features("john.doe@company.com"))
    assert result.indicators == []
    assert result.normalized_score == 0
    assert result.reason == "Email appears legitimate"


def test_capped_rules_emit_one_indicator(scorer):
    rules = _rules(scorer, "help@amszon.com")
    assert rules.count("fuzzy_brand_match") == 1
    assert rules.count("keyboard_proximity") == 1


def test_keyword_weight_is_capped(scorer):
    result = scorer.score_email(extract_email_features("urgent-verify-confirm-alert-update@example.com"))
    keyword = next(item for item in result.indicators if item.rule == "suspicious_keywords")
    assert keyword.weight == 40


def test_bec_patterns_carry_their_own_weights(scorer):
    result = scorer.score_email(extract_email_features("ceo.payroll.wire@example.com"))
    weights = [item.weight for item in result.indicators if item.rule == "business_email_compromise"]
    assert weights == [25, 20, 25]


def test_indicators_follow_table_order(scorer):
    order = {rule.name: index for index, rule in enumerate(EMAIL_RULES)}
    rules = _rules(scorer, "verify@amazon.com-update.info")
    assert len(rules) > 2
    assert [order[name] for name in rules] == sorted(order[name] for name in rules)
