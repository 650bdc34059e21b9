from claims_service import (
    CATEGORY_KEYS,
    beneficiary_breakdown,
    claim_amount_breakdown,
    count_distinct_beneficiaries_by_type,
    deduce_users_from_claims,
    filter_claims_by_category,
    find_claim,
    percent_funded,
    sum_requested_by_type,
)
from schemas import ClaimType


def _claim(claim_type, amount=None, beneficiary=None, **extra):
    claim = {"type": claim_type, **extra}
    if amount is not None:
        claim["amountRequested"] = amount
    if beneficiary is not None:
        claim["beneficiary"] = beneficiary
    return claim


def test_amount_breakdown_by_category():
    # Arrange
    claims = [
        _claim("Medical Claim", 5000),
        _claim("Medical Claim", 3000),
        _claim("Retirement Farewell", 1000),
    ]

    # Act
    breakdown = claim_amount_breakdown(claims)

    # Assert
    assert breakdown["medical"] == 8000
    assert breakdown["retirement"] == 1000
    assert breakdown["deathAfter"] == 0
    assert breakdown["deathDuring"] == 0
    assert breakdown["marriage"] == 0
    assert breakdown["total"] == 9000


def test_unknown_types_only_count_in_total():
    claims = [
        _claim("Medical Claim", 100),
        _claim("Education Support", 400),
        _claim(None, 50),
    ]

    breakdown = claim_amount_breakdown(claims)
    category_sum = sum(breakdown[key] for key in CATEGORY_KEYS)

    assert category_sum == 100
    assert breakdown["total"] == 550
    assert breakdown["total"] >= category_sum


def test_total_equals_category_sum_when_all_types_known():
    claims = [_claim(claim_type.value, 10 * (i + 1)) for i, claim_type in enumerate(ClaimType)]

    breakdown = claim_amount_breakdown(claims)

    assert breakdown["total"] == sum(breakdown[key] for key in CATEGORY_KEYS) == 150


def test_missing_or_bad_amounts_count_as_zero():
    claims = [_claim("Medical Claim"), _claim("Medical Claim", "500"), _claim("Medical Claim", 250)]

    assert sum_requested_by_type(claims, ClaimType.MEDICAL_CLAIM) == 250
    assert sum_requested_by_type(claims, "Medical Claim") == 250


def test_distinct_beneficiaries_share_id():
    claims = [
        _claim("Retirement Farewell", 100, {"_id": "b1"}),
        _claim("Retirement Farewell", 200, {"_id": "b1"}),
    ]

    assert count_distinct_beneficiaries_by_type(claims, "Retirement Farewell") == 1
    assert beneficiary_breakdown(claims)["retirement"] == 1


def test_distinct_beneficiaries_fall_back_to_ehrms_code_and_skip_missing():
    claims = [
        _claim("Medical Claim", 1, {"_id": "b1"}),
        _claim("Medical Claim", 1, {"ehrmsCode": "E-77"}),
        _claim("Medical Claim", 1, {"ehrmsCode": "E-77"}),
        _claim("Medical Claim", 1, {"personalDetails": {"fullName": "No Id"}}),
        _claim("Medical Claim", 1),
    ]

    count = count_distinct_beneficiaries_by_type(claims, ClaimType.MEDICAL_CLAIM)

    assert count == 2
    assert count <= len(claims)


def test_beneficiary_breakdown_keys():
    assert beneficiary_breakdown([]) == {
        "retirement": 0,
        "deathAfter": 0,
        "deathDuring": 0,
        "medical": 0,
        "marriage": 0,
    }


def test_percent_funded():
    assert percent_funded(2500, 10000) == 25
    assert percent_funded(1, 3) == 33
    assert percent_funded(1, 200) == 1  # 0.5 rounds up
    assert percent_funded(15000, 10000) == 100
    assert percent_funded(-10, 100) == 0


def test_percent_funded_zero_goal():
    assert percent_funded(500, 0) == 0
    assert percent_funded(500, None) == 0
    assert percent_funded(None, None) == 0


def test_filter_claims_by_category_keeps_approved_matches():
    claims = [
        _claim("Medical Claim", 1, status="Approved", _id="a"),
        _claim("Medical Claim", 1, status="PendingVerification", _id="b"),
        _claim("Retirement Farewell", 1, status="Approved", _id="c"),
    ]

    assert [c["_id"] for c in filter_claims_by_category(claims, "medical")] == ["a"]
    assert [c["_id"] for c in filter_claims_by_category(claims, None)] == ["a", "c"]
    assert [c["_id"] for c in filter_claims_by_category(claims, "Medical Claim", status=None)] == ["a", "b"]


def test_find_claim_by_either_id():
    claims = [{"_id": "x1"}, {"id": "y2"}]

    assert find_claim(claims, "y2") == {"id": "y2"}
    assert find_claim(claims, "x1") == {"_id": "x1"}
    assert find_claim(claims, "zz") is None


def test_deduce_users_from_claims():
    claims = [
        {"beneficiary": {"_id": "u1"}},
        {"beneficiary": {"userId": "u2"}},
        {"beneficiary": {"ehrmsCode": "E1"}},
        {"owner": "u1"},
        {"createdBy": "u3"},
        {},
    ]

    assert deduce_users_from_claims(claims) == [{"id": "u1"}, {"id": "u2"}, {"id": "E1"}, {"id": "u3"}]
