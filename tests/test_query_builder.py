from app.schemas.location import RecommendRequest
from app.services.query_builder import (
    RangeBoost,
    SortField,
    TermFilter,
    build_recommend_query,
    effective_limit,
)


def test_limit_defaults_to_20_when_zero_or_unset():
    assert build_recommend_query(RecommendRequest(region="Moscow", business_type="cafe")).size == 20
    assert build_recommend_query(
        RecommendRequest(region="Moscow", business_type="cafe", limit=0)
    ).size == 20
    assert effective_limit(None) == 20
    assert effective_limit(-3) == 20


def test_explicit_limit_is_kept():
    q = build_recommend_query(RecommendRequest(region="Moscow", business_type="cafe", limit=5))
    assert q.size == 5


def test_three_filters_bind_their_fields():
    q = build_recommend_query(
        RecommendRequest(region="Moscow", city="Zelenograd", business_type="cafe")
    )
    assert q.filters == [
        TermFilter("region", "Moscow"),
        TermFilter("city", "Zelenograd"),
        TermFilter("business_types_suitable", "cafe"),
    ]


def test_empty_city_omits_the_clause():
    q = build_recommend_query(RecommendRequest(region="Moscow", business_type="cafe"))
    assert [f.field for f in q.filters] == ["region", "business_types_suitable"]
    must = q.to_body()["query"]["bool"]["must"]
    assert all("city" not in clause["term"] for clause in must)


def test_empty_request_has_no_filters_but_keeps_boosts():
    q = build_recommend_query(RecommendRequest())
    assert q.filters == []
    assert q.boosts == [
        RangeBoost("traffic_score", boost=2.0, gte=7.0),
        RangeBoost("competition_density", boost=1.5, lte=3.0),
    ]


def test_sort_tie_breaks():
    q = build_recommend_query(RecommendRequest(region="Moscow", business_type="cafe"))
    assert q.sort == [
        SortField("_score", "desc"),
        SortField("traffic_score", "desc"),
        SortField("competition_density", "asc"),
    ]


def test_wire_body():
    body = build_recommend_query(
        RecommendRequest(region="Moscow", city="Moscow", business_type="cafe", limit=5)
    ).to_body()
    assert body == {
        "query": {
            "bool": {
                "must": [
                    {"term": {"region": "Moscow"}},
                    {"term": {"city": "Moscow"}},
                    {"term": {"business_types_suitable": "cafe"}},
                ],
                "should": [
                    {"range": {"traffic_score": {"gte": 7.0, "boost": 2.0}}},
                    {"range": {"competition_density": {"lte": 3.0, "boost": 1.5}}},
                ],
                "minimum_should_match": 0,
            }
        },
        "sort": [
            {"_score": {"order": "desc"}},
            {"traffic_score": {"order": "desc"}},
            {"competition_density": {"order": "asc"}},
        ],
    }
