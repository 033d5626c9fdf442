from decimal import Decimal

from brave_backend.catalog import service as catalog_service

def test_course_filters_active_by_default():
    assert catalog_service.course_filters() == {"active": True}

def test_course_filters_all_flag_and_id():
    assert catalog_service.course_filters(course_id="c1", include_all="true") == {"id": "c1"}
    assert catalog_service.course_filters(course_id="c1") == {"active": True, "id": "c1"}

def test_list_courses_uses_filters(fake_store):
    fake_store.courses.extend([
        {"id": "c1", "active": True, "offer_price": 500},
        {"id": "c2", "active": False, "offer_price": 700},
    ])
    assert [c["id"] for c in catalog_service.list_courses()] == ["c1"]
    assert [c["id"] for c in catalog_service.list_courses(include_all="1")] == ["c1", "c2"]
    assert [c["id"] for c in catalog_service.list_courses(course_id="c2", include_all="1")] == ["c2"]

def test_list_schedule_optional_filters(fake_store):
    fake_store.schedule.extend([
        {"course": "c1", "date": "2024-01-10"},
        {"course": "c1", "date": "2024-01-17"},
        {"course": "c2", "date": "2024-01-10"},
    ])
    assert len(catalog_service.list_schedule()) == 3
    assert fake_store.last_filters == {}
    assert len(catalog_service.list_schedule(course="c1")) == 2
    assert catalog_service.list_schedule(course="c1", date="2024-01-17") == [{"course": "c1", "date": "2024-01-17"}]

def test_offer_price_is_exact_decimal():
    assert catalog_service.offer_price({"offer_price": 500}) == Decimal("500")
    assert catalog_service.offer_price({"offer_price": 499.99}) == Decimal("499.99")
    assert catalog_service.offer_price({"offer_price": "1200.50"}) == Decimal("1200.50")
    assert catalog_service.offer_price({"offer_price": None}) is None
    assert catalog_service.offer_price({"offer_price": "abc"}) is None
    assert catalog_service.offer_price({}) is None

def test_offer_price_non_finite_is_none():
    # numeric Postgres accepte NaN
    assert catalog_service.offer_price({"offer_price": "NaN"}) is None
    assert catalog_service.offer_price({"offer_price": "Infinity"}) is None
    assert catalog_service.offer_price({"offer_price": float("nan")}) is None
