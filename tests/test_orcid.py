import json

from crawler.sources.orcid import dig, format_orcid_date, parse_employments, parse_works

from conftest import read_fixture


def test_dig_handles_nulls_and_lists():
    data = {"a": {"b": [{"c": 1}]}, "n": None}
    assert dig(data, "a", "b", 0, "c") == 1
    assert dig(data, "n", "value") is None
    assert dig(data, "a", "b", 5) is None
    assert dig(None, "x") is None


def test_format_orcid_date():
    assert format_orcid_date({"year": {"value": "2020"}, "month": {"value": "03"}, "day": None}) == "2020-03"
    assert format_orcid_date({"year": {"value": "2016"}, "month": {"value": "01"}, "day": {"value": "15"}}) == "2016-01-15"
    assert format_orcid_date(None) == ""
    assert format_orcid_date("2019") == "2019"


def test_parse_works():
    works = parse_works(json.loads(read_fixture("orcid_works.json")))
    titles = [w.title for w in works]
    assert titles == [
        "Deep learning for NLP",
        "Deep learning for NLP",
        "A Bayesian adaptive design",
        "Registry only paper",
        "",
    ]
    assert works[0].venue == "Journal of Examples"
    assert works[0].year == "2021"
    assert works[0].url == "https://doi.org/10.1000/dl-nlp"
    assert works[0].authors == ""
    assert works[0].citations == ""
    assert all(w.sources == ["orcid"] for w in works)


def test_parse_works_tolerates_unexpected_shapes():
    assert parse_works(None) == []
    assert parse_works({"group": None}) == []
    assert parse_works({"group": [{"work-summary": None}]}) == []


def test_parse_employments():
    history = parse_employments(json.loads(read_fixture("orcid_employments.json")))
    assert len(history) == 2
    assert history[0].role == "Research Associate"
    assert history[0].organization == "Newcastle University"
    assert history[0].start_date == "2022-09"
    assert history[0].end_date == ""
    assert history[1].role == ""
    assert history[1].start_date == "2016-01-15"
    assert history[1].end_date == "2022"


def test_parse_employments_with_flat_group_container():
    data = {
        "group": [
            {"employment-summary": [{"role-title": "Lecturer", "organization": {"name": "Uni"}}]},
        ]
    }
    history = parse_employments(data)
    assert [(h.role, h.organization) for h in history] == [("Lecturer", "Uni")]
