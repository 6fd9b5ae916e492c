import pytest
import yaml

from crawler.pipeline import run_crawl
from crawler.sources.data import SnapshotWriteError
from crawler.sources.fetcher import SourceFetcher

from conftest import FakeResponse, FakeSession


def fetcher_for(settings, routes) -> tuple[SourceFetcher, FakeSession]:
    session = FakeSession(routes)
    fetcher = SourceFetcher(
        user_agent=settings.user_agent,
        timeout=settings.request_timeout,
        capture_path=settings.raw_capture_path,
        session=session,
    )
    return fetcher, session


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


def read_yaml(path):
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def seed_previous_run(settings):
    write_yaml(settings.snapshot_path, {
        "generated_at": "2024-01-01T00:00:00Z",
        "profile": {"name": "Trinh Dong", "bio": "Previous bio", "research_interests": ["Stats"]},
        "metrics": {"citations": 120, "h_index": "8", "i10_index": "5"},
        "work_history": [{"role": "Research Associate", "organization": "Newcastle University",
                          "start_date": "2022-09", "end_date": ""}],
        "qualifications": [],
        "sources": [],
    })
    write_yaml(settings.publications_path, {
        "generated_at": "2024-01-01T00:00:00Z",
        "items": [
            {"title": "Deep Learning, for NLP!!", "authors": "T Dong, A Smith", "venue": "",
             "year": "2021", "citations": "40", "url": "", "sources": ["Scholar"]},
            {"title": "Older scholar paper", "authors": "T Dong", "venue": "", "year": 2018,
             "citations": "3", "url": "", "source": "Scholar"},
        ],
    })


def test_full_run_writes_both_snapshots(settings, all_sources_up):
    fetcher, _ = fetcher_for(settings, all_sources_up)

    report = run_crawl(settings, fetcher=fetcher)

    assert report.unavailable == []
    crawl = read_yaml(settings.snapshot_path)
    pubs = read_yaml(settings.publications_path)

    assert crawl["generated_at"] == pubs["generated_at"]
    assert crawl["profile"]["name"] == "Trinh Dong"
    assert crawl["profile"]["role"] == "Research Associate in Biostatistics"
    assert crawl["profile"]["affiliation"] == "Newcastle University"
    assert crawl["metrics"] == {"citations": "120", "h_index": "8", "i10_index": "5"}
    assert [w["organization"] for w in crawl["work_history"]] == [
        "Newcastle University",
        "Oxford University Clinical Research Unit",
    ]
    assert crawl["sources"] == [
        settings.staff_url,
        settings.scholar_url,
        settings.orcid_works_url,
        settings.orcid_employment_url,
    ]

    titles = [item["title"] for item in pubs["items"]]
    assert titles == ["Deep Learning, for NLP!!", "A Bayesian adaptive design", "Registry only paper"]
    first, second = pubs["items"][0], pubs["items"][1]
    assert first["sources"] == ["Scholar", "orcid"]
    assert first["citations"] == "42"
    assert second["venue"] == "Trials"
    assert second["year"] == "2020"

    for name in ("ncl", "scholar", "orcid_works", "orcid_employment"):
        assert settings.raw_capture_path(name).exists()


def test_skipped_scholar_keeps_previous_data(settings, all_sources_up):
    seed_previous_run(settings)
    fetcher, session = fetcher_for(settings, all_sources_up)

    report = run_crawl(settings, fetcher=fetcher, skip_scholar=True)

    assert settings.scholar_url not in [call["url"] for call in session.calls]
    assert "scholar" in report.unavailable
    assert any("Skipping Scholar" in w for w in report.warnings)

    crawl = read_yaml(settings.snapshot_path)
    assert crawl["metrics"] == {"citations": "120", "h_index": "8", "i10_index": "5"}
    # Scholar is down, so the name comes from the staff page
    assert crawl["profile"]["name"] == "Dr Trinh Dong"

    items = read_yaml(settings.publications_path)["items"]
    titles = [item["title"] for item in items]
    assert titles == [
        "Deep Learning, for NLP!!",
        "Older scholar paper",
        "A Bayesian adaptive design",
        "Registry only paper",
    ]
    assert items[0]["citations"] == "40"
    assert items[0]["venue"] == "Journal of Examples"
    assert items[0]["sources"] == ["Scholar", "orcid"]
    assert items[1]["year"] == "2018"
    assert items[1]["sources"] == ["Scholar"]


def test_all_sources_down_still_writes_snapshot(settings):
    seed_previous_run(settings)
    write_yaml(settings.profile_path, {"name": "Local Name", "email": "local@example.org", "role": "Statistician"})
    fetcher, _ = fetcher_for(settings, {})

    report = run_crawl(settings, fetcher=fetcher)

    assert sorted(report.unavailable) == ["ncl", "orcid_employment", "orcid_works", "scholar"]
    crawl = read_yaml(settings.snapshot_path)
    assert crawl["profile"]["name"] == "Local Name"
    assert crawl["profile"]["email"] == "local@example.org"
    assert crawl["profile"]["role"] == "Statistician"
    assert crawl["profile"]["bio"] == "Previous bio"
    assert crawl["profile"]["research_interests"] == ["Stats"]
    assert crawl["profile"]["photo_url"] == settings.staff_photo_url
    assert crawl["metrics"] == {"citations": "120", "h_index": "8", "i10_index": "5"}
    assert crawl["work_history"][0]["role"] == "Research Associate"

    items = read_yaml(settings.publications_path)["items"]
    assert [item["title"] for item in items] == ["Deep Learning, for NLP!!", "Older scholar paper"]

    capture = read_yaml(settings.raw_capture_path("ncl"))
    assert capture["url"] == settings.staff_url
    assert "error" in capture


def test_first_run_with_everything_down_writes_empty_sections(settings):
    fetcher, _ = fetcher_for(settings, {
        settings.scholar_url: FakeResponse("blocked", status_code=429),
    })

    report = run_crawl(settings, fetcher=fetcher)

    crawl = read_yaml(settings.snapshot_path)
    assert crawl["metrics"] == {"citations": "", "h_index": "", "i10_index": ""}
    assert crawl["work_history"] == []
    assert read_yaml(settings.publications_path)["items"] == []
    assert any("possible blocking" in w for w in report.warnings)
    assert any("No publications" in w for w in report.warnings)


def test_overrides_and_sections_are_applied_last(settings, all_sources_up):
    write_yaml(settings.sections_extra_path, {
        "sections": [
            {"id": "other", "items": ["ignored"]},
            {"id": "qualification", "items": ["PhD, University of Oxford"]},
        ]
    })
    write_yaml(settings.overrides_path, {
        "profile": {"bio": "custom bio", "research_interests": [], "photo_alt": "Portrait"},
        "work_history": [{"role": "Manual role", "organization": "Manual org"}],
    })
    fetcher, _ = fetcher_for(settings, all_sources_up)

    run_crawl(settings, fetcher=fetcher)

    crawl = read_yaml(settings.snapshot_path)
    assert crawl["profile"]["bio"] == "custom bio"
    assert crawl["profile"]["photo_alt"] == "Portrait"
    assert crawl["profile"]["research_interests"] == [
        "Bayesian statistics", "Clinical trials", "Infectious diseases",
    ]
    assert crawl["work_history"] == [
        {"role": "Manual role", "organization": "Manual org", "start_date": "", "end_date": ""}
    ]
    assert crawl["qualifications"] == ["PhD, University of Oxford"]


def test_rerun_is_stable(settings, all_sources_up):
    fetcher, _ = fetcher_for(settings, all_sources_up)
    run_crawl(settings, fetcher=fetcher)
    first = read_yaml(settings.publications_path)["items"]

    fetcher, _ = fetcher_for(settings, all_sources_up)
    run_crawl(settings, fetcher=fetcher)
    second = read_yaml(settings.publications_path)["items"]

    assert first == second


def test_dry_run_writes_nothing(settings, all_sources_up):
    fetcher, _ = fetcher_for(settings, all_sources_up)
    report = run_crawl(settings, fetcher=fetcher, write=False)
    assert report.snapshot.profile.name == "Trinh Dong"
    assert not settings.snapshot_path.exists()


def test_write_failure_is_fatal(settings, all_sources_up):
    settings.crawl_dir.mkdir(parents=True)
    settings.snapshot_path.mkdir()  # a directory where the file should go
    fetcher, _ = fetcher_for(settings, all_sources_up)

    with pytest.raises(SnapshotWriteError):
        run_crawl(settings, fetcher=fetcher)


def test_unreadable_local_documents_do_not_stop_the_run(settings, all_sources_up):
    settings.crawl_dir.mkdir(parents=True)
    settings.snapshot_path.write_bytes(b"profile:\n  name: \xff\xfe bad\n")
    settings.profile_path.write_bytes(b"name: \xe9t\xe9\n")
    fetcher, _ = fetcher_for(settings, all_sources_up)

    run_crawl(settings, fetcher=fetcher)

    crawl = read_yaml(settings.snapshot_path)
    assert crawl["profile"]["name"] == "Trinh Dong"
    assert len(read_yaml(settings.publications_path)["items"]) == 3


def test_scholar_bot_check_page_keeps_previous_publications(settings, all_sources_up):
    seed_previous_run(settings)
    all_sources_up[settings.scholar_url] = FakeResponse(
        "<html><body><h1>Please show you're not a robot</h1></body></html>"
    )
    fetcher, _ = fetcher_for(settings, all_sources_up)

    report = run_crawl(settings, fetcher=fetcher)

    items = read_yaml(settings.publications_path)["items"]
    assert [item["title"] for item in items] == [
        "Deep Learning, for NLP!!",
        "Older scholar paper",
        "A Bayesian adaptive design",
        "Registry only paper",
    ]
    assert items[0]["citations"] == "40"
    assert read_yaml(settings.snapshot_path)["metrics"]["citations"] == "120"
    assert any("Scholar crawl unavailable" in w for w in report.warnings)


def test_orcid_works_outage_keeps_registry_only_publications(settings, all_sources_up):
    fetcher, _ = fetcher_for(settings, all_sources_up)
    run_crawl(settings, fetcher=fetcher)

    del all_sources_up[settings.orcid_works_url]
    fetcher, _ = fetcher_for(settings, all_sources_up)
    report = run_crawl(settings, fetcher=fetcher)

    items = read_yaml(settings.publications_path)["items"]
    assert [item["title"] for item in items] == [
        "Deep Learning, for NLP!!",
        "A Bayesian adaptive design",
        "Registry only paper",
    ]
    assert items[2]["venue"] == "BMJ Open"
    assert items[2]["sources"] == ["orcid"]
    assert any("ORCID works unavailable" in w for w in report.warnings)
