from models.search import PersonProfile, SearchResult, SearchSource
from tools.search.profile_extractor import (
    ProfileExtractor,
    ProfileRule,
    extract_bio,
    extract_skills,
    is_twitter,
)


def result(title="", url="https://example.org", snippet=""):
    return SearchResult(title=title, url=url, snippet=snippet, source=SearchSource.DUCKDUCKGO)


def test_linkedin_result_yields_name_title_and_link():
    profile = ProfileExtractor().extract(
        [
            result(
                title="Jane Doe - Senior Engineer - Acme | LinkedIn",
                url="https://www.linkedin.com/in/janedoe",
                snippet="Senior Engineer at Acme • San Francisco Bay Area",
            )
        ]
    )

    assert profile.name == "Jane Doe"
    assert profile.title == "Senior Engineer at Acme"
    assert profile.links.linkedin == "https://www.linkedin.com/in/janedoe"
    assert profile.company is None


def test_linkedin_headline_before_bullet():
    profile = ProfileExtractor().extract(
        [
            result(
                title="Jane Doe - Senior Engineer",
                url="https://linkedin.com/in/jane-doe",
                snippet="Senior Engineer • Acme Corp",
            )
        ]
    )

    assert profile.name == "Jane Doe"
    assert profile.title == "Senior Engineer"


def test_first_matching_result_wins_for_every_field():
    profile = ProfileExtractor().extract(
        [
            result(title="Jane Doe - Engineer", url="https://linkedin.com/in/jane"),
            result(title="Someone Else - CEO", url="https://linkedin.com/in/other"),
            result(url="https://twitter.com/jane"),
            result(url="https://x.com/other"),
        ]
    )

    assert profile.name == "Jane Doe"
    assert profile.links.linkedin == "https://linkedin.com/in/jane"
    assert profile.links.twitter == "https://twitter.com/jane"


def test_domain_checks_use_the_host():
    assert is_twitter(result(url="https://x.com/jane"))
    assert is_twitter(result(url="https://mobile.twitter.com/jane"))
    assert not is_twitter(result(url="https://fedex.com/track"))
    assert not is_twitter(result(url="https://example.org/?ref=twitter.com"))


def test_personal_website_detection():
    profile = ProfileExtractor().extract(
        [
            result(title="Jane's Portfolio", url="https://janedoe.dev"),
            result(title="Blog", url="https://other.dev", snippet="My personal website"),
        ]
    )
    assert profile.links.website == "https://janedoe.dev"


def test_social_urls_are_not_personal_websites():
    profile = ProfileExtractor().extract(
        [result(title="Personal page", url="https://www.linkedin.com/in/jane")]
    )
    assert profile.links.website is None


def test_skills_are_split_and_capped():
    skills = extract_skills("Skills: Python, Go & Rust | SQL, Kubernetes, Terraform. More text")
    assert skills == ["Python", "Go", "Rust", "SQL", "Kubernetes"]


def test_skills_absent_when_no_marker():
    assert extract_skills("Works on distributed systems") is None


def test_bio_threshold_and_truncation():
    assert extract_bio("short snippet") is None
    assert extract_bio("x" * 50) is None
    assert extract_bio("y" * 51) == "y" * 51
    assert extract_bio("z" * 250) == "z" * 200 + "..."


def test_public_email_is_collected():
    profile = ProfileExtractor().extract(
        [result(snippet="Reach me at jane.doe@example.com for talks")]
    )
    assert profile.links.email == "jane.doe@example.com"


def test_no_signals_yield_empty_profile():
    profile = ProfileExtractor().extract([result(title="Pizza", snippet="Tasty")])
    assert profile.is_empty()


def test_apply_reports_fired_rules():
    extractor = ProfileExtractor()
    profile = PersonProfile()

    fired = extractor.apply(
        profile, result(title="Jane Doe - CTO", url="https://linkedin.com/in/jane")
    )

    assert fired == ["linkedin_link", "linkedin_name"]


def test_custom_rules_can_be_supplied():
    company_rule = ProfileRule(
        "company_from_title",
        lambda r: " at " in r.title,
        "company",
        lambda r: r.title.split(" at ", 1)[1].strip(),
    )
    profile = ProfileExtractor(rules=[company_rule]).extract(
        [result(title="Engineer at Acme Corp")]
    )
    assert profile.company == "Acme Corp"
