from conftest import BASE_URL
from database import create_seo_configuration, update_seo_configuration
from meta_tags import (
    apply_overrides,
    default_meta_bundle,
    regional_landing_meta,
    render_head_tags,
    resolve_meta_tags,
)
from schemas import SEOMetaBundle


def test_defaults_when_no_configuration(conn):
    bundle = resolve_meta_tags(conn, "home", base_url=BASE_URL)

    assert bundle == default_meta_bundle(BASE_URL)
    assert bundle.title.startswith("AKIBEKS Engineering Solutions")
    assert bundle.robots == "index,follow"
    assert bundle.open_graph.type == "website"
    assert bundle.open_graph.url == BASE_URL
    assert bundle.twitter.card == "summary_large_image"
    assert bundle.structured_data["@type"] == "Organization"
    assert bundle.custom_meta["geo.region"] == "KE"


def test_title_precedence_default_config_override(conn):
    default_title = resolve_meta_tags(conn, "service", "7", base_url=BASE_URL).title

    create_seo_configuration(conn, {"page_type": "service", "page_id": "7", "title": "B"})

    assert default_title == default_meta_bundle(BASE_URL).title
    assert resolve_meta_tags(conn, "service", "7", base_url=BASE_URL).title == "B"
    assert resolve_meta_tags(conn, "service", "7", {"title": "C"}, base_url=BASE_URL).title == "C"


def test_missing_config_fields_fall_back_to_defaults(conn):
    create_seo_configuration(conn, {"page_type": "about", "title": "About us", "og_image": "https://x.test/og.png"})

    bundle = resolve_meta_tags(conn, "about", base_url=BASE_URL)
    defaults = default_meta_bundle(BASE_URL)

    assert bundle.description == defaults.description
    assert bundle.keywords == defaults.keywords
    assert bundle.robots == defaults.robots
    assert bundle.open_graph.title == "About us"
    assert bundle.open_graph.type == "website"
    assert bundle.twitter.title == "About us"
    assert bundle.twitter.image == "https://x.test/og.png"
    assert bundle.twitter.card == "summary_large_image"


def test_config_structured_data_and_custom_meta_are_merged(conn):
    create_seo_configuration(
        conn,
        {
            "page_type": "contact",
            "structured_data": {"name": "Contact desk", "email": "desk@example.test"},
            "custom_meta": {"geo.placename": "Nairobi", "rating": "general"},
        },
    )

    bundle = resolve_meta_tags(conn, "contact", base_url=BASE_URL)

    assert bundle.structured_data["@type"] == "Organization"
    assert bundle.structured_data["name"] == "Contact desk"
    assert bundle.structured_data["email"] == "desk@example.test"
    assert bundle.custom_meta["geo.placename"] == "Nairobi"
    assert bundle.custom_meta["rating"] == "general"
    assert bundle.custom_meta["geo.region"] == "KE"


def test_overrides_replace_nested_objects(conn):
    create_seo_configuration(conn, {"page_type": "home", "custom_meta": {"rating": "general"}})

    bundle = resolve_meta_tags(
        conn,
        "home",
        overrides={"structured_data": {"@type": "WebPage"}, "custom_meta": {"only": "this"}},
        base_url=BASE_URL,
    )

    assert bundle.structured_data == {"@type": "WebPage"}
    assert bundle.custom_meta == {"only": "this"}


def test_page_specific_config_beats_page_type_config(conn):
    create_seo_configuration(conn, {"page_type": "project", "title": "All projects"})
    create_seo_configuration(conn, {"page_type": "project", "page_id": "42", "title": "Bridge"})

    assert resolve_meta_tags(conn, "project", "42", base_url=BASE_URL).title == "Bridge"
    assert resolve_meta_tags(conn, "project", "9", base_url=BASE_URL).title == "All projects"
    assert resolve_meta_tags(conn, "project", base_url=BASE_URL).title == "All projects"


def test_inactive_configuration_is_ignored(conn):
    row = create_seo_configuration(conn, {"page_type": "home", "title": "Hidden"})
    update_seo_configuration(conn, row["id"], {"is_active": False})

    assert resolve_meta_tags(conn, "home", base_url=BASE_URL).title == default_meta_bundle(BASE_URL).title


def test_null_override_for_required_field_is_ignored():
    bundle = default_meta_bundle(BASE_URL)
    updated = apply_overrides(bundle, {"title": None, "canonical": "https://x.test/c"})

    assert updated.title == bundle.title
    assert updated.canonical == "https://x.test/c"


def test_render_head_tags_escapes_and_skips_absent_fields():
    bundle = SEOMetaBundle(
        title="Roofs & Walls",
        description='Say "hi"',
        keywords=["roofs", "walls"],
        structured_data={"@type": "Thing", "name": "</script>"},
        custom_meta={"geo.region": "KE"},
    )

    head = render_head_tags(bundle)

    assert "<title>Roofs &amp; Walls</title>" in head
    assert '<meta name="description" content="Say &quot;hi&quot;">' in head
    assert '<meta name="keywords" content="roofs, walls">' in head
    assert '<meta name="geo.region" content="KE">' in head
    assert "canonical" not in head
    assert "og:" not in head
    assert "twitter:" not in head
    assert head.count('<script type="application/ld+json">') == 1
    assert "<\\/script>" in head


def test_render_head_tags_for_default_bundle():
    head = render_head_tags(default_meta_bundle(BASE_URL))

    assert '<meta property="og:type" content="website">' in head
    assert f'<meta property="og:url" content="{BASE_URL}">' in head
    assert '<meta name="twitter:card" content="summary_large_image">' in head
    assert '<meta name="robots" content="index,follow">' in head


def test_regional_landing_meta_prefers_city():
    meta = regional_landing_meta(county="Kiambu County", city="Thika", service_type="Roofing")

    assert meta.title == "Roofing in Thika - AKIBEKS Engineering Solutions"
    assert meta.keywords[0] == "Roofing Thika"
    assert meta.structured_data[0]["address"]["addressLocality"] == "Thika"
    assert meta.structured_data[0]["areaServed"]["name"] == "Kiambu County"


def test_regional_landing_meta_defaults_to_region():
    meta = regional_landing_meta()

    assert meta.title == "Construction Services in Kenya - AKIBEKS Engineering Solutions"
    assert meta.keywords[0] == "construction Kenya"
    assert meta.structured_data[0]["serviceType"] == "Construction Services"
