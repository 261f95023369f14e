from database import create_robots_directive, create_seo_configuration, insert_project, insert_service

SITEMAP_CACHE = "public, max-age=86400, s-maxage=86400"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_sitemap_endpoint_headers_and_body(client, conn):
    insert_service(conn, title="Roofing")

    response = client.get("/sitemap.xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.headers["cache-control"] == SITEMAP_CACHE
    assert response.text.count("<url>") == 6


def test_images_sitemap_endpoint(client, conn):
    insert_service(conn, title="Painting", images=["https://example.test/a.jpg"])
    insert_project(conn, title="Bridge")

    response = client.get("/sitemap-images.xml")

    assert response.status_code == 200
    assert response.text.count("<url>") == 1
    assert response.text.count("<image:image>") == 1


def test_extension_sitemaps_are_empty_urlsets(client):
    for path in ("/sitemap-videos.xml", "/sitemap-news.xml"):
        response = client.get(path)
        assert response.status_code == 200
        assert "<url>" not in response.text
        assert response.text.endswith("</urlset>")


def test_sitemap_store_failure_returns_500(client, conn):
    conn.execute("DROP TABLE projects")
    conn.commit()

    response = client.get("/sitemap-projects.xml")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate projects sitemap"}


def _insert_raw_config(conn, page_type, keywords):
    conn.execute(
        """
        INSERT INTO seo_configurations (page_type, title, keywords, is_active, created_at, updated_at)
        VALUES (?, 'Broken', ?, 1, '2024-01-01T00:00:00+00:00', '2024-01-01T00:00:00+00:00')
        """,
        (page_type, keywords),
    )
    conn.commit()


def test_sitemap_bad_timestamp_returns_500(client, conn):
    insert_service(conn, title="Roofing", updated_at="last tuesday")

    response = client.get("/sitemap-services.xml")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate services sitemap"}


def test_meta_store_failure_returns_json_error(client, conn):
    conn.execute("DROP TABLE seo_configurations")
    conn.commit()

    response = client.get("/api/seo/meta/home")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to generate meta tags"}


def test_meta_undecodable_config_returns_json_error(client, conn):
    _insert_raw_config(conn, "home", "roofs, walls")

    response = client.get("/api/seo/meta/home")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"success": False, "error": "Failed to generate meta tags"}


def test_config_list_undecodable_row_returns_json_error(client, conn):
    _insert_raw_config(conn, "about", "{not json")

    response = client.get("/api/seo/config")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to list SEO configurations"}


def test_robots_endpoint(client, conn):
    create_robots_directive(conn, directive="disallow", value="/admin/")

    response = client.get("/robots.txt")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.headers["cache-control"] == SITEMAP_CACHE
    assert "User-agent: *\nDisallow: /admin/\n" in response.text
    assert response.text.count("Sitemap: ") == 4


def test_meta_endpoint_get_and_post(client, conn):
    create_seo_configuration(conn, {"page_type": "service", "page_id": "5", "title": "B", "keywords": ["roofs"]})

    got = client.get("/api/seo/meta/service/5")
    posted = client.post("/api/seo/meta/service/5", json={"title": "C"})

    assert got.status_code == 200
    assert got.headers["cache-control"] == "public, max-age=3600, s-maxage=3600"
    body = got.json()
    assert body["success"] is True
    assert body["data"]["title"] == "B"
    assert body["data"]["keywords"] == ["roofs"]
    assert body["data"]["open_graph"]["title"] == "B"

    assert posted.json()["data"]["title"] == "C"
    assert posted.json()["data"]["keywords"] == ["roofs"]


def test_meta_endpoint_without_page_id(client):
    body = client.get("/api/seo/meta/home").json()

    assert body["success"] is True
    assert body["data"]["custom_meta"]["geo.region"] == "KE"


def test_head_endpoint_renders_html(client):
    response = client.post("/api/seo/head/home", json={"title": "Welcome"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.text.startswith("<title>Welcome</title>")
    assert '<script type="application/ld+json">' in response.text


def test_structured_data_endpoint_with_body(client):
    response = client.post("/api/seo/structured-data/service/4", json={"id": 4, "title": "Roofing"})

    data = response.json()["data"]
    assert [schema["@type"] for schema in data] == ["Organization", "Service", "BreadcrumbList"]


def test_structured_data_endpoint_loads_record_from_store(client, conn):
    project_id = insert_project(conn, title="Bridge", location="Nakuru")

    data = client.get(f"/api/seo/structured-data/project/{project_id}").json()["data"]

    assert [schema["@type"] for schema in data] == ["Organization", "Project", "BreadcrumbList"]
    assert data[1]["name"] == "Bridge"
    assert data[1]["location"] == "Nakuru"


def test_structured_data_endpoint_unknown_page(client):
    data = client.get("/api/seo/structured-data/blog").json()["data"]
    assert [schema["@type"] for schema in data] == ["Organization"]


def test_analyze_requires_url_and_content(client):
    for payload in ({}, {"url": "https://example.test"}, {"content": "<html></html>"}, {"url": "", "content": "x"}):
        response = client.post("/api/seo/analyze", json=payload)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "URL and content are required"}


def test_analyze_without_body(client):
    response = client.post("/api/seo/analyze")
    assert response.status_code == 400


def test_analyze_rejects_non_string_content(client):
    response = client.post("/api/seo/analyze", json={"url": "https://example.test", "content": 123})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "URL and content are required"}


def test_analyze_rejects_malformed_json(client):
    response = client.post(
        "/api/seo/analyze",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "URL and content are required"}


def test_invalid_body_elsewhere_uses_error_envelope(client):
    response = client.post("/api/seo/robots", json={"directive": "", "value": "/admin/"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request body"}


def test_analyze_returns_result(client):
    response = client.post(
        "/api/seo/analyze",
        json={"url": "https://example.test", "content": "<html><title>Hi</title></html>"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["issues"][0] == {"severity": "warning", "message": "Title is too short (< 30 characters)"}
    assert 0 <= body["data"]["score"] <= 100


def test_config_crud(client):
    created = client.post(
        "/api/seo/config",
        json={"page_type": "about", "title": "About", "custom_meta": {"rating": "general"}},
    )
    assert created.status_code == 201
    config = created.json()["data"]
    assert config["page_type"] == "about"
    assert config["is_active"] is True

    fetched = client.get("/api/seo/config/about").json()
    assert fetched["data"]["id"] == config["id"]

    updated = client.put(f"/api/seo/config/{config['id']}", json={"title": "About us"})
    assert updated.json()["data"]["title"] == "About us"
    assert updated.json()["data"]["custom_meta"] == {"rating": "general"}

    listed = client.get("/api/seo/config").json()["data"]
    assert [row["id"] for row in listed] == [config["id"]]

    assert client.get("/api/seo/meta/about").json()["data"]["title"] == "About us"


def test_config_lookup_miss_returns_null_data(client):
    body = client.get("/api/seo/config/unknown/1").json()
    assert body == {"success": True, "data": None, "error": None}


def test_config_update_unknown_id(client):
    response = client.put("/api/seo/config/999", json={"title": "Nope"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "SEO configuration not found"}


def test_robots_directive_passthrough(client):
    created = client.post("/api/seo/robots", json={"user_agent": "Googlebot", "directive": "Crawl-delay", "value": "1"})
    assert created.status_code == 201
    assert created.json()["data"]["directive"] == "crawl-delay"

    listed = client.get("/api/seo/robots").json()["data"]
    assert [row["user_agent"] for row in listed] == ["Googlebot"]
    assert "User-agent: Googlebot\nCrawl-delay: 1\n" in client.get("/robots.txt").text


def test_regional_endpoint(client):
    body = client.get("/api/seo/region", params={"city": "Kisumu"}).json()

    assert body["success"] is True
    assert body["data"]["title"].startswith("Construction Services in Kisumu")
