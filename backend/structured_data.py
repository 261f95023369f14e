"""schema.org JSON-LD builders and the per-page-type composer."""

from typing import Any

from config import ORG_NAME, REGION, SITE_URL

SCHEMA_CONTEXT = "https://schema.org"


def organization_schema(base_url: str = SITE_URL) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": ORG_NAME,
        "url": base_url,
        "logo": f"{base_url}/logo.png",
        "description": f"Leading construction and engineering company in {REGION['name']}",
        "address": {
            "@type": "PostalAddress",
            "addressCountry": REGION["country_code"],
            "addressRegion": REGION["capital"],
            "addressLocality": REGION["capital"],
            "postalCode": REGION["postal_code"],
        },
        "contactPoint": {
            "@type": "ContactPoint",
            "telephone": REGION["telephone"],
            "contactType": "customer service",
            "areaServed": REGION["country_code"],
            "availableLanguage": list(REGION["languages"]),
        },
        "sameAs": list(REGION["same_as"]),
        "foundingDate": REGION["founding_date"],
        "areaServed": {"@type": "Country", "name": REGION["name"]},
        "serviceArea": {
            "@type": "GeoCircle",
            "geoMidpoint": {
                "@type": "GeoCoordinates",
                "latitude": REGION["latitude"],
                "longitude": REGION["longitude"],
            },
            "geoRadius": REGION["service_radius_m"],
        },
    }


def local_business_schema(base_url: str = SITE_URL) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "LocalBusiness",
        "@id": f"{base_url}/#LocalBusiness",
        "name": ORG_NAME,
        "image": f"{base_url}/logo.png",
        "telephone": REGION["telephone"],
        "email": REGION["email"],
        "address": {
            "@type": "PostalAddress",
            "streetAddress": REGION["street_address"],
            "addressLocality": REGION["capital"],
            "addressRegion": REGION["capital_region"],
            "postalCode": REGION["postal_code"],
            "addressCountry": REGION["country_code"],
        },
        "geo": {
            "@type": "GeoCoordinates",
            "latitude": REGION["latitude"],
            "longitude": REGION["longitude"],
        },
        "url": base_url,
        "openingHoursSpecification": [
            {
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
                "opens": "08:00",
                "closes": "17:00",
            },
            {
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": "Saturday",
                "opens": "09:00",
                "closes": "13:00",
            },
        ],
        "priceRange": "$$",
        "areaServed": REGION["name"],
    }


def service_schema(service: dict, base_url: str = SITE_URL) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "@id": f"{base_url}/services/{service.get('id')}#Service",
        "name": service.get("title"),
        "description": service.get("description"),
        "provider": {"@type": "Organization", "name": ORG_NAME, "url": base_url},
        "areaServed": REGION["name"],
        "serviceType": service.get("category") or "Construction Service",
        "image": service.get("image_url"),
    }


def project_schema(project: dict, base_url: str = SITE_URL) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Project",
        "@id": f"{base_url}/projects/{project.get('id')}#Project",
        "name": project.get("title"),
        "description": project.get("description"),
        "image": project.get("image_url"),
        "location": project.get("location"),
        "startDate": project.get("start_date"),
        "endDate": project.get("end_date"),
        "creator": {"@type": "Organization", "name": ORG_NAME},
    }


def contact_page_schema(base_url: str = SITE_URL) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "ContactPage",
        "@id": f"{base_url}/contact#ContactPage",
        "name": f"Contact {ORG_NAME}",
        "description": f"Contact {ORG_NAME} for construction and engineering services in {REGION['name']}",
        "mainEntity": {
            "@type": "Organization",
            "name": ORG_NAME,
            "contactPoint": {
                "@type": "ContactPoint",
                "telephone": REGION["telephone"],
                "contactType": "customer service",
                "email": REGION["email"],
            },
        },
    }


def breadcrumb_schema(crumbs: list[tuple[str, str]], base_url: str = SITE_URL) -> dict[str, Any]:
    """BreadcrumbList from (name, relative path) pairs; positions are 1-based."""
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": index,
                "name": name,
                "item": f"{base_url}{path}",
            }
            for index, (name, path) in enumerate(crumbs, start=1)
        ],
    }


def compose_structured_data(
    page_type: str,
    page_id: str | None = None,
    data: dict | None = None,
    base_url: str = SITE_URL,
) -> list[dict[str, Any]]:
    """
    Ordered JSON-LD list for a page. Organization always comes first.

    service/project pages only get their schema and breadcrumb when `data` is
    supplied; unknown page types yield the Organization schema alone.
    """
    base_url = base_url.rstrip("/")
    schemas = [organization_schema(base_url)]

    if page_type == "home":
        schemas.append(local_business_schema(base_url))
        schemas.append(breadcrumb_schema([("Home", "/")], base_url))

    elif page_type == "service":
        if data:
            item_id = data.get("id", page_id)
            schemas.append(service_schema({**data, "id": item_id}, base_url))
            schemas.append(
                breadcrumb_schema(
                    [("Home", "/"), ("Services", "/services"), (data.get("title"), f"/services/{item_id}")],
                    base_url,
                )
            )

    elif page_type == "project":
        if data:
            item_id = data.get("id", page_id)
            schemas.append(project_schema({**data, "id": item_id}, base_url))
            schemas.append(
                breadcrumb_schema(
                    [("Home", "/"), ("Projects", "/projects"), (data.get("title"), f"/projects/{item_id}")],
                    base_url,
                )
            )

    elif page_type == "contact":
        schemas.append(contact_page_schema(base_url))
        schemas.append(breadcrumb_schema([("Home", "/"), ("Contact", "/contact")], base_url))

    return schemas
