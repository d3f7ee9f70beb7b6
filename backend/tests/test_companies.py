from conftest import COORDS


def test_company_requires_coordinates(client, make_user):
    _, headers = make_user("recruiter")
    r = client.post("/api/company", headers=headers, json={"name": "No Map Surf"})
    assert r.status_code == 400
    assert "coordinates" in r.json()["detail"]

    r = client.post("/api/company", headers=headers, json={"name": "Bad", "coordinates": {"latitude": 123, "longitude": 0}})
    assert r.status_code == 422


def test_company_create_get_and_single_company_rule(client, make_user):
    _, headers = make_user("recruiter")
    r = client.post("/api/company", headers=headers, json={
        "name": "Dakhla Spot",
        "address": {"city": "Dakhla", "country": "ma"},
        "coordinates": COORDS,
        "socialMedia": {"instagram": "@dakhla"},
        "offeredActivities": ["Kitesurfing"],
    })
    assert r.status_code == 201
    company = r.json()["company"]
    assert company["address"]["country"] == "MA"
    assert company["coordinates"] == COORDS
    assert company["socialMedia"]["instagram"] == "@dakhla"

    again = client.post("/api/company", headers=headers, json={"name": "Second", "coordinates": COORDS})
    assert again.status_code == 400

    mine = client.get("/api/company", headers=headers)
    assert mine.json()["company"]["name"] == "Dakhla Spot"


def test_company_update_cannot_clear_coordinates(client, recruiter):
    _, headers = recruiter
    r = client.put("/api/company", headers=headers, json={"coordinates": None})
    assert r.status_code == 400


def test_company_rename_propagates_to_jobs(client, recruiter, post_job):
    _, headers = recruiter
    job = post_job(headers)
    r = client.put("/api/company", headers=headers, json={"name": "Tarifa Wind School"})
    assert r.status_code == 200
    assert client.get(f"/api/jobs/{job['id']}").json()["job"]["company"] == "Tarifa Wind School"


def test_public_company_page_lists_published_jobs(client, recruiter, post_job):
    _, headers = recruiter
    post_job(headers, title="Visible")
    post_job(headers, title="Draft", published=False)
    company_id = client.get("/api/company", headers=headers).json()["company"]["id"]

    r = client.get(f"/api/companies/{company_id}")
    assert r.status_code == 200
    assert [j["title"] for j in r.json()["jobs"]] == ["Visible"]
    assert client.get("/api/companies/9999").status_code == 404


def test_companies_list_featured_filter(client, recruiter):
    r = client.get("/api/companies-list")
    assert len(r.json()["companies"]) == 1
    assert client.get("/api/companies-list", params={"featured": "true"}).json()["companies"] == []


def test_null_company_lists_are_stored_empty(client, recruiter):
    _, headers = recruiter
    r = client.put("/api/company", headers=headers, json={"offeredActivities": None, "pictures": None})
    assert r.status_code == 200, r.text
    assert r.json()["company"]["offeredActivities"] == []
    assert client.get("/api/companies-list").status_code == 200
